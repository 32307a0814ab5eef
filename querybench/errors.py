"""Exception types raised by the query generation engine.

Construction and precondition failures (bad time range, oversized window,
oversized host request) are fatal configuration errors. An unsupported
catalog entry is the one non-fatal signal: drivers catch it and skip.
"""


class QueryGenError(Exception):
    """Base class for all query generation errors."""


class InvalidTimeRangeError(QueryGenError, ValueError):
    """Benchmark time range is empty or reversed."""


class WindowTooLargeError(QueryGenError, ValueError):
    """Requested window is wider than the time range it is drawn from."""


class HostSampleError(QueryGenError, ValueError):
    """More hosts requested than the simulated fleet contains."""


class PoolError(QueryGenError, RuntimeError):
    """A pooled query was released while already idle."""


class UnsupportedQueryError(QueryGenError):
    """Catalog entry exists but has no query shape yet.

    Attributes:
        entry: Name of the catalog entry that was requested
    """

    def __init__(self, entry: str) -> None:
        super().__init__(f"query shape '{entry}' is not supported yet")
        self.entry = entry
