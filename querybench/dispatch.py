"""Choosing which catalog entry fires for each iteration.

Selection is a pure function of the iteration index, so a run is
reproducible given the same indices and seed; the only randomness lives in
the window and host sampling inside each fill.
"""

import logging
from collections import Counter
from typing import TYPE_CHECKING, Protocol

from querybench.catalog import ALL, CATALOG_NAMES, resolve_query_type
from querybench.queries.base import Query

if TYPE_CHECKING:
    from querybench.generators.base import DevopsGenerator

logger = logging.getLogger(__name__)


class Schedule(Protocol):
    def select(self, i: int) -> str: ...

    def names(self) -> list[str]: ...


class RoundRobinSchedule:
    """Cycles through entries in order: entry i % len(entries)."""

    def __init__(self, entries: list[str]) -> None:
        if not entries:
            raise ValueError("round-robin schedule needs at least one entry")
        self.entries = list(entries)

    def select(self, i: int) -> str:
        return self.entries[i % len(self.entries)]

    def names(self) -> list[str]:
        return list(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


class WeightedSchedule:
    """Deterministic weighted rotation.

    Expands the weights once into a cycle of length sum(weights) using
    smooth weighted round-robin, so an entry of weight w fires exactly w
    times per cycle and heavy entries are spread out rather than bunched.

    Example:
        >>> s = WeightedSchedule({"a": 2, "b": 1})
        >>> [s.select(i) for i in range(6)]
        ['a', 'b', 'a', 'a', 'b', 'a']
    """

    def __init__(self, weights: dict[str, int]) -> None:
        if not weights:
            raise ValueError("weighted schedule needs at least one entry")
        for name, weight in weights.items():
            if not isinstance(weight, int) or isinstance(weight, bool) or weight <= 0:
                raise ValueError(f"weight for '{name}' must be a positive integer, got {weight!r}")

        self.weights = dict(weights)
        total = sum(self.weights.values())
        current = {name: 0 for name in self.weights}
        self.cycle: list[str] = []
        for _ in range(total):
            for name, weight in self.weights.items():
                current[name] += weight
            best = max(current, key=lambda n: current[n])
            current[best] -= total
            self.cycle.append(best)

    def select(self, i: int) -> str:
        return self.cycle[i % len(self.cycle)]

    def names(self) -> list[str]:
        return list(self.weights)

    def __len__(self) -> int:
        return len(self.cycle)


class Dispatcher:
    """Turns an iteration index into a filled, pooled query.

    Query type "all" rotates over every supported entry whose host count
    fits the fleet; a single catalog name (or alias) always fires that
    entry; weights replace the rotation with a WeightedSchedule.

    Args:
        generator: Dialect generator that owns the catalog and pool
        query_type: "all", a catalog name, or a short alias such as "8-host-1-hr"
        weights: Catalog name or alias to integer weight
        include_unsupported: Keep placeholder entries in the "all" rotation;
            dispatching one raises UnsupportedQueryError

    Example:
        >>> dispatcher = Dispatcher(CassandraDevops("benchmark_db", start, end))
        >>> q = dispatcher.dispatch(0, scale_var=100)
        >>> dispatcher.generator.release(q)
    """

    def __init__(
        self,
        generator: "DevopsGenerator",
        query_type: str = ALL,
        weights: dict[str, int] | None = None,
        include_unsupported: bool = False,
    ) -> None:
        self.generator = generator
        self.query_type = resolve_query_type(query_type)
        self.include_unsupported = include_unsupported
        self._fixed: Schedule | None = None
        self._by_scale: dict[int, Schedule] = {}

        if weights:
            resolved = {resolve_query_type(name): weight for name, weight in weights.items()}
            if ALL in resolved:
                raise ValueError("weights must name catalog entries, not 'all'")
            self._fixed = WeightedSchedule(resolved)
        elif self.query_type != ALL:
            self._fixed = RoundRobinSchedule([self.query_type])

        if self._fixed is not None:
            unknown = [n for n in self._fixed.names() if n not in generator.catalog]
            if unknown:
                raise ValueError(f"{generator.dialect} catalog has no entries named {unknown}")

    def schedule_for(self, scale_var: int) -> Schedule:
        if self._fixed is not None:
            return self._fixed
        schedule = self._by_scale.get(scale_var)
        if schedule is None:
            if self.include_unsupported:
                names = [
                    name
                    for name in CATALOG_NAMES
                    if name in self.generator.catalog and self.generator.catalog[name].fits(scale_var)
                ]
            else:
                names = self.generator.eligible(scale_var)
            schedule = RoundRobinSchedule(names)
            self._by_scale[scale_var] = schedule
            logger.debug("scale var %d rotates over %d entries: %s", scale_var, len(names), names)
        return schedule

    def select(self, i: int, scale_var: int) -> str:
        """Catalog entry that fires for iteration i."""
        if scale_var <= 0:
            raise ValueError(f"bad scale var: {scale_var}")
        if i < 0:
            raise ValueError(f"iteration index must be non-negative, got {i}")
        return self.schedule_for(scale_var).select(i)

    def dispatch(self, i: int, scale_var: int) -> Query:
        """Fill a pooled query with the entry chosen for iteration i.

        The caller owns the returned query until it releases it back to
        the generator's pool. On any failure the query goes straight back
        to the pool before the error propagates.

        Raises:
            UnsupportedQueryError: If the chosen entry is a placeholder
            WindowTooLargeError: If the entry's window exceeds the time range
            HostSampleError: If the entry needs more hosts than scale_var
        """
        name = self.select(i, scale_var)
        q = self.generator.new_query()
        try:
            self.generator.fill(name, q, scale_var)
        except Exception:
            self.generator.release(q)
            raise
        return q

    def coverage(self, n: int, scale_var: int) -> Counter:
        """How often each entry is selected over iterations 0..n-1."""
        return Counter(self.select(i, scale_var) for i in range(n))
