"""Generation driver.

Runs the dispatch loop and hands filled queries to a sink.
"""

from querybench.runners.query_driver import QueryDriver

__all__ = [
    "QueryDriver",
]
