"""Thread-safe free list of reusable query records."""

import logging
import threading
from typing import Generic, TypeVar

from querybench.errors import PoolError
from querybench.queries.base import Query

logger = logging.getLogger(__name__)

Q = TypeVar("Q", bound=Query)


class QueryPool(Generic[Q]):
    """Recycles query records of one dialect.

    `get` hands exclusive ownership of a record to the caller and `put`
    takes it back. A released record is reset, so nothing from the previous
    fill is visible to the next owner. `get` never blocks: an empty pool
    allocates.

    Example:
        >>> pool = QueryPool(CassandraQuery)
        >>> q = pool.get()
        >>> ...  # fill and send
        >>> pool.put(q)
    """

    def __init__(self, query_cls: type[Q], max_size: int | None = None) -> None:
        """Initialize the pool.

        Args:
            query_cls: Query class this pool hands out
            max_size: Most idle records kept; extra releases are dropped
        """
        self.query_cls = query_cls
        self.max_size = max_size
        self._idle: list[Q] = []
        self._idle_ids: set[int] = set()
        self._lock = threading.Lock()
        self.allocated = 0
        self.reused = 0

    def get(self) -> Q:
        with self._lock:
            if self._idle:
                q = self._idle.pop()
                self._idle_ids.discard(id(q))
                self.reused += 1
                return q
            self.allocated += 1
        return self.query_cls()

    def put(self, q: Q) -> None:
        """Return a record to the pool.

        Raises:
            TypeError: If q belongs to another dialect
            PoolError: If q is already idle in this pool
        """
        if type(q) is not self.query_cls:
            raise TypeError(f"{self.query_cls.__name__} pool cannot take {type(q).__name__}")
        q.reset()
        with self._lock:
            if id(q) in self._idle_ids:
                raise PoolError(f"{type(q).__name__} released twice without an intervening get")
            if self.max_size is not None and len(self._idle) >= self.max_size:
                logger.debug("%s pool full at %d, dropping released query", self.query_cls.__name__, self.max_size)
                return
            self._idle.append(q)
            self._idle_ids.add(id(q))

    @property
    def idle(self) -> int:
        with self._lock:
            return len(self._idle)

    def clear(self) -> None:
        with self._lock:
            self._idle.clear()
            self._idle_ids.clear()

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"allocated": self.allocated, "reused": self.reused, "idle": len(self._idle)}
