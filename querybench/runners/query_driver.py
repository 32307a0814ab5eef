"""QueryDriver for running the generation loop.

Calls the dispatcher for i = 0..total-1, hands each filled query to a sink
(the serializer or sender), then recycles it. Unsupported catalog entries
are skipped and counted; every other error stops the run.
"""

import logging
import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from tqdm import tqdm

from querybench.benchmark_models import GenerationStats
from querybench.dispatch import Dispatcher
from querybench.errors import UnsupportedQueryError
from querybench.generators.base import DevopsGenerator
from querybench.queries.base import Query

logger = logging.getLogger(__name__)

Sink = Callable[[Query], None]


def _discard(q: Query) -> None:
    pass


class _Tally:
    """Counters for one worker, merged once the worker finishes."""

    def __init__(self) -> None:
        self.by_label: Counter = Counter()
        self.skipped: Counter = Counter()


class QueryDriver:
    """Drives one generator through a whole run.

    With workers > 1, worker w handles iterations w, w + workers, ... using
    its own spawned generator, so no random state is shared between
    threads. The pool is shared and the sink is called under a lock, so
    sinks need not be thread safe. Output order across workers is not
    defined.

    Example:
        >>> gen = CassandraDevops("benchmark_db", start, end, seed=42)
        >>> driver = QueryDriver(gen, workers=4)
        >>> stats = driver.run(total_queries=100_000, scale_var=100, sink=writer)
        >>> print(f"{stats.queries_per_second:,.0f} queries/sec")
    """

    def __init__(
        self,
        generator: DevopsGenerator,
        query_type: str = "all",
        weights: dict[str, int] | None = None,
        workers: int = 1,
        include_unsupported: bool = False,
    ) -> None:
        """Initialize the driver.

        Args:
            generator: Dialect generator (seeded for reproducible runs)
            query_type: "all", a catalog name, or a short alias
            weights: Optional weighted schedule, catalog name to weight
            workers: Number of generating threads
            include_unsupported: Rotate over placeholder entries too (they are skipped)
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.generator = generator
        self.query_type = query_type
        self.weights = weights
        self.workers = workers
        self.include_unsupported = include_unsupported
        # Validates query_type and weights against the catalog up front
        self.dispatcher = self._dispatcher_for(generator)
        self._sink_lock = threading.Lock()
        self._stop = threading.Event()
        self._warned: set[str] = set()

    def _dispatcher_for(self, generator: DevopsGenerator) -> Dispatcher:
        return Dispatcher(
            generator,
            query_type=self.query_type,
            weights=self.weights,
            include_unsupported=self.include_unsupported,
        )

    def run(
        self,
        total_queries: int,
        scale_var: int,
        sink: Sink | None = None,
        show_progress: bool = False,
    ) -> GenerationStats:
        """Generate total_queries queries for a fleet of scale_var hosts.

        Args:
            total_queries: Number of iterations to run
            scale_var: Simulated fleet size
            sink: Called with each filled query; must not keep it
            show_progress: Whether to show a progress bar

        Returns:
            Run summary

        Raises:
            QueryGenError: Any fatal precondition failure (bad window, host count)
        """
        if total_queries < 0:
            raise ValueError(f"total_queries must be non-negative, got {total_queries}")
        if scale_var <= 0:
            raise ValueError(f"bad scale var: {scale_var}")

        sink = sink or _discard
        pool = self.generator.pool
        before = pool.stats()
        self._stop.clear()
        start_time = time.perf_counter()

        logger.info(
            "generating %d %s queries (type=%s, scale var=%d, workers=%d)",
            total_queries,
            self.generator.dialect,
            self.query_type,
            scale_var,
            self.workers,
        )

        with tqdm(total=total_queries, desc="Generating", unit="q", disable=not show_progress) as progress:
            if self.workers == 1:
                tallies = [self._work(self.dispatcher, range(total_queries), scale_var, sink, progress)]
            else:
                children = self.generator.spawn(self.workers)
                with ThreadPoolExecutor(max_workers=self.workers) as executor:
                    futures = [
                        executor.submit(
                            self._work,
                            self._dispatcher_for(child),
                            range(w, total_queries, self.workers),
                            scale_var,
                            sink,
                            progress,
                        )
                        for w, child in enumerate(children)
                    ]
                    tallies = [future.result() for future in futures]

        elapsed = time.perf_counter() - start_time
        after = pool.stats()

        by_label: Counter = Counter()
        skipped: Counter = Counter()
        for tally in tallies:
            by_label.update(tally.by_label)
            skipped.update(tally.skipped)

        stats = GenerationStats(
            dialect=self.generator.dialect,
            query_type=self.query_type,
            total_requested=total_queries,
            generated=sum(by_label.values()),
            skipped=sum(skipped.values()),
            by_label=dict(by_label),
            skipped_entries=dict(skipped),
            pool_allocated=after["allocated"] - before["allocated"],
            pool_reused=after["reused"] - before["reused"],
            elapsed=elapsed,
        )
        logger.info(
            "generated %d queries, skipped %d, in %.2fs",
            stats.generated,
            stats.skipped,
            stats.elapsed,
        )
        return stats

    def _work(
        self,
        dispatcher: Dispatcher,
        indices: range,
        scale_var: int,
        sink: Sink,
        progress: tqdm,
    ) -> _Tally:
        tally = _Tally()
        generator = dispatcher.generator
        for i in indices:
            if self._stop.is_set():
                break
            try:
                q = dispatcher.dispatch(i, scale_var)
            except UnsupportedQueryError as e:
                tally.skipped[e.entry] += 1
                self._warn_once(e)
                with self._sink_lock:
                    progress.update(1)
                continue
            except Exception:
                self._stop.set()
                raise

            try:
                label = q.human_label
                with self._sink_lock:
                    sink(q)
                    progress.update(1)
            except Exception:
                self._stop.set()
                raise
            finally:
                generator.release(q)
            tally.by_label[label] += 1
        return tally

    def _warn_once(self, error: UnsupportedQueryError) -> None:
        with self._sink_lock:
            if error.entry in self._warned:
                return
            self._warned.add(error.entry)
        logger.warning("skipping unsupported query shape '%s'", error.entry)
