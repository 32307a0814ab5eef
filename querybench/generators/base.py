"""Devops query generator shared by every dialect.

A generator owns the benchmark time range, the target database name and a
random stream. Each catalog entry is a fill function that writes one
canonical query shape into a pooled query record.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from functools import partial

import numpy as np

from querybench import catalog
from querybench.catalog import CatalogEntry
from querybench.dispatch import Dispatcher
from querybench.errors import UnsupportedQueryError
from querybench.queries.base import Query
from querybench.queries.pool import QueryPool
from querybench.sampling import host_tag, sample_hosts
from querybench.timerange import TimeRange, format_duration

logger = logging.getLogger(__name__)

HOUR = timedelta(hours=1)
MINUTE = timedelta(minutes=1)
DAY = timedelta(hours=24)

# (name, hosts, window) for the max-cpu shapes, bucketed by one minute
N_HOST_SHAPES = [
    (catalog.MAX_CPU_1_HOST_1_HR, 1, HOUR),
    (catalog.MAX_CPU_2_HOST_1_HR, 2, HOUR),
    (catalog.MAX_CPU_4_HOST_1_HR, 4, HOUR),
    (catalog.MAX_CPU_8_HOST_1_HR, 8, HOUR),
    (catalog.MAX_CPU_16_HOST_1_HR, 16, HOUR),
    (catalog.MAX_CPU_32_HOST_1_HR, 32, HOUR),
    (catalog.MAX_CPU_1_HOST_12_HR, 1, 12 * HOUR),
]


class DevopsGenerator(ABC):
    """Produces devops queries for one dialect.

    Subclasses name their dialect and pool, and write the target name into
    each finished query.

    Example:
        >>> gen = CassandraDevops("benchmark_db", start, end, seed=42)
        >>> q = gen.new_query()
        >>> gen.fill("max-cpu-4-host-1-hr", q, scale_var=8)
        >>> q.aggregation_type
        'max'
    """

    dialect: str = ""
    label_prefix: str = ""

    def __init__(
        self,
        target_name: str,
        start: datetime,
        end: datetime,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            target_name: Keyspace or database the queries address
            start: First instant of the benchmark data
            end: Instant just past the benchmark data
            seed: Seed for a fresh random stream (ignored when rng is given)
            rng: Random stream to use instead of seeding a new one

        Raises:
            InvalidTimeRangeError: If start is not before end
        """
        self.target_name = target_name
        self.all_interval = TimeRange(start, end)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.catalog: dict[str, CatalogEntry] = self._build_catalog()
        self._dispatcher: Dispatcher | None = None
        logger.debug("created %r with %d catalog entries", self, len(self.catalog))

    @property
    @abstractmethod
    def pool(self) -> QueryPool:
        """Pool the dialect's queries are recycled through."""

    @abstractmethod
    def _finish(self, q: Query) -> None:
        """Write dialect-specific fields once the common ones are set."""

    def _build_catalog(self) -> dict[str, CatalogEntry]:
        entries = []
        for name, nhosts, window in N_HOST_SHAPES:
            entries.append(
                CatalogEntry(
                    name=name,
                    label=self._n_hosts_label(nhosts, window),
                    fill=partial(self.max_cpu_usage_n_hosts, nhosts=nhosts, window=window),
                    hosts=nhosts,
                )
            )
        entries.append(
            CatalogEntry(
                name=catalog.MAX_CPU_DAY_BY_HOUR,
                label=f"{self.label_prefix} max cpu, rand 1day by 1hour",
                fill=self.max_cpu_usage_day_by_hour,
                supported=False,
            )
        )
        entries.append(
            CatalogEntry(
                name=catalog.MEAN_CPU_ALL_HOSTS_DAY_BY_HOUR,
                label=self._all_hosts_label(),
                fill=self.mean_cpu_usage_day_by_hour_all_hosts,
            )
        )
        return {entry.name: entry for entry in entries}

    def _n_hosts_label(self, nhosts: int, window: timedelta) -> str:
        return f"{self.label_prefix} max cpu, rand {nhosts:4d} hosts, rand {format_duration(window)} by 1m"

    def _all_hosts_label(self) -> str:
        return f"{self.label_prefix} mean cpu, all hosts, rand 1day by 1hour"

    def new_query(self) -> Query:
        return self.pool.get()

    def release(self, q: Query) -> None:
        self.pool.put(q)

    def eligible(self, scale_var: int) -> list[str]:
        """Supported catalog entries whose host count fits the fleet."""
        return [
            name
            for name, entry in self.catalog.items()
            if entry.supported and entry.fits(scale_var)
        ]

    def fill(self, name: str, q: Query, scale_var: int) -> None:
        """Populate q with the catalog entry called name.

        Raises:
            KeyError: If name is not in the catalog
            UnsupportedQueryError: If the entry is a placeholder
        """
        self.catalog[name].fill(q, scale_var)

    def dispatch(self, i: int, scale_var: int) -> Query:
        """Pooled query for iteration i, round-robin over eligible entries."""
        if self._dispatcher is None:
            self._dispatcher = Dispatcher(self)
        return self._dispatcher.dispatch(i, scale_var)

    def spawn(self, n: int) -> list["DevopsGenerator"]:
        """Independent generators for n workers.

        Children share the time range and target and get statistically
        independent child streams of this generator's random state.
        """
        return [
            type(self)(
                self.target_name,
                self.all_interval.start,
                self.all_interval.end,
                rng=child,
            )
            for child in self.rng.spawn(n)
        ]

    def _populate(
        self,
        q: Query,
        label: str,
        window: TimeRange,
        aggregation: str,
        group_by: timedelta,
        tag_sets: list[list[str]],
        group_by_tags: list[str],
    ) -> None:
        q.human_label = label
        q.human_description = f"{label}: {window.start_string()}"
        q.aggregation_type = aggregation
        q.measurement_name = "cpu"
        q.field_name = "usage_user"
        q.time_start = window.start
        q.time_end = window.end
        q.group_by_duration = group_by
        q.tag_sets = tag_sets
        q.group_by_tags = group_by_tags
        self._finish(q)

    # SELECT max(usage_user) from cpu where (hostname = '$HOSTNAME_1' or ... or hostname = '$HOSTNAME_N')
    # and time >= '$HOUR_START' and time < '$HOUR_END' group by time(1m)
    def max_cpu_usage_n_hosts(self, q: Query, scale_var: int, nhosts: int, window: timedelta) -> None:
        interval = self.all_interval.rand_window(window, self.rng)
        hosts = sample_hosts(scale_var, nhosts, self.rng)
        tag_set = [host_tag(n) for n in hosts]

        self._populate(
            q,
            label=self._n_hosts_label(nhosts, window),
            window=interval,
            aggregation="max",
            group_by=MINUTE,
            tag_sets=[tag_set],
            group_by_tags=[],
        )

    def max_cpu_usage_day_by_hour(self, q: Query, scale_var: int) -> None:
        raise UnsupportedQueryError(catalog.MAX_CPU_DAY_BY_HOUR)

    # SELECT mean(usage_user) from cpu where time >= '$DAY_START' and time < '$DAY_END'
    # group by time(1h),hostname
    def mean_cpu_usage_day_by_hour_all_hosts(self, q: Query, scale_var: int) -> None:
        interval = self.all_interval.rand_window(DAY, self.rng)

        self._populate(
            q,
            label=self._all_hosts_label(),
            window=interval,
            aggregation="avg",
            group_by=HOUR,
            tag_sets=[],
            group_by_tags=["hostname"],
        )

    def describe(self) -> list[dict]:
        """Catalog summary rows for display."""
        return [
            {"name": e.name, "label": e.label, "hosts": e.hosts, "supported": e.supported}
            for e in self.catalog.values()
        ]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(target_name={self.target_name!r}, "
            f"start={self.all_interval.start_string()!r}, end={self.all_interval.end_string()!r})"
        )
