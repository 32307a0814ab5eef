"""Names of the devops query shapes every dialect implements.

The catalog is the contract between generators and the dispatcher: any
dialect that registers these names can be driven interchangeably.
"""

from dataclasses import dataclass
from typing import Callable

from querybench.queries.base import Query

MAX_CPU_1_HOST_1_HR = "max-cpu-1-host-1-hr"
MAX_CPU_2_HOST_1_HR = "max-cpu-2-host-1-hr"
MAX_CPU_4_HOST_1_HR = "max-cpu-4-host-1-hr"
MAX_CPU_8_HOST_1_HR = "max-cpu-8-host-1-hr"
MAX_CPU_16_HOST_1_HR = "max-cpu-16-host-1-hr"
MAX_CPU_32_HOST_1_HR = "max-cpu-32-host-1-hr"
MAX_CPU_1_HOST_12_HR = "max-cpu-1-host-12-hr"
MAX_CPU_DAY_BY_HOUR = "max-cpu-day-by-hour"
MEAN_CPU_ALL_HOSTS_DAY_BY_HOUR = "mean-cpu-all-hosts-day-by-hour"

CATALOG_NAMES = [
    MAX_CPU_1_HOST_1_HR,
    MAX_CPU_2_HOST_1_HR,
    MAX_CPU_4_HOST_1_HR,
    MAX_CPU_8_HOST_1_HR,
    MAX_CPU_16_HOST_1_HR,
    MAX_CPU_32_HOST_1_HR,
    MAX_CPU_1_HOST_12_HR,
    MAX_CPU_DAY_BY_HOUR,
    MEAN_CPU_ALL_HOSTS_DAY_BY_HOUR,
]

# Short query-type names accepted on the command line
QUERY_TYPE_ALIASES = {
    "1-host-1-hr": MAX_CPU_1_HOST_1_HR,
    "2-host-1-hr": MAX_CPU_2_HOST_1_HR,
    "4-host-1-hr": MAX_CPU_4_HOST_1_HR,
    "8-host-1-hr": MAX_CPU_8_HOST_1_HR,
    "16-host-1-hr": MAX_CPU_16_HOST_1_HR,
    "32-host-1-hr": MAX_CPU_32_HOST_1_HR,
    "1-host-12-hr": MAX_CPU_1_HOST_12_HR,
    "groupby": MEAN_CPU_ALL_HOSTS_DAY_BY_HOUR,
}

ALL = "all"

FillFunc = Callable[[Query, int], None]


@dataclass(frozen=True)
class CatalogEntry:
    """One named query shape.

    Attributes:
        name: Catalog identifier
        label: Human label of the shape, e.g. "Cassandra max cpu, rand    4 hosts, rand 1h0m0s by 1m"
        fill: Populates a query in place, called as fill(query, scale_var)
        hosts: Hosts the shape filters on (0 for whole-fleet shapes)
        supported: False for placeholders that only raise UnsupportedQueryError
    """

    name: str
    label: str
    fill: FillFunc
    hosts: int = 0
    supported: bool = True

    def fits(self, scale_var: int) -> bool:
        return self.hosts <= scale_var


def resolve_query_type(query_type: str) -> str:
    """Map an alias or catalog name to its catalog name ('all' passes through).

    Raises:
        ValueError: If the name is unknown
    """
    if query_type == ALL or query_type in CATALOG_NAMES:
        return query_type
    if query_type in QUERY_TYPE_ALIASES:
        return QUERY_TYPE_ALIASES[query_type]
    known = ", ".join([ALL, *QUERY_TYPE_ALIASES, *CATALOG_NAMES])
    raise ValueError(f"unknown query type '{query_type}' (known: {known})")
