"""Per-dialect devops query generators."""

from querybench.generators.base import DevopsGenerator
from querybench.generators.cassandra import CassandraDevops
from querybench.generators.influx import InfluxDevops
from querybench.generators.registry import DIALECTS, create_generator

__all__ = [
    "DevopsGenerator",
    "CassandraDevops",
    "InfluxDevops",
    "DIALECTS",
    "create_generator",
]
