"""querybench: synthetic devops queries for load-testing time-series stores."""

from querybench.dispatch import Dispatcher, RoundRobinSchedule, WeightedSchedule
from querybench.errors import (
    HostSampleError,
    InvalidTimeRangeError,
    PoolError,
    QueryGenError,
    UnsupportedQueryError,
    WindowTooLargeError,
)
from querybench.generators import CassandraDevops, DevopsGenerator, InfluxDevops, create_generator
from querybench.sampling import sample_hosts
from querybench.timerange import TimeRange

__version__ = "0.1.0"

__all__ = [
    "CassandraDevops",
    "DevopsGenerator",
    "Dispatcher",
    "HostSampleError",
    "InfluxDevops",
    "InvalidTimeRangeError",
    "PoolError",
    "QueryGenError",
    "RoundRobinSchedule",
    "TimeRange",
    "UnsupportedQueryError",
    "WeightedSchedule",
    "WindowTooLargeError",
    "create_generator",
    "sample_hosts",
]
