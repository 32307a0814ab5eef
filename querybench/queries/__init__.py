"""Query records and their reuse pools, one variant per dialect."""

from querybench.queries.base import Query
from querybench.queries.cassandra import CassandraQuery
from querybench.queries.influx import InfluxQuery
from querybench.queries.pool import QueryPool

CASSANDRA_POOL: QueryPool[CassandraQuery] = QueryPool(CassandraQuery)
INFLUX_POOL: QueryPool[InfluxQuery] = QueryPool(InfluxQuery)

__all__ = [
    "Query",
    "CassandraQuery",
    "InfluxQuery",
    "QueryPool",
    "CASSANDRA_POOL",
    "INFLUX_POOL",
]
