"""Cassandra devops generator."""

from querybench.generators.base import DevopsGenerator
from querybench.queries import CASSANDRA_POOL, CassandraQuery
from querybench.queries.pool import QueryPool


class CassandraDevops(DevopsGenerator):
    """Produces Cassandra queries for all the devops query shapes."""

    dialect = "cassandra"
    label_prefix = "Cassandra"

    @property
    def pool(self) -> QueryPool[CassandraQuery]:
        return CASSANDRA_POOL

    def _finish(self, q: CassandraQuery) -> None:
        q.keyspace = self.target_name
