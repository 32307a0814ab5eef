"""Cassandra flavour of the query record."""

from dataclasses import dataclass

from querybench.queries.base import Query, split_tag
from querybench.timerange import format_duration, format_rfc3339


@dataclass(eq=False)
class CassandraQuery(Query):
    """Query against the Cassandra schema used by the benchmark loader.

    The Cassandra client splits the window into group-by buckets and issues
    one CQL read per bucket and series; this record only carries the shape.

    Attributes:
        keyspace: Keyspace holding the measurement tables
    """

    dialect = "cassandra"

    keyspace: str = ""

    def render(self) -> str:
        where = []
        for tag_set in self.tag_sets:
            clauses = []
            for tag in tag_set:
                key, value = split_tag(tag)
                clauses.append(f"{key} = '{value}'")
            where.append("(" + " OR ".join(clauses) + ")")
        where.append(f"time >= '{format_rfc3339(self.time_start)}'")
        where.append(f"time < '{format_rfc3339(self.time_end)}'")

        group_by = [f"time({format_duration(self.group_by_duration)})"] + list(self.group_by_tags)
        table = f"{self.keyspace}.{self.measurement_name}" if self.keyspace else self.measurement_name
        return (
            f"SELECT {self.aggregation_type}({self.field_name}) FROM {table} "
            f"WHERE {' AND '.join(where)} GROUP BY {', '.join(group_by)}"
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["keyspace"] = self.keyspace
        return data
