"""InfluxDB flavour of the query record."""

from dataclasses import dataclass
from datetime import timedelta

from querybench.queries.base import Query, split_tag
from querybench.timerange import format_rfc3339


def influx_duration(value: timedelta) -> str:
    """InfluxQL duration literal, e.g. 1m, 1h, 90s."""
    seconds = int(value.total_seconds())
    if seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    if seconds % 60 == 0:
        return f"{seconds // 60}m"
    return f"{seconds}s"


@dataclass(eq=False)
class InfluxQuery(Query):
    """Query sent to InfluxDB's HTTP /query endpoint.

    Attributes:
        database: Target database name
        method: HTTP method
        path: Request path including the encoded db and q parameters
        body: Request body, empty for GET queries
    """

    dialect = "influx"

    database: str = ""
    method: str = ""
    path: str = ""
    body: bytes = b""

    def render(self) -> str:
        clauses = []
        for tag_set in self.tag_sets:
            ors = []
            for tag in tag_set:
                key, value = split_tag(tag)
                ors.append(f"{key} = '{value}'")
            clauses.append("(" + " or ".join(ors) + ")")
        clauses.append(f"time >= '{format_rfc3339(self.time_start)}'")
        clauses.append(f"time < '{format_rfc3339(self.time_end)}'")

        group_by = ",".join([f"time({influx_duration(self.group_by_duration)})"] + list(self.group_by_tags))
        return (
            f"SELECT {self.aggregation_type}({self.field_name}) from {self.measurement_name} "
            f"where {' and '.join(clauses)} group by {group_by}"
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(
            {
                "database": self.database,
                "method": self.method,
                "path": self.path,
            }
        )
        return data
