"""InfluxDB devops generator."""

from urllib.parse import urlencode

from querybench.generators.base import DevopsGenerator
from querybench.queries import INFLUX_POOL, InfluxQuery
from querybench.queries.pool import QueryPool


class InfluxDevops(DevopsGenerator):
    """Produces InfluxDB HTTP queries for all the devops query shapes.

    The structured fields are filled like every other dialect; the GET
    request carrying the InfluxQL text is derived from them.
    """

    dialect = "influx"
    label_prefix = "InfluxDB"

    @property
    def pool(self) -> QueryPool[InfluxQuery]:
        return INFLUX_POOL

    def _finish(self, q: InfluxQuery) -> None:
        q.database = self.target_name
        q.method = "GET"
        q.path = "/query?" + urlencode({"db": self.target_name, "q": q.render()})
        q.body = b""
