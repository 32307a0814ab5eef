"""Dialect name to generator class lookup."""

from datetime import datetime

from querybench.generators.base import DevopsGenerator
from querybench.generators.cassandra import CassandraDevops
from querybench.generators.influx import InfluxDevops

DIALECTS: dict[str, type[DevopsGenerator]] = {
    "cassandra": CassandraDevops,
    "influx": InfluxDevops,
}


def create_generator(
    dialect: str,
    target_name: str,
    start: datetime,
    end: datetime,
    seed: int | None = None,
) -> DevopsGenerator:
    """Build the generator for a dialect.

    Raises:
        ValueError: If the dialect is unknown
        InvalidTimeRangeError: If start is not before end
    """
    try:
        generator_cls = DIALECTS[dialect]
    except KeyError:
        raise ValueError(f"unknown dialect '{dialect}' (known: {', '.join(DIALECTS)})") from None
    return generator_cls(target_name, start, end, seed=seed)
