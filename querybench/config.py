"""Generation settings.

Values come from keyword arguments, then QUERYBENCH_* environment
variables (a .env file is loaded first), then the defaults below.
"""

import json
import os
from datetime import datetime, timezone
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_START = datetime(2016, 1, 1, tzinfo=timezone.utc)
DEFAULT_END = datetime(2016, 1, 2, 6, tzinfo=timezone.utc)

ENV_PREFIX = "QUERYBENCH_"


class GeneratorConfig(BaseModel):
    """Everything a generation run needs.

    Attributes:
        dialect: Target backend ("cassandra" or "influx")
        target_name: Keyspace or database name the queries address
        start: First instant of the loaded benchmark data
        end: Instant just past the loaded benchmark data
        scale_var: Number of simulated hosts
        total_queries: Number of queries to generate
        query_type: "all", a catalog name, or a short alias
        seed: Random seed; None draws fresh entropy
        workers: Generator threads
        weights: Optional catalog name to integer weight

    Note: start/end ordering is checked when the generator is built, which
    reports it as a construction error.
    """

    dialect: str = "cassandra"
    target_name: str = "benchmark_db"
    start: datetime = DEFAULT_START
    end: datetime = DEFAULT_END
    scale_var: int = Field(default=1, gt=0)
    total_queries: int = Field(default=1000, ge=0)
    query_type: str = "all"
    seed: int | None = None
    workers: int = Field(default=1, ge=1)
    weights: dict[str, int] | None = None

    @field_validator("start", "end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("dialect")
    @classmethod
    def _lower_dialect(cls, value: str) -> str:
        return value.strip().lower()

    @classmethod
    def from_env(cls, **overrides: Any) -> "GeneratorConfig":
        """Build a config from the environment, with explicit overrides winning.

        Overrides whose value is None are ignored so CLI options that were
        not given fall back to the environment.

        Raises:
            ValidationError: If a value is out of range or has the wrong type
            ValueError: If QUERYBENCH_WEIGHTS is not valid JSON
        """
        load_dotenv()
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is None or raw == "":
                continue
            if name == "weights":
                try:
                    values[name] = json.loads(raw)
                except json.JSONDecodeError as e:
                    raise ValueError(f"{ENV_PREFIX}WEIGHTS must be a JSON object, got {raw!r}") from e
            else:
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
