"""Result models for generation runs."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class GenerationStats(BaseModel):
    """Summary of one generation run.

    Attributes:
        dialect: Dialect the queries were generated for
        query_type: Query type requested
        total_requested: Iterations the driver ran
        generated: Queries handed to the sink
        skipped: Iterations that hit an unsupported catalog entry
        by_label: Generated count per human label
        skipped_entries: Skipped count per catalog entry
        pool_allocated: Query records allocated by the pool during the run
        pool_reused: Query records recycled by the pool during the run
        elapsed: Wall time in seconds
        started_at: Run start timestamp
    """

    dialect: str
    query_type: str
    total_requested: int = Field(..., ge=0)
    generated: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    by_label: dict[str, int] = Field(default_factory=dict)
    skipped_entries: dict[str, int] = Field(default_factory=dict)
    pool_allocated: int = Field(default=0, ge=0)
    pool_reused: int = Field(default=0, ge=0)
    elapsed: float = Field(default=0.0, ge=0.0)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def queries_per_second(self) -> float:
        if self.elapsed <= 0:
            return 0.0
        return self.generated / self.elapsed
