"""Base query record shared by every dialect."""

from dataclasses import MISSING, dataclass, field, fields
from datetime import datetime, timedelta
from typing import Any

from querybench.timerange import format_duration, format_rfc3339


@dataclass(eq=False)
class Query:
    """Reusable description of one analytic query.

    Reads as "aggregation over measurement.field, filtered by tag sets,
    inside [time_start, time_end), bucketed by group_by_duration".
    Instances are recycled through a QueryPool, so a fill must overwrite
    every field it does not want to inherit from a previous use.

    Attributes:
        human_label: Shape of the query, shared by all queries of that shape
        human_description: Label plus the window start
        aggregation_type: Aggregate function name ("max", "avg")
        measurement_name: Measurement or table ("cpu")
        field_name: Field being aggregated ("usage_user")
        time_start: Inclusive window start
        time_end: Exclusive window end
        group_by_duration: Bucket width
        tag_sets: Filter groups; tags inside a group are OR'd, groups are AND'd
        group_by_tags: Tag keys the result is additionally grouped by
    """

    dialect = "generic"

    human_label: str = ""
    human_description: str = ""
    aggregation_type: str = ""
    measurement_name: str = ""
    field_name: str = ""
    time_start: datetime | None = None
    time_end: datetime | None = None
    group_by_duration: timedelta | None = None
    tag_sets: list[list[str]] = field(default_factory=list)
    group_by_tags: list[str] = field(default_factory=list)

    def reset(self) -> None:
        """Clear every field back to its empty value."""
        for f in fields(self):
            if f.default_factory is not MISSING:
                setattr(self, f.name, f.default_factory())
            else:
                setattr(self, f.name, f.default)

    def is_empty(self) -> bool:
        return not self.human_label

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "dialect": self.dialect,
            "human_label": self.human_label,
            "human_description": self.human_description,
            "aggregation_type": self.aggregation_type,
            "measurement_name": self.measurement_name,
            "field_name": self.field_name,
            "time_start": format_rfc3339(self.time_start) if self.time_start else None,
            "time_end": format_rfc3339(self.time_end) if self.time_end else None,
            "group_by": format_duration(self.group_by_duration) if self.group_by_duration else None,
            "tag_sets": [list(tag_set) for tag_set in self.tag_sets],
            "group_by_tags": list(self.group_by_tags),
        }

    def render(self) -> str:
        """Textual form of the query for this dialect."""
        raise NotImplementedError

    def __str__(self) -> str:
        return f"{self.human_label}: {self.render()}"


def split_tag(tag: str) -> tuple[str, str]:
    """Split 'key=value' into its key and value."""
    key, sep, value = tag.partition("=")
    if not sep:
        raise ValueError(f"malformed tag filter: {tag!r}")
    return key, value
