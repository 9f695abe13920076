"""Shared annotated types for store records."""

from typing import Annotated, Any, Dict

from pydantic import BeforeValidator


def _to_str(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    return str(value)


# Store ids may be UUIDs or integers; compare them as strings.
RecordId = Annotated[str, BeforeValidator(_to_str)]

# Answer value -> integer points.
PointsMapping = Dict[str, int]
