"""Translation of flat metadata maps into Qdrant filters."""

from typing import Any, Dict, List, Optional

from qdrant_client.models import (
    FieldCondition,
    Filter,
    MatchAny,
    MatchValue,
    Range,
)

from ....core.exceptions import ValidationError


def build_condition(key: str, value: Any) -> FieldCondition:
    """Build an equality condition on one payload field."""
    # bool is checked before int since it is an int subclass
    if isinstance(value, (bool, str, int)):
        return FieldCondition(key=key, match=MatchValue(value=value))

    if isinstance(value, float):
        # MatchValue has no float variant; a closed range is exact equality
        return FieldCondition(key=key, range=Range(gte=value, lte=value))

    if isinstance(value, (list, tuple, set)):
        values = list(value)
        if values and all(isinstance(v, str) for v in values):
            return FieldCondition(key=key, match=MatchAny(any=values))
        if values and all(isinstance(v, int) and not isinstance(v, bool) for v in values):
            return FieldCondition(key=key, match=MatchAny(any=values))
        raise ValidationError(
            f"Filter values for '{key}' must be a non-empty list of strings or integers",
            key,
        )

    raise ValidationError(
        f"Unsupported filter value for '{key}': {type(value).__name__}",
        key,
    )


def build_filter(filter_dict: Optional[Dict[str, Any]]) -> Optional[Filter]:
    """Convert a key/value map into a filter where every pair must match.

    An empty or missing map means no filter at all.
    """
    if not filter_dict:
        return None

    conditions: List[FieldCondition] = [
        build_condition(key, value) for key, value in filter_dict.items()
    ]
    return Filter(must=conditions)
