"""
Change detection between two snapshots of an entity, used by the activity log.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

IGNORED_FIELDS = frozenset({"id", "created_on", "last_modified_on", "changed_by"})


def flatten(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested mappings into dotted keys. Lists are kept as values."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            flat.update(flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat


def detect_modifications(
    new: Optional[Mapping[str, Any]],
    old: Optional[Mapping[str, Any]],
    ignored: Iterable[str] = IGNORED_FIELDS,
) -> List[Dict[str, Any]]:
    """
    Compare two snapshots and list every changed, added or removed field.

    Each entry is ``{"field_name", "old_value", "new_value"}``; a field that
    only exists on one side has ``None`` on the other.
    """
    ignored = set(ignored)
    new_flat = flatten(new or {})
    old_flat = flatten(old or {})

    modifications = []
    for field_name in sorted(set(new_flat) | set(old_flat)):
        if field_name.split(".", 1)[0] in ignored:
            continue
        old_value = old_flat.get(field_name)
        new_value = new_flat.get(field_name)
        if field_name in old_flat and field_name in new_flat and old_value == new_value:
            continue
        modifications.append(
            {"field_name": field_name, "old_value": old_value, "new_value": new_value}
        )
    return modifications
