"""
Full-replace and partial-merge of a candidate onto an existing record.
"""
from typing import Any, Dict, Iterable, Mapping

SYSTEM_FIELDS = frozenset({"id", "version", "created_at", "updated_at"})


def has_text(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def replace_fields(
    existing: Mapping[str, Any],
    candidate: Mapping[str, Any],
    fields: Iterable[str],
) -> Dict[str, Any]:
    """
    Overwrite every mutable field with the candidate's value.

    A field the candidate does not carry is cleared to None.
    """
    merged = dict(existing)
    for name in fields:
        if name in SYSTEM_FIELDS:
            continue
        merged[name] = candidate.get(name)
    return merged


def patch_fields(
    existing: Mapping[str, Any],
    candidate: Mapping[str, Any],
    fields: Iterable[str],
    text_fields: Iterable[str] = (),
) -> Dict[str, Any]:
    """
    Overwrite only the fields the candidate actually supplies.

    Text fields count as supplied when non-blank, all others when not None.
    Each field is decided on its own; untouched siblings keep their values.
    """
    text_fields = frozenset(text_fields)
    merged = dict(existing)
    for name in fields:
        if name in SYSTEM_FIELDS:
            continue
        value = candidate.get(name)
        if name in text_fields:
            if has_text(value):
                merged[name] = value
        elif value is not None:
            merged[name] = value
    return merged
