"""Helpers for turning nested translation documents into dotted-key maps."""

from __future__ import annotations

import json
from typing import Any, Mapping


def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def flatten_translations(obj: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested objects into ``{"a.b.c": "value"}``.

    Lists are leaves and are kept as their compact JSON text.
    """

    flattened: dict[str, str] = {}
    for key, value in obj.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flattened.update(flatten_translations(value, path))
        else:
            flattened[path] = stringify(value)
    return flattened


def lookup(flat: Mapping[str, str] | None, key: str) -> str | None:
    if not flat:
        return None
    return flat.get(key)


__all__ = ["flatten_translations", "lookup", "stringify"]
