"""Ingest helpers for persisted session state.

Persisted values come from an untyped key-value store and may be missing,
hand-edited or written by an older build. These helpers coerce them into the
shapes the session expects and log a warning for anything malformed. They
never raise; callers substitute defaults.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from avb.model import Slot, validate_slot_ids
from avb.overrides import AdOverride

_logger = logging.getLogger(__name__)


def parse_json(raw: str | None, *, field: str) -> Any | None:
    """Decode a JSON string, returning None for missing or malformed input."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        _logger.warning("Malformed %s (%s); ignoring persisted value", field, exc)
        return None


def coerce_flag(raw: str | None, *, field: str, default: bool) -> bool:
    """Boolean-like flag stored as ``"1"``/``"0"``."""
    if raw is None:
        return default
    if raw in ("1", "true", "True"):
        return True
    if raw in ("0", "false", "False", ""):
        return False
    _logger.warning("Invalid %s=%r; using default=%r", field, raw, default)
    return default


def _normalize_enabled(item: Any, *, field: str) -> Any:
    """Coerce a slot's ``enabled`` value to a bool before it reaches the model."""
    if not isinstance(item, Mapping) or "enabled" not in item:
        return item
    raw = item["enabled"]
    if isinstance(raw, bool):
        return item
    if isinstance(raw, str):
        enabled = coerce_flag(raw, field=f"{field}.enabled", default=True)
    elif isinstance(raw, int):
        enabled = bool(raw)
    else:
        _logger.warning("Invalid %s.enabled=%r; using default=True", field, raw)
        enabled = True
    return {**item, "enabled": enabled}


def coerce_slots(data: Any, *, field: str) -> tuple[Slot, ...] | None:
    """Rebuild a slot list, or None if any part of it is malformed."""
    if not isinstance(data, list):
        if data is not None:
            _logger.warning("Invalid %s (expected list, got %s)", field, type(data).__name__)
        return None
    try:
        slots = tuple(Slot.from_dict(_normalize_enabled(item, field=field)) for item in data)
        validate_slot_ids(slots)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        _logger.warning("Invalid %s (%s); using defaults", field, exc)
        return None
    return slots


def coerce_overrides(data: Any, *, field: str) -> dict[int, AdOverride]:
    """Rebuild the override mapping, dropping malformed entries."""
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        _logger.warning("Invalid %s (expected object, got %s)", field, type(data).__name__)
        return {}

    records: dict[int, AdOverride] = {}
    for key, value in data.items():
        try:
            index = int(key)
        except (TypeError, ValueError):
            _logger.warning("Invalid %s key %r; dropping", field, key)
            continue
        if index < 0 or str(index) != str(key).strip():
            _logger.warning("Invalid %s key %r; dropping", field, key)
            continue
        if not isinstance(value, Mapping):
            _logger.warning("Invalid %s[%r]=%r; dropping", field, key, value)
            continue
        excluded = value.get("excludedIds")
        if excluded is not None and not isinstance(excluded, list):
            _logger.warning("Invalid %s[%r].excludedIds=%r; ignoring exclusions", field, key, excluded)
            value = {k: v for k, v in value.items() if k != "excludedIds"}
        record = AdOverride.from_dict(value)
        if not record.is_empty:
            records[index] = record
    return records


__all__ = ["coerce_flag", "coerce_overrides", "coerce_slots", "parse_json"]
