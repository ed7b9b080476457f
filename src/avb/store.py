"""Session persistence.

The session is persisted through a small key-value port, one key per concern:

- ``avb.sections``:  slot list as JSON
- ``avb.headings``:  ``"1"`` / ``"0"``
- ``avb.sep``:       separator, raw text
- ``avb.overrides``: JSON object keyed by stringified ordinal index

Loading never fails. Missing or malformed values fall back to defaults
(``default_slots()`` for the slot list, settings for the output flags).

Usage:
    store = SessionStore(JsonFileStore("state.json"))
    state = store.load()
    ...
    store.save(state)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Protocol, runtime_checkable

from avb.composer import DEFAULT_SEPARATOR
from avb.ingest import coerce_flag, coerce_overrides, coerce_slots, parse_json
from avb.model import Slot, default_slots
from avb.overrides import AdOverride

if TYPE_CHECKING:
    from avb.core.config import AvbSettings

_logger = logging.getLogger(__name__)

KEY_SECTIONS = "avb.sections"
KEY_HEADINGS = "avb.headings"
KEY_SEPARATOR = "avb.sep"
KEY_OVERRIDES = "avb.overrides"


@runtime_checkable
class KeyValueStore(Protocol):
    """String key-value storage (browser-local-storage shaped)."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def set_many(self, values: Mapping[str, str]) -> None:
        """Write several keys as one update."""
        ...


class MemoryStore:
    """In-process key-value store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def set_many(self, values: Mapping[str, str]) -> None:
        self.data.update(values)


class JsonFileStore:
    """Key-value store persisted as one JSON object on disk.

    The file is read lazily on first access and rewritten atomically
    (temp file + replace) on every ``set``; ``set_many`` applies several keys
    in one write. An unreadable or malformed file
    is treated as empty.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._data: dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data
        self._data = {}
        if not self._path.exists():
            return self._data
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _logger.warning("Unreadable state file %s (%s); starting empty", self._path, exc)
            return self._data
        if not isinstance(raw, dict):
            _logger.warning("State file %s is not a JSON object; starting empty", self._path)
            return self._data
        self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._flush(data)

    def set_many(self, values: Mapping[str, str]) -> None:
        """Apply every value, then flush once."""
        data = self._load()
        data.update(values)
        self._flush(data)

    def _flush(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=2)
            handle.flush()
            os.fsync(handle.fileno())
        tmp_path.replace(self._path)


@dataclass
class SessionState:
    """Serializable snapshot of a session."""

    slots: tuple[Slot, ...] = field(default_factory=default_slots)
    include_headings: bool = False
    separator: str = DEFAULT_SEPARATOR
    overrides: dict[int, AdOverride] = field(default_factory=dict)


class SessionStore:
    """Persistence port: ``load() -> SessionState`` and ``save(state)``."""

    def __init__(self, kv: KeyValueStore, settings: AvbSettings | None = None) -> None:
        self._kv = kv
        self._settings = settings

    @property
    def kv(self) -> KeyValueStore:
        return self._kv

    def load(self, settings: AvbSettings | None = None) -> SessionState:
        """Read persisted state, substituting defaults for anything malformed.

        Args:
            settings: Source of the headings and separator defaults; falls back
                to the settings given at construction.
        """
        settings = settings or self._settings
        default_headings = settings.include_headings if settings else False
        default_separator = settings.separator if settings else DEFAULT_SEPARATOR

        slots = coerce_slots(
            parse_json(self._kv.get(KEY_SECTIONS), field=KEY_SECTIONS),
            field=KEY_SECTIONS,
        )
        if slots is None:
            slots = default_slots()

        separator = self._kv.get(KEY_SEPARATOR)
        return SessionState(
            slots=slots,
            include_headings=coerce_flag(
                self._kv.get(KEY_HEADINGS), field=KEY_HEADINGS, default=default_headings
            ),
            separator=separator if separator is not None else default_separator,
            overrides=coerce_overrides(
                parse_json(self._kv.get(KEY_OVERRIDES), field=KEY_OVERRIDES),
                field=KEY_OVERRIDES,
            ),
        )

    def save(self, state: SessionState) -> None:
        """Write all four keys in one store update."""
        overrides = {str(index): record.to_dict() for index, record in sorted(state.overrides.items())}
        self._kv.set_many(
            {
                KEY_SECTIONS: json.dumps([s.to_dict() for s in state.slots], ensure_ascii=False),
                KEY_HEADINGS: "1" if state.include_headings else "0",
                KEY_SEPARATOR: state.separator,
                KEY_OVERRIDES: json.dumps(overrides, ensure_ascii=False),
            }
        )


__all__ = [
    "JsonFileStore",
    "KEY_HEADINGS",
    "KEY_OVERRIDES",
    "KEY_SECTIONS",
    "KEY_SEPARATOR",
    "KeyValueStore",
    "MemoryStore",
    "SessionState",
    "SessionStore",
]
