"""Editing session: slots, overrides and output configuration in one object.

Every change to the slot list goes through ``Session._apply_slots``, which
rebuilds the combination space and clears the override mapping together.
Output settings (headings, separator, caps) are not structural and leave
overrides alone.

Usage:
    session = Session.load(SessionStore(JsonFileStore("state.json")))
    slot = session.add_slot("Hooks")
    session.bulk_add_candidates(slot.id, "First hook\\nSecond hook")
    session.set_full_text(0, "Hand-written ad\\n")
    session.checkpoint()
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterable

from avb.composer import DEFAULT_SEPARATOR, ComposedPart
from avb.model import Candidate, Slot, default_slots, new_id, validate_slot_ids
from avb.overrides import AdOverride, OverrideLayer
from avb.space import CombinationSpace
from avb.store import SessionState, SessionStore

if TYPE_CHECKING:
    from avb.core.config import AvbSettings

_logger = logging.getLogger(__name__)

MIN_PREVIEW = 1
MIN_ZIP_CAP = 100
_LINE_SPLIT = re.compile(r"\r?\n")


@dataclass
class OutputConfig:
    """Output configuration for composition and export.

    Attributes:
        include_headings: Prefix each part with its slot name.
        separator: Text placed between parts.
        max_for_preview: Number of ads shown by ``Session.preview``.
        max_for_zip: File count above which exports ask for confirmation.
        download_delay_ms: Pause between individual file dispatches.
    """

    include_headings: bool = False
    separator: str = DEFAULT_SEPARATOR
    max_for_preview: int = 20
    max_for_zip: int = 3000
    download_delay_ms: int = 5

    def __post_init__(self) -> None:
        self.max_for_preview = max(MIN_PREVIEW, int(self.max_for_preview))
        self.max_for_zip = max(MIN_ZIP_CAP, int(self.max_for_zip))
        self.download_delay_ms = max(0, int(self.download_delay_ms))

    @classmethod
    def from_settings(cls, settings: AvbSettings) -> OutputConfig:
        return cls(
            include_headings=settings.include_headings,
            separator=settings.separator,
            max_for_preview=settings.max_for_preview,
            max_for_zip=settings.max_for_zip,
            download_delay_ms=settings.download_delay_ms,
        )


def _move(items: tuple, old: int, new: int) -> tuple:
    """Move one element, clamping the target position."""
    new = max(0, min(new, len(items) - 1))
    out = list(items)
    out.insert(new, out.pop(old))
    return tuple(out)


class Session:
    """One logical editing session."""

    def __init__(
        self,
        slots: Iterable[Slot] | None = None,
        config: OutputConfig | None = None,
        store: SessionStore | None = None,
    ) -> None:
        self.config = config or OutputConfig()
        self._store = store
        self._slots: tuple[Slot, ...] = ()
        self._overrides = OverrideLayer()
        self._revision = 0
        self._apply_slots(default_slots() if slots is None else tuple(slots))

    @classmethod
    def load(cls, store: SessionStore, settings: AvbSettings | None = None) -> Session:
        """Build a session from persisted state.

        Persisted headings and separator win; ``settings`` supplies them when
        the store has none, and always supplies the preview and zip caps.
        """
        state = store.load(settings)
        config = OutputConfig.from_settings(settings) if settings else OutputConfig()
        config.include_headings = state.include_headings
        config.separator = state.separator
        session = cls(slots=state.slots, config=config, store=store)
        session._overrides.restore(state.overrides)
        return session

    # -- structural changes ---------------------------------------------------

    def _apply_slots(self, slots: tuple[Slot, ...]) -> None:
        """Replace the slot list; recompute the space and clear overrides."""
        validate_slot_ids(slots)
        self._slots = slots
        self._overrides.rebind(CombinationSpace.from_slots(slots))
        self._revision += 1

    def _slot_position(self, slot_id: str) -> int:
        for pos, slot in enumerate(self._slots):
            if slot.id == slot_id:
                return pos
        raise KeyError(f"Slot {slot_id!r} not found")

    def _replace_slot(self, slot_id: str, **changes) -> Slot:
        pos = self._slot_position(slot_id)
        updated = replace(self._slots[pos], **changes)
        self._apply_slots(self._slots[:pos] + (updated,) + self._slots[pos + 1 :])
        return updated

    def slot(self, slot_id: str) -> Slot:
        return self._slots[self._slot_position(slot_id)]

    def replace_slots(self, slots: Iterable[Slot]) -> None:
        self._apply_slots(tuple(slots))

    def add_slot(self, name: str = "New Section") -> Slot:
        slot = Slot(id=new_id(), name=name, items=(), enabled=True)
        self._apply_slots(self._slots + (slot,))
        return slot

    def remove_slot(self, slot_id: str) -> None:
        pos = self._slot_position(slot_id)
        self._apply_slots(self._slots[:pos] + self._slots[pos + 1 :])

    def rename_slot(self, slot_id: str, name: str) -> Slot:
        return self._replace_slot(slot_id, name=name)

    def set_slot_enabled(self, slot_id: str, enabled: bool) -> Slot:
        return self._replace_slot(slot_id, enabled=enabled)

    def move_slot(self, slot_id: str, new_position: int) -> None:
        pos = self._slot_position(slot_id)
        self._apply_slots(_move(self._slots, pos, new_position))

    def add_candidate(self, slot_id: str, text: str = "") -> Candidate:
        candidate = Candidate(id=new_id(), text=text)
        slot = self.slot(slot_id)
        self._replace_slot(slot_id, items=slot.items + (candidate,))
        return candidate

    def bulk_add_candidates(self, slot_id: str, blob: str) -> list[Candidate]:
        """Append one candidate per non-empty line of ``blob``.

        Lines are trimmed. Nothing changes when no line survives.
        """
        lines = [line.strip() for line in _LINE_SPLIT.split(blob)]
        added = [Candidate(id=new_id(), text=line) for line in lines if line]
        if not added:
            return []
        slot = self.slot(slot_id)
        self._replace_slot(slot_id, items=slot.items + tuple(added))
        return added

    def update_candidate(self, slot_id: str, candidate_id: str, text: str) -> None:
        slot = self.slot(slot_id)
        pos = slot.index_for_candidate_id(candidate_id)
        items = list(slot.items)
        items[pos] = replace(items[pos], text=text)
        self._replace_slot(slot_id, items=tuple(items))

    def remove_candidate(self, slot_id: str, candidate_id: str) -> None:
        slot = self.slot(slot_id)
        pos = slot.index_for_candidate_id(candidate_id)
        self._replace_slot(slot_id, items=slot.items[:pos] + slot.items[pos + 1 :])

    def move_candidate(self, slot_id: str, candidate_id: str, new_position: int) -> None:
        slot = self.slot(slot_id)
        pos = slot.index_for_candidate_id(candidate_id)
        self._replace_slot(slot_id, items=_move(slot.items, pos, new_position))

    def reset_defaults(self) -> None:
        self._apply_slots(default_slots())

    # -- output settings ------------------------------------------------------

    def set_include_headings(self, include: bool) -> None:
        self.config.include_headings = bool(include)

    def set_separator(self, separator: str) -> None:
        self.config.separator = separator

    def set_max_for_preview(self, value: int) -> None:
        self.config.max_for_preview = max(MIN_PREVIEW, int(value))

    def set_max_for_zip(self, value: int) -> None:
        self.config.max_for_zip = max(MIN_ZIP_CAP, int(value))

    # -- overrides ------------------------------------------------------------

    @property
    def overrides(self) -> OverrideLayer:
        return self._overrides

    def set_full_text(self, index: int, text: str) -> None:
        self._overrides.set_full_text(index, text)

    def toggle_exclusion(self, index: int, slot_id: str) -> bool:
        return self._overrides.toggle_exclusion(index, slot_id)

    def clear_override(self, index: int) -> bool:
        return self._overrides.clear(index)

    def clear_overrides(self) -> None:
        self._overrides.clear_all()

    # -- read side ------------------------------------------------------------

    @property
    def slots(self) -> tuple[Slot, ...]:
        return self._slots

    @property
    def space(self) -> CombinationSpace:
        return self._overrides.space

    @property
    def active_slots(self) -> tuple[Slot, ...]:
        return self.space.active

    @property
    def total(self) -> int:
        return self.space.total

    @property
    def revision(self) -> int:
        """Incremented on every structural change."""
        return self._revision

    def effective_parts(self, index: int) -> tuple[ComposedPart, ...]:
        return self._overrides.effective_parts(index)

    def effective_text(self, index: int) -> str:
        return self._overrides.effective_text(
            index, self.config.include_headings, self.config.separator
        )

    def is_edited(self, index: int) -> bool:
        return self._overrides.is_edited(index)

    def preview(self) -> list[str]:
        """Effective text of the first ``max_for_preview`` ads."""
        count = min(self.config.max_for_preview, self.total)
        return [self.effective_text(i) for i in range(count)]

    # -- persistence ----------------------------------------------------------

    @property
    def store(self) -> SessionStore | None:
        return self._store

    def state(self) -> SessionState:
        overrides: dict[int, AdOverride] = dict(self._overrides.items())
        return SessionState(
            slots=self._slots,
            include_headings=self.config.include_headings,
            separator=self.config.separator,
            overrides=overrides,
        )

    def checkpoint(self) -> bool:
        """Persist the session through the attached store, if any."""
        if self._store is None:
            return False
        self._store.save(self.state())
        _logger.debug("Session checkpoint saved (revision %d)", self._revision)
        return True


__all__ = ["OutputConfig", "Session", "SessionState"]
