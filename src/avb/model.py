"""Slot model: the data shape of slots and their candidate values.

A Slot is a named, orderable, enable/disable-able bucket of Candidates.
Both types are immutable; editing produces new instances (see
``avb.session.Session``), which keeps every structural change visible to the
single invalidation choke point.

All schemas are JSON-serializable for persistence. The wire shape matches the
``avb.sections`` key: ``{"id", "name", "enabled", "items": [{"id", "text"}]}``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4


def new_id() -> str:
    """Return a short process-unique identifier."""
    return uuid4().hex[:8]


@dataclass(frozen=True)
class Candidate:
    """One selectable value within a slot."""

    id: str
    text: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {"id": self.id, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Candidate:
        """Reconstruct from dict."""
        return cls(id=str(data["id"]), text=str(data["text"]))


@dataclass(frozen=True)
class Slot:
    """A named bucket of candidates.

    Attributes:
        id: Stable identity, preserved across reorders and renames.
        name: Display name, used as the heading when headings are enabled.
        items: Ordered candidates. Order is one axis of the addressing space.
        enabled: Disabled slots are excluded from the combination space.
    """

    id: str
    name: str
    items: tuple[Candidate, ...] = field(default=())
    enabled: bool = True

    def __post_init__(self) -> None:
        """Validate candidate id uniqueness within the slot."""
        ids = [c.id for c in self.items]
        if len(ids) != len(set(ids)):
            duplicates = {i for i in ids if ids.count(i) > 1}
            raise ValueError(f"Slot {self.id!r} has duplicate candidate ids: {duplicates}")

    @property
    def size(self) -> int:
        """Number of candidates in this slot."""
        return len(self.items)

    @property
    def is_active(self) -> bool:
        """Whether this slot participates in the combination space."""
        return self.enabled and len(self.items) > 0

    def index_for_candidate_id(self, candidate_id: str) -> int:
        """Position of a candidate within this slot.

        Raises:
            KeyError: If the candidate is not in this slot.
        """
        for pos, candidate in enumerate(self.items):
            if candidate.id == candidate_id:
                return pos
        raise KeyError(f"Candidate {candidate_id!r} not found in slot {self.id!r}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "name": self.name,
            "enabled": self.enabled,
            "items": [c.to_dict() for c in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Slot:
        """Reconstruct from dict."""
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            items=tuple(Candidate.from_dict(c) for c in data.get("items", [])),
            enabled=bool(data.get("enabled", True)),
        )


def validate_slot_ids(slots: tuple[Slot, ...] | list[Slot]) -> None:
    """Raise ValueError if any slot id appears more than once."""
    ids = [s.id for s in slots]
    if len(ids) != len(set(ids)):
        duplicates = {i for i in ids if ids.count(i) > 1}
        raise ValueError(f"Slot ids must be unique, found duplicates: {duplicates}")


# Starter content used when nothing has been persisted yet.
DEFAULT_SLOT_CONTENT: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Hook Lines", ("What do you do when the job you prayed for becomes the life you can’t stand?",)),
    ("Intros", ("I stopped asking myself how I felt, because the answer never changed.",)),
    (
        "Bodies",
        (
            "I didn’t leave the medical field with a well-thought-out plan. "
            "I left it in pieces—and rebuilt a life that actually fits.",
        ),
    ),
    ("Transitions", ("Here’s what changed everything…",)),
    ("CTAs", ("DM me ‘INFO’ to see how this works.",)),
)


def default_slots() -> tuple[Slot, ...]:
    """Build the default slot set with fresh ids."""
    return tuple(
        Slot(
            id=new_id(),
            name=name,
            items=tuple(Candidate(id=new_id(), text=text) for text in texts),
            enabled=True,
        )
        for name, texts in DEFAULT_SLOT_CONTENT
    )


__all__ = [
    "Candidate",
    "Slot",
    "DEFAULT_SLOT_CONTENT",
    "default_slots",
    "new_id",
    "validate_slot_ids",
]
