"""Test helpers shared across the suite."""

from __future__ import annotations

from avb.model import Candidate, Slot


def make_slot(slot_id: str, name: str, *texts: str, enabled: bool = True) -> Slot:
    """Slot whose candidate ids are ``{slot_id}{position}``."""
    return Slot(
        id=slot_id,
        name=name,
        items=tuple(Candidate(id=f"{slot_id}{i}", text=t) for i, t in enumerate(texts)),
        enabled=enabled,
    )


def candidate_ids(combo) -> list[str]:
    """Candidate ids of a decoded combination."""
    return [c.id for c in combo]
