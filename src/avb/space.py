"""Combination space: active slot list and total combination count.

The active slot list (enabled slots with at least one candidate, in stored
order) defines the addressing space. Slot 0 is the most significant digit.
Disabled and empty slots are excluded entirely, never a zero factor.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import prod
from typing import Iterable

from avb.model import Slot


def active_slots(slots: Iterable[Slot]) -> tuple[Slot, ...]:
    """Return the enabled, non-empty slots in stored order."""
    return tuple(s for s in slots if s.is_active)


def combination_count(slots: Iterable[Slot]) -> int:
    """Product of active slot sizes, or 0 when no slot is active."""
    active = active_slots(slots)
    if not active:
        return 0
    return prod(s.size for s in active)


@dataclass(frozen=True)
class CombinationSpace:
    """Derived view over a slot list.

    Built by ``from_slots`` and never mutated; rebuild it whenever the slot
    list changes.
    """

    active: tuple[Slot, ...]
    total: int

    @classmethod
    def from_slots(cls, slots: Iterable[Slot]) -> CombinationSpace:
        active = active_slots(slots)
        total = prod(s.size for s in active) if active else 0
        return cls(active=active, total=total)

    @classmethod
    def empty(cls) -> CombinationSpace:
        return cls(active=(), total=0)

    @property
    def radices(self) -> tuple[int, ...]:
        """Per-slot radix (candidate count), most significant first."""
        return tuple(s.size for s in self.active)

    @property
    def digit_width(self) -> int:
        """Number of decimal digits in ``total`` (file name padding width)."""
        return len(str(self.total))

    def contains(self, index: int) -> bool:
        return 0 <= index < self.total

    def __len__(self) -> int:
        return self.total


__all__ = ["CombinationSpace", "active_slots", "combination_count"]
