"""Mixed-radix addressing between ordinal indices and candidate selections.

The first active slot is the most significant digit and changes slowest; the
last active slot is the least significant and changes on every increment.

``decode`` is the random-access path used everywhere at runtime.
``iter_combinations`` walks the space sequentially by nested iteration and
exists as an independent oracle: at every index both must yield the same
tuple.

Usage:
    space = CombinationSpace.from_slots(slots)
    combo = decode(5, space.active)
    if combo is None:
        ...  # index outside [0, total)
"""

from __future__ import annotations

from typing import Iterator, Sequence

from avb.model import Candidate, Slot


def decode_digits(index: int, radices: Sequence[int]) -> tuple[int, ...] | None:
    """Split an ordinal into per-slot candidate positions.

    Args:
        index: Ordinal index.
        radices: Candidate count of each active slot, most significant first.

    Returns:
        One position per slot, or None if ``index`` is outside ``[0, total)``.
    """
    if not radices or any(r <= 0 for r in radices):
        return None
    total = 1
    for r in radices:
        total *= r
    if index < 0 or index >= total:
        return None

    digits = [0] * len(radices)
    remaining = index
    for i in range(len(radices) - 1, -1, -1):
        remaining, digits[i] = divmod(remaining, radices[i])
    return tuple(digits)


def decode(index: int, active: Sequence[Slot]) -> tuple[Candidate, ...] | None:
    """Return the candidate selected from each active slot at ``index``.

    Args:
        index: Ordinal index.
        active: Active slot list (enabled and non-empty, stored order).

    Returns:
        Tuple aligned with ``active``, or None when ``index`` is out of range.
    """
    digits = decode_digits(index, [s.size for s in active])
    if digits is None:
        return None
    return tuple(slot.items[d] for slot, d in zip(active, digits))


def iter_combinations(active: Sequence[Slot]) -> Iterator[tuple[Candidate, ...]]:
    """Yield every combination in increasing ordinal order.

    Recursive nested iteration: the first slot is the outermost loop.
    An empty slot list yields nothing (total is 0).
    """
    if not active:
        return

    def _walk(depth: int) -> Iterator[tuple[Candidate, ...]]:
        if depth == len(active) - 1:
            for candidate in active[depth].items:
                yield (candidate,)
            return
        for candidate in active[depth].items:
            for rest in _walk(depth + 1):
                yield (candidate, *rest)

    yield from _walk(0)


__all__ = ["decode", "decode_digits", "iter_combinations"]
