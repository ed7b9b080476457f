"""Override layer: per-index exceptions to the derived composition.

An override is keyed by ordinal index and is either a full-text replacement
or a set of excluded slot ids. Ordinals only mean something against one
active slot list, so the mapping is valid until the next structural change:
``rebind`` swaps in the new combination space and empties the mapping in the
same call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Iterator, Mapping

from avb.addressing import decode
from avb.composer import DEFAULT_SEPARATOR, ComposedPart, compose
from avb.space import CombinationSpace

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdOverride:
    """Override record for one index.

    Attributes:
        text: Full replacement text. When set, exclusions have no effect.
        excluded_ids: Slot ids dropped from the derived composition.
    """

    text: str | None = None
    excluded_ids: tuple[str, ...] = field(default=())

    @property
    def has_text(self) -> bool:
        return self.text is not None

    @property
    def is_empty(self) -> bool:
        return self.text is None and not self.excluded_ids

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted shape ``{"text"?, "excludedIds"?}``."""
        data: dict[str, Any] = {}
        if self.text is not None:
            data["text"] = self.text
        if self.excluded_ids:
            data["excludedIds"] = list(self.excluded_ids)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AdOverride:
        """Reconstruct from the persisted shape."""
        text = data.get("text")
        excluded = data.get("excludedIds") or ()
        return cls(
            text=text if isinstance(text, str) else None,
            excluded_ids=tuple(dict.fromkeys(str(x) for x in excluded)),
        )


class OverrideLayer:
    """Sparse index-keyed overrides bound to one combination space.

    Usage:
        layer = OverrideLayer(space)
        layer.set_full_text(3, "Custom ad\\n")
        layer.toggle_exclusion(4, slot_id)
        text = layer.effective_text(4, include_headings=True)
    """

    def __init__(self, space: CombinationSpace | None = None) -> None:
        self._space = space or CombinationSpace.empty()
        self._records: dict[int, AdOverride] = {}

    @property
    def space(self) -> CombinationSpace:
        return self._space

    def rebind(self, space: CombinationSpace) -> int:
        """Attach a new combination space and drop every override.

        Returns:
            Number of override records discarded.
        """
        discarded = len(self._records)
        self._space = space
        self._records = {}
        if discarded:
            _logger.info("Slot structure changed; discarded %d override(s)", discarded)
        return discarded

    # -- mapping access -------------------------------------------------------

    def get(self, index: int) -> AdOverride | None:
        return self._records.get(index)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._records))

    def __contains__(self, index: object) -> bool:
        return index in self._records

    def items(self) -> list[tuple[int, AdOverride]]:
        return sorted(self._records.items())

    def is_edited(self, index: int) -> bool:
        """Whether ``index`` carries a full-text override."""
        record = self._records.get(index)
        return record is not None and record.has_text

    def excluded_ids(self, index: int) -> tuple[str, ...]:
        record = self._records.get(index)
        return record.excluded_ids if record else ()

    # -- mutation -------------------------------------------------------------

    def _require_index(self, index: int) -> None:
        if not self._space.contains(index):
            raise IndexError(f"Ad index {index} out of range [0, {self._space.total})")

    def _store(self, index: int, record: AdOverride) -> None:
        if record.is_empty:
            self._records.pop(index, None)
        else:
            self._records[index] = record

    def set_full_text(self, index: int, text: str) -> None:
        """Replace the composed text of ``index`` verbatim.

        Raises:
            IndexError: If ``index`` is outside the combination space.
        """
        self._require_index(index)
        current = self._records.get(index, AdOverride())
        self._store(index, replace(current, text=text))

    def toggle_exclusion(self, index: int, slot_id: str) -> bool:
        """Add or remove ``slot_id`` from the exclusion set of ``index``.

        Any full-text override on ``index`` is dropped.

        Returns:
            True if the slot is now excluded, False if it is included again.

        Raises:
            IndexError: If ``index`` is outside the combination space.
        """
        self._require_index(index)
        current = self._records.get(index, AdOverride())
        if slot_id in current.excluded_ids:
            excluded = tuple(x for x in current.excluded_ids if x != slot_id)
            now_excluded = False
        else:
            excluded = (*current.excluded_ids, slot_id)
            now_excluded = True
        self._store(index, AdOverride(text=None, excluded_ids=excluded))
        return now_excluded

    def clear(self, index: int) -> bool:
        """Drop the override for one index. Returns True if one existed."""
        return self._records.pop(index, None) is not None

    def clear_all(self) -> None:
        self._records = {}

    def restore(self, records: Mapping[int, AdOverride]) -> None:
        """Load persisted records, dropping keys outside the current space."""
        self._records = {}
        for index, record in records.items():
            if not self._space.contains(index):
                _logger.warning("Dropping override for out-of-range index %r", index)
                continue
            self._store(index, record)

    # -- read side ------------------------------------------------------------

    def effective_parts(self, index: int) -> tuple[ComposedPart, ...]:
        """Selected candidates at ``index`` minus excluded slots.

        Returns an empty tuple when ``index`` is out of range.
        """
        combo = decode(index, self._space.active)
        if combo is None:
            return ()
        excluded = set(self.excluded_ids(index))
        return tuple(
            ComposedPart(name=slot.name, text=candidate.text, slot_id=slot.id)
            for slot, candidate in zip(self._space.active, combo)
            if slot.id not in excluded
        )

    def effective_text(
        self,
        index: int,
        include_headings: bool = False,
        separator: str = DEFAULT_SEPARATOR,
    ) -> str:
        """Final text for ``index``: the full-text override, else the composition.

        Returns ``""`` when ``index`` is out of range.
        """
        if not self._space.contains(index):
            return ""
        record = self._records.get(index)
        if record is not None and record.text is not None:
            return record.text
        return compose(self.effective_parts(index), include_headings, separator)


__all__ = ["AdOverride", "OverrideLayer"]
