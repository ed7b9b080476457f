"""Explorer Controller.

State machine for inspecting one combination at a time:
- Current position (ordinal index)
- Step forward/backward, jump to an index
- Case-insensitive search with wraparound
- Per-ad edits (full-text override, slot exclusion, revert)

Usage:
    controller = ExplorerController(session)
    controller.next()
    controller.find_next("career")
    text = controller.current_text
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from avb.composer import ComposedPart
    from avb.ports import NotifyPort
    from avb.session import Session


NO_MATCH_MESSAGE = "No matches found"


class ExplorerController:
    """Navigation and per-ad editing over a session.

    The controller does NOT render anything. The app reads its properties
    after each action. Structural edits to the session move the position
    back to the first ad, since ordinals no longer name the same ads.
    """

    def __init__(self, session: Session, notify: NotifyPort | None = None) -> None:
        """Initialize explorer controller.

        Args:
            session: Session to explore
            notify: Optional port for "no match" and similar notices
        """
        self._session = session
        self._notify = notify
        self._current_index: int = 0
        self._revision = session.revision

    @property
    def session(self) -> Session:
        return self._session

    @property
    def total(self) -> int:
        """Size of the combination space."""
        return self._session.total

    @property
    def current_index(self) -> int:
        """Current ad index (0-based)."""
        self.sync()
        return self._current_index

    @property
    def current_text(self) -> str:
        """Effective text of the current ad ("" when the space is empty)."""
        return self._session.effective_text(self.current_index)

    @property
    def current_parts(self) -> tuple[ComposedPart, ...]:
        """Parts composing the current ad, after exclusions."""
        return self._session.effective_parts(self.current_index)

    @property
    def excluded_ids(self) -> tuple[str, ...]:
        return self._session.overrides.excluded_ids(self.current_index)

    @property
    def is_edited(self) -> bool:
        """Whether the current ad carries a full-text override."""
        return self._session.is_edited(self.current_index)

    @property
    def status_text(self) -> str:
        """Human-readable position, e.g. "Ad 3 of 12 [Edited]"."""
        if self.total == 0:
            return "No combinations"
        edited = " [Edited]" if self.is_edited else ""
        return f"Ad {self.current_index + 1:,} of {self.total:,}{edited}"

    def sync(self) -> None:
        """Re-clamp after the session changed underneath the controller."""
        if self._session.revision != self._revision:
            self._revision = self._session.revision
            self._current_index = 0
        if self._current_index > max(self.total - 1, 0):
            self._current_index = 0

    # -- navigation -----------------------------------------------------------

    def jump_to(self, index: int) -> None:
        """Move to ``index``, clamped to ``[0, total-1]`` (0 when empty)."""
        self.sync()
        self._current_index = max(0, min(index, self.total - 1)) if self.total else 0

    def next(self) -> bool:
        """Advance one ad. Returns False at the last ad."""
        self.sync()
        if self._current_index < self.total - 1:
            self._current_index += 1
            return True
        return False

    def prev(self) -> bool:
        """Go back one ad. Returns False at the first ad."""
        self.sync()
        if self._current_index > 0:
            self._current_index -= 1
            return True
        return False

    def first(self) -> None:
        self.jump_to(0)

    def last(self) -> None:
        self.jump_to(self.total - 1)

    def find_next(self, term: str) -> bool:
        """Move to the next ad whose text contains ``term`` (case-insensitive).

        Scans from the ad after the current one, wrapping around, for at most
        ``total`` ads (so the current ad is checked last).

        Returns:
            True if a match was found. On no match the position is unchanged
            and the notify port is told.
        """
        if not term:
            return False
        self.sync()
        total = self.total
        needle = term.lower()
        for step in range(1, total + 1):
            index = (self._current_index + step) % total
            if needle in self._session.effective_text(index).lower():
                self._current_index = index
                return True
        if self._notify:
            self._notify.notify(NO_MATCH_MESSAGE, severity="warning")
        return False

    # -- editing --------------------------------------------------------------

    def set_text(self, text: str) -> None:
        """Replace the current ad's text verbatim."""
        self._session.set_full_text(self.current_index, text)

    def toggle_exclusion(self, slot_id: str) -> bool:
        """Drop or restore one slot in the current ad. Returns new excluded state."""
        return self._session.toggle_exclusion(self.current_index, slot_id)

    def revert(self) -> bool:
        """Remove every override on the current ad."""
        return self._session.clear_override(self.current_index)


__all__ = ["ExplorerController", "NO_MATCH_MESSAGE"]
