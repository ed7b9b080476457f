"""Ad View and Slot List Widgets.

AdView shows the effective text of the current ad.
SlotList shows each active slot with its picked line and whether it is
dropped from the current ad.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from textual.widgets import Static

if TYPE_CHECKING:
    from avb.explorer.controller import ExplorerController


class AdView(Static):
    """Scrollable panel with the current ad text."""

    DEFAULT_CSS = """
    AdView {
        border: round $primary;
        padding: 1 2;
        height: 1fr;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self._text = ""

    @property
    def text(self) -> str:
        return self._text

    def show(self, text: str, edited: bool = False) -> None:
        self._text = text
        self.border_title = "Ad (edited)" if edited else "Ad"
        body = escape(text.rstrip("\n")) if text.strip() else "[dim](empty)[/dim]"
        self.update(body)


class SlotList(Static):
    """Numbered list of active slots for the current ad.

    The number is the key that toggles that slot's exclusion.
    """

    DEFAULT_CSS = """
    SlotList {
        border: round $secondary;
        padding: 0 1;
        height: auto;
        max-height: 50%;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.border_title = "Slots"

    def render_lines(self, controller: ExplorerController) -> list[str]:
        """Build one markup line per active slot."""
        session = controller.session
        active = session.active_slots
        if not active:
            return ["[dim]No active slots[/dim]"]

        excluded = set(controller.excluded_ids)
        picked = {part.slot_id: part.text for part in controller.current_parts}
        edited = controller.is_edited
        lines = []
        for number, slot in enumerate(active, start=1):
            mark = "[red]✗[/red]" if slot.id in excluded else "[green]✓[/green]"
            key = f"[cyan]{number}[/cyan]" if number <= 9 else " "
            line = picked.get(slot.id, "")
            preview = escape(line.splitlines()[0][:60]) if line.strip() else "[dim]—[/dim]"
            lines.append(f"{key} {mark} [bold]{escape(slot.name)}[/bold] ({slot.size}) {preview}")
        if edited:
            lines.append("[dim]Full-text override active; slot toggles revert to composed text[/dim]")
        return lines

    def refresh_from(self, controller: ExplorerController) -> None:
        self.update("\n".join(self.render_lines(controller)))
