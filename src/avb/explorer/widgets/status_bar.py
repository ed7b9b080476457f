"""Explorer Status Bar Widget.

Displays the explorer position:
- Ad counter (current/total)
- Progress bar through the combination space
- Edited marker when the ad carries a full-text override
- Headings mode
"""

from __future__ import annotations

from textual.widgets import Static


def progress_bar(progress: float, width: int = 20) -> str:
    """Generate a progress bar.

    Args:
        progress: Progress 0.0 to 1.0
        width: Bar width in characters

    Returns:
        Progress bar like "████████░░░░░░░░░░░░"
    """
    filled = int(progress * width)
    filled = max(0, min(width, filled))
    return "█" * filled + "░" * (width - filled)


class ExplorerStatusBar(Static):
    """One-line status bar for the explorer.

    Usage:
        bar = ExplorerStatusBar()
        bar.update_status(current=4, total=12, edited=True, headings=False)
    """

    DEFAULT_CSS = """
    ExplorerStatusBar {
        height: 1;
        background: $primary-darken-2;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self._current = 0
        self._total = 0
        self._edited = False
        self._headings = False

    def update_status(self, current: int, total: int, edited: bool, headings: bool) -> None:
        """Update explorer status.

        Args:
            current: Current ad index (0-based)
            total: Number of combinations
            edited: Whether the current ad has a full-text override
            headings: Whether slot headings are included
        """
        self._current = current
        self._total = total
        self._edited = edited
        self._headings = headings
        self.update(self.render_bar())

    def render_bar(self) -> str:
        """Render the status bar content."""
        if self._total == 0:
            return "[yellow]No combinations[/yellow] [dim]enable a slot with at least one line[/dim]"

        progress = self._current / (self._total - 1) if self._total > 1 else 0.0
        bar = progress_bar(progress, width=15)
        counter = f"{self._current + 1:,}/{self._total:,}"
        edited = " [magenta]EDITED[/magenta]" if self._edited else ""
        headings = "headings on" if self._headings else "headings off"

        return f"[bold]AD[/bold] {counter} [{bar}]{edited} [dim]{headings}[/dim]"
