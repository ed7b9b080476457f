"""Help Overlay Widget.

Displays keyboard shortcuts.
Press ? to show, Esc to dismiss.
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Static


HELP_TEXT = """\
[bold cyan]Explorer Keyboard Shortcuts[/bold cyan]

[bold]Navigation[/bold]
  [cyan]→ / l[/cyan]    Next ad
  [cyan]← / h[/cyan]    Previous ad
  [cyan]Home / End[/cyan] First / last ad
  [cyan]g[/cyan]        Go to ad number
  [cyan]/[/cyan]        Search (Enter finds next match)
  [cyan]n[/cyan]        Find next match again

[bold]Editing this ad[/bold]
  [cyan]1-9[/cyan]      Drop / restore slot N
  [cyan]e[/cyan]        Edit full text
  [cyan]r[/cyan]        Revert to composed text
  [cyan]H[/cyan]        Toggle slot headings

[bold]Export[/bold]
  [cyan]z[/cyan]        ZIP archive
  [cyan]c[/cyan]        Combined document
  [cyan]i[/cyan]        Individual files
  [cyan]x[/cyan]        Cancel running export

[bold]General[/bold]
  [cyan]?[/cyan]        Toggle this help overlay
  [cyan]q[/cyan]        Quit (saves session)

[dim]Press Esc to close this help[/dim]
"""


class HelpOverlay(Container):
    """Overlay showing keyboard shortcuts.

    Usage:
        # In app compose():
        yield HelpOverlay(id="help-overlay", classes="hidden")

        # Toggle visibility:
        self.query_one("#help-overlay").toggle_class("hidden")
    """

    DEFAULT_CSS = """
    HelpOverlay {
        width: 60;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    HelpOverlay.hidden {
        display: none;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the help content."""
        yield Static(HELP_TEXT, markup=True)
