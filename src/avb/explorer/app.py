"""Explorer Textual Application.

Interactive inspection of the combination space: step through ads, search,
edit a single ad, and run exports.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Input, Label, TextArea

from avb.explorer.controller import ExplorerController
from avb.explorer.widgets.ad_view import AdView, SlotList
from avb.explorer.widgets.help import HelpOverlay
from avb.explorer.widgets.status_bar import ExplorerStatusBar
from avb.export import ExportPipeline, ExportStrategy
from avb.ports import AlwaysConfirm, CancellationToken, DirectorySaver

if TYPE_CHECKING:
    from avb.session import Session

_logger = logging.getLogger(__name__)

EXPORT_ACTIONS = {"export_archive", "export_combined", "export_individual"}
EDIT_ACTIONS = {"edit_text", "revert", "toggle_slot"}


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no question; dismisses with the answer."""

    BINDINGS = [
        Binding("y", "answer(True)", "Yes"),
        Binding("n", "answer(False)", "No"),
        Binding("escape", "answer(False)", "No"),
    ]

    DEFAULT_CSS = """
    ConfirmScreen {
        align: center middle;
        background: $surface-darken-1 80%;
    }

    ConfirmScreen > #confirm-container {
        width: 64;
        height: auto;
        background: $surface;
        border: thick $warning;
        padding: 1 2;
    }

    ConfirmScreen #confirm-buttons {
        height: auto;
        margin-top: 1;
    }
    """

    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-container"):
            yield Label(self._message, id="confirm-message")
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes", variant="warning", id="confirm-yes")
                yield Button("No", id="confirm-no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")

    def action_answer(self, answer: bool) -> None:
        self.dismiss(answer)


class EditTextScreen(ModalScreen[str | None]):
    """Full-text editor for one ad; dismisses with the new text or None."""

    AUTO_FOCUS = "#edit-text"

    BINDINGS = [
        Binding("ctrl+s", "save", "Save"),
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = """
    EditTextScreen {
        align: center middle;
        background: $surface-darken-1 80%;
    }

    EditTextScreen > #edit-container {
        width: 90%;
        height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    EditTextScreen TextArea {
        height: 1fr;
    }
    """

    def __init__(self, text: str, title: str) -> None:
        super().__init__()
        self._text = text
        self._title = title

    def compose(self) -> ComposeResult:
        with Vertical(id="edit-container"):
            yield Label(f"[bold]{self._title}[/bold]  [dim]ctrl+s save · esc cancel[/dim]")
            yield TextArea(self._text, id="edit-text")

    def action_save(self) -> None:
        self.dismiss(self.query_one("#edit-text", TextArea).text)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ExplorerApp(App):
    """Explorer TUI for composed ad variations.

    Usage:
        app = ExplorerApp(session, export_dir="exports")
        app.run()
    """

    TITLE = "Ad Variations"
    SUB_TITLE = "Explorer"
    AUTO_FOCUS = None

    CSS = """
    #main-area {
        height: 1fr;
    }

    #prompt-input.hidden {
        display: none;
    }

    #help-overlay {
        dock: right;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("question_mark", "toggle_help", "Help", show=True),
        Binding("escape", "dismiss", "Dismiss", show=False),
        # Navigation
        Binding("right", "next", "Next", show=True),
        Binding("l", "next", "Next", show=False),
        Binding("left", "prev", "Prev", show=True),
        Binding("h", "prev", "Prev", show=False),
        Binding("home", "first", "First", show=False),
        Binding("end", "last", "Last", show=False),
        Binding("g", "start_goto", "Go to", show=True),
        Binding("slash", "start_search", "Search", show=True),
        Binding("n", "find_next", "Find next", show=False),
        # Editing
        Binding("e", "edit_text", "Edit", show=True),
        Binding("r", "revert", "Revert", show=True),
        Binding("H", "toggle_headings", "Headings", show=False),
        Binding("1", "toggle_slot(0)", "Slot 1", show=False),
        Binding("2", "toggle_slot(1)", "Slot 2", show=False),
        Binding("3", "toggle_slot(2)", "Slot 3", show=False),
        Binding("4", "toggle_slot(3)", "Slot 4", show=False),
        Binding("5", "toggle_slot(4)", "Slot 5", show=False),
        Binding("6", "toggle_slot(5)", "Slot 6", show=False),
        Binding("7", "toggle_slot(6)", "Slot 7", show=False),
        Binding("8", "toggle_slot(7)", "Slot 8", show=False),
        Binding("9", "toggle_slot(8)", "Slot 9", show=False),
        # Export
        Binding("z", "export_archive", "ZIP", show=True),
        Binding("c", "export_combined", "Combined", show=True),
        Binding("i", "export_individual", "Files", show=True),
        Binding("x", "cancel_export", "Cancel export", show=False),
    ]

    def __init__(
        self,
        session: Session,
        export_dir: Path | str = "exports",
        **kwargs,
    ) -> None:
        """Initialize the explorer app.

        Args:
            session: Session to explore (checkpointed on edits and quit)
            export_dir: Directory receiving exported files
            **kwargs: Additional args passed to App
        """
        super().__init__(**kwargs)
        self._session = session
        self._export_dir = Path(export_dir)
        self._controller = ExplorerController(session, notify=self)
        self._prompt_mode: str | None = None
        self._last_search = ""
        self._help_visible = False
        self._export_token: CancellationToken | None = None

    @property
    def controller(self) -> ExplorerController:
        return self._controller

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Header()
        yield ExplorerStatusBar(id="status-bar")
        yield Input(id="prompt-input", classes="hidden")
        with Container(id="main-area"):
            yield AdView(id="ad-view")
            yield SlotList(id="slot-list")
        yield HelpOverlay(id="help-overlay", classes="hidden")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_view()
        if self._controller.total == 0:
            self.notify("No combinations: enable a slot with at least one line", severity="warning")

    # -- rendering ------------------------------------------------------------

    def _refresh_view(self) -> None:
        controller = self._controller
        self.query_one(ExplorerStatusBar).update_status(
            current=controller.current_index,
            total=controller.total,
            edited=controller.is_edited,
            headings=self._session.config.include_headings,
        )
        self.query_one(AdView).show(controller.current_text, edited=controller.is_edited)
        self.query_one(SlotList).refresh_from(controller)
        self.refresh_bindings()

    def _checkpoint(self) -> None:
        self._session.checkpoint()

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Disable exports and per-ad edits when there are no combinations."""
        if action in EXPORT_ACTIONS or action in EDIT_ACTIONS:
            return self._controller.total > 0
        if action == "cancel_export":
            return self._export_token is not None
        return True

    # -- general --------------------------------------------------------------

    def action_toggle_help(self) -> None:
        """Toggle the help overlay visibility."""
        self.query_one("#help-overlay").toggle_class("hidden")
        self._help_visible = not self._help_visible

    def action_dismiss(self) -> None:
        """Close the prompt or the help overlay."""
        if self._prompt_mode is not None:
            self._hide_prompt()
        elif self._help_visible:
            self.action_toggle_help()

    async def action_quit(self) -> None:
        self._checkpoint()
        self.exit()

    # -- navigation -----------------------------------------------------------

    def action_next(self) -> None:
        if self._controller.next():
            self._refresh_view()

    def action_prev(self) -> None:
        if self._controller.prev():
            self._refresh_view()

    def action_first(self) -> None:
        self._controller.first()
        self._refresh_view()

    def action_last(self) -> None:
        self._controller.last()
        self._refresh_view()

    def _show_prompt(self, mode: str, placeholder: str, value: str = "") -> None:
        prompt = self.query_one("#prompt-input", Input)
        prompt.placeholder = placeholder
        prompt.value = value
        prompt.remove_class("hidden")
        prompt.focus()
        self._prompt_mode = mode

    def _hide_prompt(self) -> None:
        prompt = self.query_one("#prompt-input", Input)
        prompt.add_class("hidden")
        self._prompt_mode = None
        self.set_focus(None)

    def action_start_search(self) -> None:
        self._show_prompt("search", "Search ads (case-insensitive)", self._last_search)

    def action_start_goto(self) -> None:
        self._show_prompt("goto", f"Go to ad number (1-{max(self._controller.total, 1):,})")

    def action_find_next(self) -> None:
        if self._controller.find_next(self._last_search):
            self._refresh_view()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Run the search or jump typed into the prompt."""
        if event.input.id != "prompt-input":
            return
        mode = self._prompt_mode
        value = event.value.strip()
        self._hide_prompt()
        if mode == "search":
            self._last_search = value
            self.action_find_next()
        elif mode == "goto":
            try:
                number = int(value.replace(",", ""))
            except ValueError:
                self.notify(f"Not a number: {value!r}", severity="warning")
                return
            self._controller.jump_to(number - 1)
            self._refresh_view()

    # -- editing --------------------------------------------------------------

    def action_toggle_slot(self, position: int) -> None:
        """Drop or restore the Nth active slot in the current ad."""
        active = self._session.active_slots
        if position >= len(active):
            return
        self._controller.toggle_exclusion(active[position].id)
        self._checkpoint()
        self._refresh_view()

    def action_revert(self) -> None:
        if self._controller.revert():
            self._checkpoint()
            self.notify("Reverted to composed text")
        self._refresh_view()

    def action_toggle_headings(self) -> None:
        self._session.set_include_headings(not self._session.config.include_headings)
        self._checkpoint()
        self._refresh_view()

    def action_edit_text(self) -> None:
        self._edit_text()

    @work(exclusive=True, group="edit")
    async def _edit_text(self) -> None:
        controller = self._controller
        title = f"Edit ad {controller.current_index + 1:,}"
        text = await self.push_screen_wait(EditTextScreen(controller.current_text, title))
        if text is None:
            return
        controller.set_text(text)
        self._checkpoint()
        self._refresh_view()

    # -- export ---------------------------------------------------------------

    def _pipeline(self) -> ExportPipeline:
        return ExportPipeline(
            self._session,
            confirm=AlwaysConfirm(True),
            saver=DirectorySaver(self._export_dir),
            notify=self,
        )

    @work(exclusive=True, group="export")
    async def _run_export(self, strategy: ExportStrategy) -> None:
        pipeline = self._pipeline()
        if not pipeline.export_enabled:
            return
        for message in pipeline.prompts_for(strategy):
            if not await self.push_screen_wait(ConfirmScreen(message)):
                _logger.info("%s export declined in explorer", strategy.value)
                return

        self._export_token = CancellationToken()
        self.refresh_bindings()
        try:
            await pipeline.run(strategy, self._export_token)
        finally:
            self._export_token = None
            self.refresh_bindings()

    def action_export_archive(self) -> None:
        self._run_export(ExportStrategy.ARCHIVE)

    def action_export_combined(self) -> None:
        self._run_export(ExportStrategy.COMBINED)

    def action_export_individual(self) -> None:
        self._run_export(ExportStrategy.INDIVIDUAL)

    def action_cancel_export(self) -> None:
        if self._export_token is not None:
            self._export_token.cancel()


__all__ = ["ConfirmScreen", "EditTextScreen", "ExplorerApp"]
