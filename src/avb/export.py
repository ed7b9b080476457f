"""Export pipeline: every combination of a session, in three output shapes.

- archive:    one ZIP with one text entry per ad
- combined:   one text document with every ad under an ``### Ad n`` header
- individual: one saved file per ad, yielding to the event loop between files

All strategies walk ordinals ``0..total-1`` in order and read each ad through
the session's override layer. A session with no combinations makes every
strategy a no-op. Declining a confirmation aborts before anything is saved.
Cancellation is checked at every iteration boundary.

Usage:
    pipeline = ExportPipeline(session, confirm=AlwaysConfirm(), saver=DirectorySaver("out"))
    report = pipeline.export_archive()
    report = await pipeline.export_individual(token)
"""

from __future__ import annotations

import asyncio
import io
import logging
import zipfile
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Callable

from avb.composer import entry_name

if TYPE_CHECKING:
    from avb.ports import CancellationToken, ConfirmPort, NotifyPort, SavePort
    from avb.session import Session

_logger = logging.getLogger(__name__)

COMBINED_DELIMITER = "\n\n---\n\n"
EDITED_MARKER = " [Edited]"
BATCH_DOWNLOAD_PROMPT = "This will trigger many download prompts (one per file). Continue?"


class ExportStrategy(str, Enum):
    ARCHIVE = "archive"
    COMBINED = "combined"
    INDIVIDUAL = "individual"


@dataclass(frozen=True)
class ExportReport:
    """Outcome of one export request.

    Attributes:
        strategy: Which export ran.
        total: Size of the combination space at export time.
        written: Ads written (entries, sections or files).
        filename: Output file name for archive/combined, None otherwise.
        skipped: Nothing to export (total was 0).
        declined: The user declined a confirmation.
        cancelled: The cancellation token fired mid-export.
    """

    strategy: ExportStrategy
    total: int
    written: int = 0
    filename: str | None = None
    skipped: bool = False
    declined: bool = False
    cancelled: bool = False

    @property
    def completed(self) -> bool:
        return not (self.skipped or self.declined or self.cancelled)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def safety_cap_prompt(total: int) -> str:
    return (
        f"You are about to generate {total:,} files. "
        "This may be slow or use a lot of memory. Continue?"
    )


class ExportPipeline:
    """Drives a session's combination space through one of three exporters."""

    def __init__(
        self,
        session: Session,
        *,
        confirm: ConfirmPort,
        saver: SavePort,
        notify: NotifyPort | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._session = session
        self._confirm = confirm
        self._saver = saver
        self._notify = notify
        self._today = today or _utc_today

    @property
    def export_enabled(self) -> bool:
        """False when there is nothing to export; UIs disable export actions."""
        return self._session.total > 0

    # -- helpers --------------------------------------------------------------

    def _stamp(self) -> str:
        return self._today().isoformat()

    def prompts_for(self, strategy: ExportStrategy) -> list[str]:
        """Confirmation messages an export of ``strategy`` would ask, in order.

        Hosts whose confirmation is asynchronous (the Textual app) ask these
        up front and then run the pipeline with an always-yes port.
        """
        total = self._session.total
        if total == 0:
            return []
        prompts: list[str] = []
        if strategy is ExportStrategy.INDIVIDUAL:
            prompts.append(BATCH_DOWNLOAD_PROMPT)
        if strategy is not ExportStrategy.COMBINED and total > self._session.config.max_for_zip:
            prompts.append(safety_cap_prompt(total))
        return prompts

    def _confirmed(self, strategy: ExportStrategy) -> bool:
        return all(self._confirm.confirm(message) for message in self.prompts_for(strategy))

    def _finish(self, report: ExportReport) -> ExportReport:
        if report.cancelled:
            _logger.info("%s export cancelled after %d of %d", report.strategy.value, report.written, report.total)
            if self._notify:
                self._notify.notify("Export cancelled", severity="warning")
        elif report.declined:
            _logger.info("%s export declined (%d ads)", report.strategy.value, report.total)
        elif report.completed:
            target = report.filename or f"{report.written} files"
            _logger.info("%s export finished: %d ads -> %s", report.strategy.value, report.written, target)
            if self._notify:
                self._notify.notify(f"Exported {report.written} ads ({target})")
        return report

    # -- strategies -----------------------------------------------------------

    def export_archive(self, token: CancellationToken | None = None) -> ExportReport:
        """Write every ad as an entry of one ZIP archive."""
        session = self._session
        total = session.total
        if total == 0:
            return ExportReport(ExportStrategy.ARCHIVE, total, skipped=True)
        if not self._confirmed(ExportStrategy.ARCHIVE):
            return self._finish(ExportReport(ExportStrategy.ARCHIVE, total, declined=True))

        _logger.info("Archive export started: %d ads", total)
        buffer = io.BytesIO()
        written = 0
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for index in range(total):
                if token is not None and token.cancelled:
                    return self._finish(
                        ExportReport(ExportStrategy.ARCHIVE, total, written=written, cancelled=True)
                    )
                content = session.effective_text(index)
                archive.writestr(entry_name(index + 1, total, content), content.encode("utf-8"))
                written += 1

        filename = f"ad_variations_{self._stamp()}.zip"
        self._saver.save(buffer.getvalue(), filename)
        return self._finish(ExportReport(ExportStrategy.ARCHIVE, total, written=written, filename=filename))

    def build_combined(self, token: CancellationToken | None = None) -> tuple[str, int]:
        """Render the combined document.

        Returns:
            The document and how many ads it contains (fewer than total only
            when cancelled).
        """
        session = self._session
        pieces: list[str] = []
        for index in range(session.total):
            if token is not None and token.cancelled:
                break
            marker = EDITED_MARKER if session.is_edited(index) else ""
            pieces.append(f"### Ad {index + 1}{marker}\n\n{session.effective_text(index)}")
        return COMBINED_DELIMITER.join(pieces), len(pieces)

    def export_combined(self, token: CancellationToken | None = None) -> ExportReport:
        """Write every ad into one text document."""
        total = self._session.total
        if total == 0:
            return ExportReport(ExportStrategy.COMBINED, total, skipped=True)

        document, written = self.build_combined(token)
        if token is not None and token.cancelled:
            return self._finish(
                ExportReport(ExportStrategy.COMBINED, total, written=written, cancelled=True)
            )

        filename = f"ad_variations_combined_{self._stamp()}.txt"
        self._saver.save(document.encode("utf-8"), filename)
        return self._finish(ExportReport(ExportStrategy.COMBINED, total, written=written, filename=filename))

    async def export_individual(self, token: CancellationToken | None = None) -> ExportReport:
        """Save each ad as its own file, pausing between dispatches."""
        session = self._session
        total = session.total
        if total == 0:
            return ExportReport(ExportStrategy.INDIVIDUAL, total, skipped=True)
        if not self._confirmed(ExportStrategy.INDIVIDUAL):
            return self._finish(ExportReport(ExportStrategy.INDIVIDUAL, total, declined=True))

        _logger.info("Individual export started: %d ads", total)
        delay = session.config.download_delay_ms / 1000.0
        written = 0
        for index in range(total):
            if token is not None and token.cancelled:
                return self._finish(
                    ExportReport(ExportStrategy.INDIVIDUAL, total, written=written, cancelled=True)
                )
            content = session.effective_text(index)
            filename = entry_name(index + 1, total, content)
            self._saver.save(content.encode("utf-8"), filename)
            _logger.debug("Dispatched %s", filename)
            written += 1
            await asyncio.sleep(delay)

        return self._finish(ExportReport(ExportStrategy.INDIVIDUAL, total, written=written))

    async def run(self, strategy: ExportStrategy, token: CancellationToken | None = None) -> ExportReport:
        """Dispatch by strategy name (used by the CLI and the explorer app)."""
        if strategy is ExportStrategy.ARCHIVE:
            return self.export_archive(token)
        if strategy is ExportStrategy.COMBINED:
            return self.export_combined(token)
        return await self.export_individual(token)


__all__ = [
    "BATCH_DOWNLOAD_PROMPT",
    "COMBINED_DELIMITER",
    "EDITED_MARKER",
    "ExportPipeline",
    "ExportReport",
    "ExportStrategy",
    "safety_cap_prompt",
]
