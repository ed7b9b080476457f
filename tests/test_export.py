"""Tests for the export pipeline."""

from __future__ import annotations

import io
import zipfile
from datetime import date

import pytest

from avb.export import (
    BATCH_DOWNLOAD_PROMPT,
    ExportPipeline,
    ExportStrategy,
    safety_cap_prompt,
)
from avb.ports import AlwaysConfirm, CancellationToken, RecordingSaver
from avb.session import OutputConfig, Session
from tests.helpers import make_slot


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def notify(self, message: str, severity: str = "information") -> None:
        self.messages.append((message, severity))


class CancelAfter:
    """Saver that cancels the token after ``n`` saves."""

    def __init__(self, token: CancellationToken, n: int) -> None:
        self.token = token
        self.n = n
        self.saved: list[str] = []

    def save(self, data: bytes, filename: str) -> None:
        self.saved.append(filename)
        if len(self.saved) >= self.n:
            self.token.cancel()


def _pipeline(session, answer=True, saver=None, notify=None):
    return ExportPipeline(
        session,
        confirm=AlwaysConfirm(answer),
        saver=saver if saver is not None else RecordingSaver(),
        notify=notify,
        today=lambda: date(2024, 5, 1),
    )


@pytest.fixture
def ab_session(ab_slots) -> Session:
    return Session(slots=ab_slots, config=OutputConfig(download_delay_ms=0))


@pytest.fixture
def big_session() -> Session:
    """110 combinations, above the minimum safety cap of 100."""
    slots = (
        make_slot("x", "X", *[f"x{i}" for i in range(11)]),
        make_slot("y", "Y", *[f"y{i}" for i in range(10)]),
    )
    return Session(slots=slots, config=OutputConfig(max_for_zip=100, download_delay_ms=0))


@pytest.fixture
def empty_session() -> Session:
    return Session(slots=(make_slot("a", "A", "a0", enabled=False),), config=OutputConfig())


class TestArchive:
    """ZIP export."""

    def test_entries_and_filename(self, ab_session) -> None:
        pipeline = _pipeline(ab_session)
        report = pipeline.export_archive()

        assert report.completed
        assert report.written == 2
        assert report.filename == "ad_variations_2024-05-01.zip"
        ((filename, payload),) = pipeline._saver.saved
        assert filename == report.filename
        with zipfile.ZipFile(io.BytesIO(payload)) as archive:
            assert archive.namelist() == ["1_a0.txt", "2_a1.txt"]
            assert archive.read("1_a0.txt").decode("utf-8") == "a0\n\nb0\n"

    def test_entries_use_overrides(self, ab_session) -> None:
        ab_session.set_full_text(1, "Custom Title\nbody\n")
        ab_session.toggle_exclusion(0, "b")
        pipeline = _pipeline(ab_session)
        pipeline.export_archive()
        (_, payload), = pipeline._saver.saved
        with zipfile.ZipFile(io.BytesIO(payload)) as archive:
            assert archive.namelist() == ["1_a0.txt", "2_custom-title.txt"]
            assert archive.read("1_a0.txt") == b"a0\n"
            assert archive.read("2_custom-title.txt") == b"Custom Title\nbody\n"

    def test_padding_follows_total(self, session) -> None:
        pipeline = _pipeline(session)
        pipeline.export_archive()
        (_, payload), = pipeline._saver.saved
        with zipfile.ZipFile(io.BytesIO(payload)) as archive:
            names = archive.namelist()
        assert len(names) == 12
        assert names[0].startswith("01_")
        assert names[-1].startswith("12_")

    def test_no_prompt_under_cap(self, ab_session) -> None:
        pipeline = _pipeline(ab_session)
        pipeline.export_archive()
        assert pipeline._confirm.messages == []

    def test_over_cap_asks_and_can_be_declined(self, big_session) -> None:
        notify = RecordingNotifier()
        pipeline = _pipeline(big_session, answer=False, notify=notify)
        report = pipeline.export_archive()
        assert report.declined
        assert not report.completed
        assert pipeline._confirm.messages == [safety_cap_prompt(110)]
        assert pipeline._saver.saved == []
        assert notify.messages == []

    def test_cancel_saves_nothing(self, ab_session) -> None:
        token = CancellationToken()
        token.cancel()
        notify = RecordingNotifier()
        pipeline = _pipeline(ab_session, notify=notify)
        report = pipeline.export_archive(token)
        assert report.cancelled
        assert report.written == 0
        assert pipeline._saver.saved == []
        assert notify.messages == [("Export cancelled", "warning")]


class TestCombined:
    """Single-document export."""

    def test_document_format(self, ab_session) -> None:
        ab_session.set_full_text(1, "custom\n")
        pipeline = _pipeline(ab_session)
        report = pipeline.export_combined()

        assert report.filename == "ad_variations_combined_2024-05-01.txt"
        ((_, payload),) = pipeline._saver.saved
        assert payload.decode("utf-8") == (
            "### Ad 1\n\na0\n\nb0\n" "\n\n---\n\n" "### Ad 2 [Edited]\n\ncustom\n"
        )

    def test_never_prompts(self, big_session) -> None:
        pipeline = _pipeline(big_session, answer=False)
        report = pipeline.export_combined()
        assert report.completed
        assert report.written == 110
        assert pipeline._confirm.messages == []

    def test_build_combined_stops_on_cancel(self, ab_session) -> None:
        token = CancellationToken()
        token.cancel()
        document, count = _pipeline(ab_session).build_combined(token)
        assert (document, count) == ("", 0)

    def test_notifies_on_completion(self, ab_session) -> None:
        notify = RecordingNotifier()
        _pipeline(ab_session, notify=notify).export_combined()
        assert notify.messages == [("Exported 2 ads (ad_variations_combined_2024-05-01.txt)", "information")]


class TestIndividual:
    """One file per ad."""

    async def test_saves_in_order(self, ab_session) -> None:
        pipeline = _pipeline(ab_session)
        report = await pipeline.export_individual()
        assert report.completed
        assert report.filename is None
        assert pipeline._saver.filenames == ["1_a0.txt", "2_a1.txt"]
        assert pipeline._saver.saved[0][1] == b"a0\n\nb0\n"

    async def test_always_asks_batch_prompt(self, ab_session) -> None:
        pipeline = _pipeline(ab_session)
        await pipeline.export_individual()
        assert pipeline._confirm.messages == [BATCH_DOWNLOAD_PROMPT]

    async def test_over_cap_asks_both(self, big_session) -> None:
        pipeline = _pipeline(big_session)
        report = await pipeline.export_individual()
        assert pipeline._confirm.messages == [BATCH_DOWNLOAD_PROMPT, safety_cap_prompt(110)]
        assert report.written == 110

    async def test_declined(self, ab_session) -> None:
        pipeline = _pipeline(ab_session, answer=False)
        report = await pipeline.export_individual()
        assert report.declined
        assert pipeline._saver.saved == []

    async def test_cancel_mid_export(self, session) -> None:
        token = CancellationToken()
        saver = CancelAfter(token, 3)
        report = await _pipeline(session, saver=saver).export_individual(token)
        assert report.cancelled
        assert report.written == 3
        assert len(saver.saved) == 3


class TestEmptySpace:
    """Nothing to export."""

    @pytest.mark.parametrize("strategy", list(ExportStrategy))
    async def test_skipped_without_port_calls(self, empty_session, strategy) -> None:
        notify = RecordingNotifier()
        pipeline = _pipeline(empty_session, answer=False, notify=notify)
        assert not pipeline.export_enabled
        assert pipeline.prompts_for(strategy) == []

        report = await pipeline.run(strategy)

        assert report.skipped
        assert report.strategy is strategy
        assert pipeline._confirm.messages == []
        assert pipeline._saver.saved == []
        assert notify.messages == []


class TestPrompts:
    def test_prompts_for(self, big_session, ab_session) -> None:
        big = _pipeline(big_session)
        assert big.prompts_for(ExportStrategy.ARCHIVE) == [safety_cap_prompt(110)]
        assert big.prompts_for(ExportStrategy.COMBINED) == []
        assert _pipeline(ab_session).prompts_for(ExportStrategy.INDIVIDUAL) == [BATCH_DOWNLOAD_PROMPT]

    def test_safety_prompt_text(self) -> None:
        assert safety_cap_prompt(5000) == (
            "You are about to generate 5,000 files. This may be slow or use a lot of memory. Continue?"
        )

    async def test_run_dispatches(self, ab_session) -> None:
        pipeline = _pipeline(ab_session)
        report = await pipeline.run(ExportStrategy.COMBINED)
        assert report.strategy is ExportStrategy.COMBINED
        assert ExportStrategy("archive") is ExportStrategy.ARCHIVE
