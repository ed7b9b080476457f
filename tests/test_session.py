"""Tests for the editing session."""

from __future__ import annotations

import pytest

from avb.core.config import AvbSettings
from avb.model import DEFAULT_SLOT_CONTENT
from avb.session import OutputConfig, Session
from avb.store import KEY_HEADINGS, KEY_OVERRIDES, KEY_SEPARATOR, MemoryStore, SessionStore
from tests.helpers import make_slot


def _edit(session: Session) -> None:
    session.set_full_text(0, "custom\n")
    session.toggle_exclusion(1, "body")


class TestDefaults:
    """Fresh session state."""

    def test_default_slots(self) -> None:
        session = Session()
        assert [s.name for s in session.slots] == [name for name, _ in DEFAULT_SLOT_CONTENT]
        assert session.total == 1
        assert len(session.overrides) == 0

    def test_reset_defaults(self, session) -> None:
        _edit(session)
        session.reset_defaults()
        assert session.total == 1
        assert len(session.overrides) == 0


class TestStructuralEditsClearOverrides:
    """Every slot-list change empties the override mapping."""

    def test_disable_then_enable_does_not_restore(self, session) -> None:
        """Overrides lost on disable stay lost after re-enabling."""
        session.set_full_text(5, "custom\n")
        session.set_slot_enabled("cta", False)
        assert session.total == 6
        assert len(session.overrides) == 0

        session.set_slot_enabled("cta", True)
        assert session.total == 12
        assert not session.is_edited(5)
        assert session.effective_text(5) != "custom\n"

    @pytest.mark.parametrize(
        "edit",
        [
            lambda s: s.add_slot("Extra"),
            lambda s: s.remove_slot("body"),
            lambda s: s.rename_slot("hook", "Opening"),
            lambda s: s.move_slot("cta", 0),
            lambda s: s.add_candidate("hook", "Another hook"),
            lambda s: s.bulk_add_candidates("cta", "one\ntwo"),
            lambda s: s.update_candidate("body", "body1", "Edited body"),
            lambda s: s.remove_candidate("body", "body2"),
            lambda s: s.move_candidate("hook", "hook1", 0),
            lambda s: s.replace_slots(s.slots),
        ],
    )
    def test_edit_clears(self, session, edit) -> None:
        _edit(session)
        before = session.revision
        edit(session)
        assert len(session.overrides) == 0
        assert session.revision == before + 1

    def test_output_settings_keep_overrides(self, session) -> None:
        _edit(session)
        before = session.revision
        session.set_include_headings(True)
        session.set_separator(" | ")
        session.set_max_for_preview(5)
        session.set_max_for_zip(500)
        assert len(session.overrides) == 2
        assert session.revision == before

    def test_rejected_edit_keeps_state(self, session) -> None:
        _edit(session)
        with pytest.raises(ValueError):
            session.replace_slots(session.slots + (make_slot("hook", "Dup", "x"),))
        assert len(session.overrides) == 2
        assert session.total == 12


class TestSlotEditing:
    """Slot and candidate operations."""

    def test_add_slot_is_empty_and_inactive(self, session) -> None:
        slot = session.add_slot()
        assert slot.name == "New Section"
        assert slot.enabled
        assert session.total == 12
        assert session.slots[-1].id == slot.id

    def test_add_candidate_grows_space(self, session) -> None:
        candidate = session.add_candidate("hook", "Third hook")
        assert session.total == 18
        assert session.slot("hook").items[-1] == candidate

    def test_bulk_add_trims_and_skips_blank_lines(self, session) -> None:
        added = session.bulk_add_candidates("cta", "  one  \r\n\n   \ntwo\n")
        assert [c.text for c in added] == ["one", "two"]
        assert [c.text for c in session.slot("cta").items][-2:] == ["one", "two"]

    def test_bulk_add_of_blank_blob_is_noop(self, session) -> None:
        _edit(session)
        before = session.revision
        assert session.bulk_add_candidates("cta", "\n   \n") == []
        assert session.revision == before
        assert len(session.overrides) == 2

    def test_move_slot_changes_significance(self, session) -> None:
        session.move_slot("cta", 0)
        assert [s.id for s in session.slots] == ["cta", "hook", "body"]
        assert session.effective_text(1).startswith("DM me INFO.\n\nTired of your job?")

    def test_move_clamps_position(self, session) -> None:
        session.move_slot("hook", 99)
        assert [s.id for s in session.slots] == ["body", "cta", "hook"]
        session.move_candidate("body", "body2", -5)
        assert [c.id for c in session.slot("body").items] == ["body2", "body0", "body1"]

    def test_rename_is_visible_in_headings(self, session) -> None:
        session.rename_slot("hook", "Opening")
        session.set_include_headings(True)
        assert session.effective_text(0).startswith("Opening\nTired of your job?")

    def test_remove_last_candidate_deactivates_slot(self, session) -> None:
        session.remove_candidate("cta", "cta0")
        session.remove_candidate("cta", "cta1")
        assert session.total == 6
        assert [s.id for s in session.active_slots] == ["hook", "body"]

    def test_unknown_ids_raise_key_error(self, session) -> None:
        with pytest.raises(KeyError):
            session.remove_slot("missing")
        with pytest.raises(KeyError):
            session.update_candidate("hook", "missing", "x")

    def test_everything_disabled_is_empty_space(self, session) -> None:
        for slot_id in ("hook", "body", "cta"):
            session.set_slot_enabled(slot_id, False)
        assert session.total == 0
        assert session.effective_text(0) == ""
        assert session.preview() == []


class TestOutput:
    """Composition settings and preview."""

    def test_effective_text_uses_config(self, session) -> None:
        session.set_include_headings(True)
        session.set_separator(" -- ")
        assert session.effective_text(0) == "Hook\nTired of your job? -- Body\nI left nursing. -- CTA\nDM me INFO.\n"

    def test_preview_is_capped(self, session) -> None:
        session.set_max_for_preview(3)
        preview = session.preview()
        assert len(preview) == 3
        assert preview[1] == session.effective_text(1)

    def test_preview_includes_overrides(self, session) -> None:
        session.set_full_text(0, "custom\n")
        assert session.preview()[0] == "custom\n"

    def test_caps_are_clamped(self, session) -> None:
        session.set_max_for_preview(0)
        session.set_max_for_zip(5)
        assert session.config.max_for_preview == 1
        assert session.config.max_for_zip == 100

    def test_output_config_clamps_on_init(self) -> None:
        config = OutputConfig(max_for_preview=-3, max_for_zip=10, download_delay_ms=-1)
        assert (config.max_for_preview, config.max_for_zip, config.download_delay_ms) == (1, 100, 0)


class TestPersistence:
    """checkpoint() and Session.load()."""

    def test_checkpoint_without_store(self, session) -> None:
        assert session.checkpoint() is False

    def test_round_trip(self, ad_slots) -> None:
        store = SessionStore(MemoryStore())
        session = Session(slots=ad_slots, store=store)
        session.set_include_headings(True)
        session.set_separator(" | ")
        _edit(session)
        assert session.checkpoint() is True

        restored = Session.load(store)
        assert restored.slots == session.slots
        assert restored.config.include_headings is True
        assert restored.config.separator == " | "
        assert restored.is_edited(0)
        assert restored.overrides.excluded_ids(1) == ("body",)
        assert restored.effective_text(1) == session.effective_text(1)

    def test_load_empty_store_uses_defaults(self) -> None:
        session = Session.load(SessionStore(MemoryStore()))
        assert session.total == 1
        assert session.store is not None

    def test_load_uses_settings_for_missing_values(self) -> None:
        settings = AvbSettings(include_headings=True, separator=" | ", max_for_preview=3)
        session = Session.load(SessionStore(MemoryStore()), settings)
        assert session.config.include_headings is True
        assert session.config.separator == " | "
        assert session.config.max_for_preview == 3

    def test_persisted_values_beat_settings(self) -> None:
        settings = AvbSettings(include_headings=True, separator=" | ")
        kv = MemoryStore({KEY_HEADINGS: "0", KEY_SEPARATOR: "\n"})
        session = Session.load(SessionStore(kv), settings)
        assert session.config.include_headings is False
        assert session.config.separator == "\n"

    def test_load_survives_malformed_overrides(self) -> None:
        kv = MemoryStore({KEY_OVERRIDES: '{"0": {"excludedIds": true}}'})
        session = Session.load(SessionStore(kv))
        assert len(session.overrides) == 0
