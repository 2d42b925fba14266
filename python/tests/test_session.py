"""
Tests for the operator session: row editing, paste, undo/redo history,
selectors and rendering/export.
"""

import json
import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from columns import COLUMNS
from config_manager import ConfigManager
from session import STATE_IDLE, STATE_RENDERED, EntrySession, History, SessionError


# ============================================
# FIXTURES
# ============================================


@pytest.fixture
def config(tmp_path):
    """Default configuration (no file on disk)"""
    return ConfigManager.create(str(tmp_path / "missing.yaml"))


@pytest.fixture
def session(config):
    return EntrySession(config=config)


# ============================================
# ROWS
# ============================================


class TestRows:
    """Tests for row editing."""

    def test_new_session_is_empty_and_idle(self, session):
        assert len(session) == 0
        assert session.state == STATE_IDLE
        assert session.mode == "create"
        assert session.profile_type == "rel"
        assert not session.can_undo()

    def test_add_row_fills_every_column(self, session):
        row_id = session.add_row({"full_name": "John Doe"})
        row = session.get_row(row_id)

        assert row_id.startswith("ROW-")
        assert set(row) == set(COLUMNS)
        assert row["full_name"] == "John Doe"
        assert row["gender"] == ""

    def test_row_ids_are_unique(self, session):
        ids = {session.add_row() for _ in range(5)}
        assert len(ids) == 5

    def test_unknown_column_rejected(self, session):
        with pytest.raises(SessionError):
            session.add_row({"shoe_size": "44"})
        row_id = session.add_row()
        with pytest.raises(SessionError):
            session.update_cell(row_id, "shoe_size", "44")

    def test_update_and_delete(self, session):
        first = session.add_row({"full_name": "A"})
        second = session.add_row({"full_name": "B"})

        session.update_cell(first, "gender", "Male")
        assert session.get_row(first)["gender"] == "Male"

        session.delete_row(first)
        assert session.row_ids == [second]
        with pytest.raises(SessionError):
            session.get_row(first)

    def test_rows_are_copies(self, session):
        row_id = session.add_row({"full_name": "A"})
        session.rows[0]["full_name"] = "Changed"
        assert session.get_row(row_id)["full_name"] == "A"

    def test_load_rows_replaces_and_ignores_unknown_keys(self, session):
        session.add_row({"full_name": "Old"})
        ids = session.load_rows([{"full_name": "New", "shoe_size": "44"}, {"reference_id": "R1"}])

        assert session.row_ids == ids
        assert [r["full_name"] for r in session.rows] == ["New", ""]
        assert "shoe_size" not in session.rows[0]

    def test_clear(self, session):
        session.add_row()
        session.clear()
        assert len(session) == 0
        assert session.can_undo()


# ============================================
# PASTE
# ============================================


class TestPaste:
    """Tests for tab-separated paste."""

    def test_paste_appends_rows(self, session):
        count = session.paste_rows("John Doe\tMale\nJane Roe\tFemale\n", start_column="full_name")

        assert count == 2
        assert [(r["full_name"], r["gender"]) for r in session.rows] == [
            ("John Doe", "Male"),
            ("Jane Roe", "Female"),
        ]

    def test_paste_overwrites_existing_then_appends(self, session):
        kept = session.add_row({"full_name": "Old", "city": "Paris"})
        session.paste_rows("New\nExtra", start_row=0, start_column="full_name")

        assert session.row_ids[0] == kept
        assert session.rows[0]["full_name"] == "New"
        assert session.rows[0]["city"] == "Paris"
        assert session.rows[1]["full_name"] == "Extra"

    def test_paste_drops_cells_past_last_column(self, session):
        session.paste_rows("1\t2\t3", start_column=COLUMNS[-2])
        row = session.rows[0]
        assert row[COLUMNS[-2]] == "1"
        assert row[COLUMNS[-1]] == "2"

    def test_paste_handles_crlf_and_blank_lines(self, session):
        assert session.paste_rows("A\r\n\r\nB\r\n", start_column="full_name") == 2
        assert [r["full_name"] for r in session.rows] == ["A", "B"]

    def test_paste_is_one_undo_step(self, session):
        session.paste_rows("A\nB\nC", start_column="full_name")
        assert session.undo()
        assert len(session) == 0

    def test_empty_paste(self, session):
        assert session.paste_rows("") == 0
        assert not session.can_undo()

    def test_bad_start_position(self, session):
        with pytest.raises(SessionError):
            session.paste_rows("x", start_column="nope")
        with pytest.raises(SessionError):
            session.paste_rows("x", start_row=3)


# ============================================
# HISTORY
# ============================================


class TestHistory:
    """Tests for undo/redo."""

    def test_undo_redo(self, session):
        row_id = session.add_row({"full_name": "A"})
        session.update_cell(row_id, "full_name", "B")

        assert session.undo()
        assert session.get_row(row_id)["full_name"] == "A"
        assert session.can_redo()
        assert session.redo()
        assert session.get_row(row_id)["full_name"] == "B"
        assert not session.redo()

    def test_new_edit_discards_redo_tail(self, session):
        session.add_row({"full_name": "A"})
        session.add_row({"full_name": "B"})
        session.undo()
        session.add_row({"full_name": "C"})

        assert not session.can_redo()
        assert [r["full_name"] for r in session.rows] == ["A", "C"]

    def test_undo_on_fresh_session(self, session):
        assert not session.undo()

    def test_history_is_capped(self, tmp_path):
        config = ConfigManager.create(str(tmp_path / "missing.yaml"))
        config.session.history_limit = 3
        session = EntrySession(config=config)
        for name in "ABCDEF":
            session.add_row({"full_name": name})

        undone = 0
        while session.undo():
            undone += 1
        assert undone == 3
        assert len(session) == 3

    def test_history_object(self):
        history = History((), limit=2)
        for n in range(1, 5):
            history.push(((f"ROW-{n}", {}),))
        assert len(history) == 3
        assert history.current[0][0] == "ROW-4"

    def test_history_limit_must_be_positive(self):
        with pytest.raises(SessionError):
            History((), limit=0)

    def test_snapshots_are_read_only(self, session):
        session.add_row({"full_name": "A"})
        cells = session._history.current[0][1]
        with pytest.raises(TypeError):
            cells["full_name"] = "B"


# ============================================
# SELECTORS AND OUTPUT
# ============================================


class TestOutput:
    """Tests for generation, export and validation."""

    def test_generate_renders_json(self, session):
        session.add_row({"full_name": "Jane A. Smith", "article_id": "12345"})
        text = session.generate()

        assert session.state == STATE_RENDERED
        assert session.rendered_for == ("create", "rel")
        assert json.loads(text) == session.rendered_document
        assert session.rendered_document["individuals"][0]["middleName"] == "A"

    def test_selector_change_keeps_rendered_output(self, session):
        session.add_row({"full_name": "Jane Roe"})
        text = session.generate()

        session.set_mode("update")
        session.set_profile_type("pep")

        assert session.rendered_json == text
        assert session.rendered_for == ("create", "rel")
        assert json.loads(session.generate()) == {"individuals": []}
        assert session.rendered_for == ("update", "pep")

    def test_invalid_selectors(self, session, config):
        with pytest.raises(SessionError):
            session.set_mode("merge")
        with pytest.raises(SessionError):
            session.set_profile_type("business")
        with pytest.raises(SessionError):
            EntrySession(config=config, mode="merge")

    def test_initial_selectors_from_arguments(self, config):
        session = EntrySession(config=config, mode="update", profile_type="pep")
        assert (session.mode, session.profile_type) == ("update", "pep")

    def test_policy_comes_from_config(self, config):
        config.policy.generate_name_variation = True
        session = EntrySession(config=config)
        session.add_row({"full_name": "John Doe"})
        session.generate()
        aliases = session.rendered_document["individuals"][0]["aliases"]
        assert aliases[0]["type"] == "Name Spelling Variation"

    def test_export_writes_named_file(self, session, tmp_path):
        session.set_profile_type("pep")
        session.add_row({"full_name": "Ana Lopez", "pep_position": "Senator"})
        path = session.export(str(tmp_path / "exports"), on_date=date(2024, 1, 31))

        assert path.name == "PEP_CREATE_2024-01-31.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["individuals"][0]["currentPepEntries"] == [{"position": "Senator"}]

    def test_validate_uses_active_mode(self, session):
        session.add_row({"full_name": "John Doe"})
        session.set_mode("update")
        report = session.validate()

        assert report.mode == "update"
        assert report.counts_by_code() == {"MISSING_IDENTITY": 1}
