"""
Tests for create/update row classification and de-duplication.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from transform.classifier import (
    MODE_CREATE,
    MODE_UPDATE,
    classify_row,
    dedupe_key,
    is_create_row,
    is_update_row,
    select_rows,
)


class TestMembership:
    """Tests for mode membership."""

    @pytest.mark.parametrize("reference", ["", "   ", "create", " create ", None])
    def test_named_row_without_reference_is_create(self, reference):
        row = {"full_name": "John Doe", "reference_id": reference}
        assert is_create_row(row)
        assert not is_update_row(row)
        assert classify_row(row) == MODE_CREATE

    def test_missing_reference_column_is_create(self):
        assert is_create_row({"full_name": "John Doe"})

    def test_reference_id_makes_update(self):
        row = {"full_name": "John Doe", "reference_id": "R-100"}
        assert is_update_row(row)
        assert not is_create_row(row)
        assert classify_row(row) == MODE_UPDATE

    def test_update_row_needs_no_name(self):
        assert is_update_row({"reference_id": "R-100"})

    def test_row_without_identity_belongs_nowhere(self):
        row = {"full_name": "", "reference_id": ""}
        assert classify_row(row) is None
        assert select_rows([row], MODE_CREATE).rows == []
        assert select_rows([row], MODE_UPDATE).rows == []

    def test_placeholder_name_is_no_identity(self):
        assert not is_create_row({"full_name": "____"})

    @pytest.mark.parametrize("name", ["___ ___", "...", ". .", "_ . _"])
    def test_name_without_usable_part_is_no_identity(self, name):
        row = {"full_name": name, "gender": "Male", "article_id": "9"}
        assert not is_create_row(row)
        assert classify_row(row) is None

    @pytest.mark.parametrize("reference", ["CREATE", "Create"])
    def test_create_marker_is_case_sensitive(self, reference):
        row = {"full_name": "John Doe", "reference_id": reference}
        assert is_update_row(row)
        assert not is_create_row(row)


class TestSelectRows:
    """Tests for filtering and first-seen-wins de-duplication."""

    def test_create_duplicates_match_case_and_period_insensitively(self):
        rows = [
            {"full_name": "John A. Doe", "article_id": "1"},
            {"full_name": "john a doe", "article_id": "2"},
            {"full_name": "Jane Roe"},
        ]
        selection = select_rows(rows, MODE_CREATE)

        assert selection.rows == [rows[0], rows[2]]
        assert selection.indices == [0, 2]
        assert selection.duplicates == {1: 0}

    def test_update_duplicates_match_trimmed_reference(self):
        rows = [
            {"reference_id": "R1", "gender": "Male"},
            {"reference_id": " R1 ", "gender": "Female"},
            {"reference_id": "R2"},
        ]
        selection = select_rows(rows, MODE_UPDATE)

        assert [row["reference_id"] for row in selection.rows] == ["R1", "R2"]
        assert selection.duplicates == {1: 0}

    def test_other_mode_rows_are_excluded(self):
        rows = [
            {"full_name": "John Doe"},
            {"full_name": "Jane Roe", "reference_id": "R1"},
        ]
        assert select_rows(rows, MODE_CREATE).excluded == [1]
        assert select_rows(rows, MODE_UPDATE).excluded == [0]

    def test_unusable_names_are_excluded_not_duplicates(self):
        rows = [{"full_name": "..."}, {"full_name": ". ."}, {"full_name": "Jane Roe"}]
        selection = select_rows(rows, MODE_CREATE)

        assert selection.indices == [2]
        assert selection.excluded == [0, 1]
        assert selection.duplicates == {}

    def test_preserves_grid_order(self):
        rows = [{"full_name": name} for name in ("C", "A", "B")]
        assert [r["full_name"] for r in select_rows(rows, MODE_CREATE).rows] == ["C", "A", "B"]

    def test_dedupe_key(self):
        assert dedupe_key({"full_name": " Dr. John DOE "}, MODE_CREATE) == "dr john doe"
        assert dedupe_key({"reference_id": " R9 "}, MODE_UPDATE) == "R9"
