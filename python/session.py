"""
Operator session for bulk entry

Owns the row collection, the mode/profile selectors, a bounded undo/redo
history and the last rendered JSON. Every mutation replaces the current
snapshot with a new immutable one; the transformation engine only ever
sees a plain copy of the rows.
"""

import logging
import uuid
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from columns import COLUMNS, empty_row
from config_manager import ConfigManager, get_config
from transform.assembler import PROFILE_TYPES, DocumentAssembler, export_filename, to_json
from transform.builders import TransformPolicy
from transform.classifier import MODES
from validation import ValidationReport, validate_rows

logger = logging.getLogger(__name__)

STATE_IDLE = 'idle'
STATE_RENDERED = 'rendered'

# A snapshot is an immutable sequence of (row id, read-only cells)
GridRow = Tuple[str, Mapping[str, str]]
Snapshot = Tuple[GridRow, ...]


class SessionError(Exception):
    """Raised for invalid session operations (unknown row, column or selector)"""
    pass


def _freeze(cells: Dict[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(cells))


def _new_row_id() -> str:
    return f"ROW-{uuid.uuid4().hex[:12]}"


class History:
    """Linear log of snapshots with a cursor, capped at `limit` undo steps"""

    def __init__(self, initial: Snapshot, limit: int = 100):
        if limit < 1:
            raise SessionError("History limit must be at least 1")
        self.limit = limit
        self._snapshots: List[Snapshot] = [initial]
        self._cursor = 0

    @property
    def current(self) -> Snapshot:
        return self._snapshots[self._cursor]

    def push(self, snapshot: Snapshot) -> None:
        """Record a new state, discarding any redo tail"""
        del self._snapshots[self._cursor + 1:]
        self._snapshots.append(snapshot)
        overflow = len(self._snapshots) - (self.limit + 1)
        if overflow > 0:
            del self._snapshots[:overflow]
        self._cursor = len(self._snapshots) - 1

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    def undo(self) -> Optional[Snapshot]:
        if not self.can_undo():
            return None
        self._cursor -= 1
        return self.current

    def redo(self) -> Optional[Snapshot]:
        if not self.can_redo():
            return None
        self._cursor += 1
        return self.current

    def __len__(self) -> int:
        return len(self._snapshots)


class EntrySession:
    """Single-operator editing session"""

    def __init__(self, config: Optional[ConfigManager] = None,
                 mode: Optional[str] = None, profile_type: Optional[str] = None):
        """Initialize session

        Args:
            config: Configuration manager instance
            mode: Initial mode (config default if None)
            profile_type: Initial profile type (config default if None)
        """
        self.config = config or get_config()
        self._mode = self._check_mode(mode or self.config.defaults.mode)
        self._profile_type = self._check_profile(profile_type or self.config.defaults.profile_type)
        self._history = History((), limit=self.config.session.history_limit)
        self._assembler = DocumentAssembler(TransformPolicy.from_config(self.config))

        self.state = STATE_IDLE
        self.rendered_json = ''
        self.rendered_document: Optional[Dict[str, Any]] = None
        self.rendered_for: Optional[Tuple[str, str]] = None

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    @staticmethod
    def _check_mode(mode: str) -> str:
        if mode not in MODES:
            raise SessionError(f"Unknown mode '{mode}', expected one of {MODES}")
        return mode

    @staticmethod
    def _check_profile(profile_type: str) -> str:
        if profile_type not in PROFILE_TYPES:
            raise SessionError(f"Unknown profile type '{profile_type}', expected one of {PROFILE_TYPES}")
        return profile_type

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def profile_type(self) -> str:
        return self._profile_type

    def set_mode(self, mode: str) -> None:
        """Change the mode used by the next generation"""
        self._mode = self._check_mode(mode)

    def set_profile_type(self, profile_type: str) -> None:
        """Change the profile type used by the next generation"""
        self._profile_type = self._check_profile(profile_type)

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    @property
    def _snapshot(self) -> Snapshot:
        return self._history.current

    @property
    def row_ids(self) -> List[str]:
        return [row_id for row_id, _ in self._snapshot]

    @property
    def rows(self) -> List[Dict[str, str]]:
        """Plain copies of the current rows, in grid order"""
        return [dict(cells) for _, cells in self._snapshot]

    def __len__(self) -> int:
        return len(self._snapshot)

    def _index_of(self, row_id: str) -> int:
        for index, (current_id, _) in enumerate(self._snapshot):
            if current_id == row_id:
                return index
        raise SessionError(f"Unknown row id: {row_id}")

    @staticmethod
    def _check_columns(values: Mapping[str, Any]) -> None:
        unknown = [key for key in values if key not in COLUMNS]
        if unknown:
            raise SessionError(f"Unknown column(s): {', '.join(sorted(unknown))}")

    def _commit(self, snapshot: Snapshot) -> None:
        self._history.push(snapshot)

    def get_row(self, row_id: str) -> Dict[str, str]:
        return dict(self._snapshot[self._index_of(row_id)][1])

    def add_row(self, values: Optional[Mapping[str, Any]] = None) -> str:
        """Append a row, optionally pre-filled; returns its row id"""
        values = values or {}
        self._check_columns(values)
        cells = empty_row()
        cells.update({key: '' if value is None else str(value) for key, value in values.items()})
        row_id = _new_row_id()
        self._commit(self._snapshot + ((row_id, _freeze(cells)),))
        return row_id

    def update_cell(self, row_id: str, column: str, value: Any) -> None:
        """Set one cell"""
        self._check_columns({column: value})
        index = self._index_of(row_id)
        cells = dict(self._snapshot[index][1])
        cells[column] = '' if value is None else str(value)
        rows = list(self._snapshot)
        rows[index] = (row_id, _freeze(cells))
        self._commit(tuple(rows))

    def delete_row(self, row_id: str) -> None:
        index = self._index_of(row_id)
        self._commit(self._snapshot[:index] + self._snapshot[index + 1:])

    def load_rows(self, rows: Sequence[Mapping[str, Any]]) -> List[str]:
        """Replace every row (e.g. after a CSV import); unknown keys are ignored"""
        snapshot = []
        for values in rows:
            cells = empty_row()
            for key in COLUMNS:
                value = values.get(key)
                cells[key] = '' if value is None else str(value)
            snapshot.append((_new_row_id(), _freeze(cells)))
        self._commit(tuple(snapshot))
        logger.info(f"Loaded {len(snapshot)} row(s) into session")
        return [row_id for row_id, _ in snapshot]

    def clear(self) -> None:
        self._commit(())

    def paste_rows(self, text: str, start_row: int = 0, start_column: str = COLUMNS[0]) -> int:
        """Paste tab-separated text into the grid

        Lines become rows and tabs separate cells, filling rightwards from
        start_column and downwards from start_row. Rows are appended when
        the paste runs past the end; cells past the last column are
        dropped. The whole paste is one undo step.

        Returns:
            Number of rows touched
        """
        if start_column not in COLUMNS:
            raise SessionError(f"Unknown column: {start_column}")
        if start_row < 0 or start_row > len(self._snapshot):
            raise SessionError(f"Start row {start_row} is outside the grid")

        lines = [line.rstrip('\r') for line in (text or '').split('\n')]
        lines = [line for line in lines if line.strip()]
        if not lines:
            return 0

        first_column = COLUMNS.index(start_column)
        rows = list(self._snapshot)
        for offset, line in enumerate(lines):
            target = start_row + offset
            if target < len(rows):
                row_id, current = rows[target]
                cells = dict(current)
            else:
                row_id, cells = _new_row_id(), empty_row()
            for column_offset, value in enumerate(line.split('\t')):
                column_index = first_column + column_offset
                if column_index >= len(COLUMNS):
                    break
                cells[COLUMNS[column_index]] = value.strip()
            frozen = (row_id, _freeze(cells))
            if target < len(rows):
                rows[target] = frozen
            else:
                rows.append(frozen)

        self._commit(tuple(rows))
        logger.debug(f"Pasted {len(lines)} line(s) at row {start_row}, column {start_column}")
        return len(lines)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    def undo(self) -> bool:
        return self._history.undo() is not None

    def redo(self) -> bool:
        return self._history.redo() is not None

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def generate(self) -> str:
        """Render the current rows as JSON text (Idle -> Rendered)"""
        document = self._assembler.assemble(self.rows, self._mode, self._profile_type)
        self.rendered_document = document
        self.rendered_json = to_json(document, indent=self.config.output.indent)
        self.rendered_for = (self._mode, self._profile_type)
        self.state = STATE_RENDERED
        return self.rendered_json

    def export(self, directory: Optional[str] = None, on_date: Optional[date] = None) -> Path:
        """Generate and write the document to '{PEP|REL}_{CREATE|UPDATE}_{date}.json'"""
        text = self.generate()
        out_dir = Path(directory or self.config.output.output_directory)
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / export_filename(self._mode, self._profile_type, on_date,
                                         self.config.output.date_format)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
        logger.info(f"✓ Exported {len(self.rendered_document['individuals'])} record(s) to {path}")
        return path

    def validate(self) -> ValidationReport:
        """Advisory validation of the current rows for the active mode"""
        return validate_rows(self.rows, self._mode, self.config)
