"""
Spreadsheet-style row store on the Modal volume.

Each named sheet is a JSONL file with one JSON array of string cells per line.
Line 1 holds the header row, so data starts at spreadsheet row 2 exactly as in
a hosted sheet, and ranges use A1 notation ("A2:N", "C2:C").
"""

import asyncio
import json
import re
import threading
from pathlib import Path
from typing import Callable, Optional

from line_health_agent.config import SHEET_HEADERS, logger

_RANGE_RE = re.compile(r"^([A-Z]+)(\d*)(?::([A-Z]+)(\d*))?$")


def column_index(letters: str) -> int:
    """Zero-based index of an A1 column name (A=0, Z=25, AA=26)."""
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def parse_range(column_range: str) -> tuple:
    """Split an A1 range into (first_col, last_col, first_row, last_row).

    Rows are 1-based; a missing row bound means "open ended".
    """
    match = _RANGE_RE.match(column_range.replace("$", "").upper())
    if not match:
        raise ValueError(f"Invalid range: {column_range!r}")
    start_col, start_row, end_col, end_row = match.groups()
    end_col = end_col or start_col
    return (
        column_index(start_col),
        column_index(end_col),
        int(start_row) if start_row else 1,
        int(end_row) if end_row else None,
    )


def _to_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class VolumeSheetStore:
    """Append/query store keyed by sheet name.

    `commit` is called after every append; on Modal it is `volume.commit` so
    other containers see the new rows.
    """

    def __init__(self, data_dir: Path, sheet_id: str, commit: Optional[Callable[[], None]] = None):
        self.root = Path(data_dir) / "sheets" / sheet_id
        self._commit = commit
        # Appends run on worker threads; the header check and the row write must not interleave
        self._write_lock = threading.Lock()

    def _sheet_file(self, sheet_name: str) -> Path:
        return self.root / f"{sheet_name}.jsonl"

    def _append_sync(self, sheet_name: str, row: list):
        self.root.mkdir(parents=True, exist_ok=True)
        sheet_file = self._sheet_file(sheet_name)
        line = json.dumps([_to_cell(v) for v in row], ensure_ascii=False) + "\n"

        with self._write_lock:
            with open(sheet_file, "a", encoding="utf-8") as f:
                if f.tell() == 0:
                    header = SHEET_HEADERS.get(sheet_name, [])
                    f.write(json.dumps(header, ensure_ascii=False) + "\n")
                f.write(line)

        if self._commit:
            self._commit()

    def _read_sync(self, sheet_name: str) -> list:
        sheet_file = self._sheet_file(sheet_name)
        if not sheet_file.exists():
            return []

        rows = []
        with open(sheet_file, encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    rows.append(json.loads(line))
                except json.JSONDecodeError:
                    logger.warning(f"Skipping unreadable row in {sheet_file.name}")
                    # Keep row numbering aligned with the file
                    rows.append([])
        return rows

    async def append(self, sheet_name: str, row: list):
        """Append one row after the last row of the sheet."""
        await asyncio.to_thread(self._append_sync, sheet_name, row)
        logger.info(f"Appended row to '{sheet_name}'")

    async def query_range(self, sheet_name: str, column_range: str) -> list:
        """Return the rows and columns covered by `column_range`, blank rows dropped."""
        first_col, last_col, first_row, last_row = parse_range(column_range)
        rows = await asyncio.to_thread(self._read_sync, sheet_name)

        selected = rows[first_row - 1:last_row]
        values = []
        for row in selected:
            cells = [str(c) for c in row[first_col:last_col + 1]]
            # Trailing empty cells are trimmed, as the Sheets API does
            while cells and cells[-1] == "":
                cells.pop()
            if cells:
                values.append(cells)
        return values
