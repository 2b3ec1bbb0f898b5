"""CSV input loading.

Rows come back as plain dicts keyed by column name. Each cell is typed on its
own: plain integers and decimals (optionally with an exponent) become numbers,
empty cells become None and everything else stays a string. That includes ISO
dates and spellings like "1_000", "nan" or "Infinity" that float() accepts.
Typing per cell keeps a column of ZIP codes integral even when one of them is
blank.

A missing or unreadable file is fatal: the pandas/OS error propagates.
"""

import re
from pathlib import Path
from typing import Any

import pandas as pd

from .logging import get_logger
from .models import AttendanceRecord, EventRecord, TeamRecord

logger = get_logger(__name__)


NUMBER_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")
INTEGER_RE = re.compile(r"^\s*-?\d+\s*$")


def _infer(value: Any) -> Any:
    if pd.isna(value):
        return None
    if INTEGER_RE.match(value):
        return int(value)
    if NUMBER_RE.match(value):
        return float(value)
    return value


def read_csv(path: Path) -> list[dict[str, Any]]:
    """Read a headered CSV file into a list of row dicts, skipping blank lines."""
    df = pd.read_csv(
        path,
        dtype=str,
        skip_blank_lines=True,
        keep_default_na=False,
        na_values=[""],
    )
    rows = [
        {column: _infer(value) for column, value in row.items()}
        for row in df.to_dict(orient="records")
    ]
    logger.debug("csv_loaded", path=str(path), rows=len(rows))
    return rows


def load_teams(path: Path) -> list[TeamRecord]:
    return [TeamRecord.model_validate(row) for row in read_csv(path)]


def load_events(path: Path) -> list[EventRecord]:
    return [EventRecord.model_validate(row) for row in read_csv(path)]


def load_attendance(path: Path) -> list[AttendanceRecord]:
    return [AttendanceRecord.model_validate(row) for row in read_csv(path)]
