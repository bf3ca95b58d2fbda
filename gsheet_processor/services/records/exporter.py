"""File exporter for processed records."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pandas as pd

from gsheet_processor.core.errors import ExportError

from .models import Record

SUPPORTED_SUFFIXES = {".csv", ".xlsx"}


def record_columns(records: Iterable[Record]) -> List[str]:
    """Return every key in first-seen order."""

    columns: dict[str, None] = {}
    for record in records:
        for key in record:
            columns.setdefault(key, None)
    return list(columns)


def records_to_frame(records: List[Record]) -> pd.DataFrame:
    return pd.DataFrame.from_records(records, columns=record_columns(records))


def export_records(records: List[Record], path: str | Path, *, sheet_title: str = "Records") -> Path:
    """Write records to ``path`` as CSV or XLSX, chosen by suffix."""

    target = Path(path)
    suffix = target.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ExportError(f"unsupported export format: {target.suffix or '<none>'}")

    frame = records_to_frame(records)
    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        if suffix == ".csv":
            frame.to_csv(target, index=False, encoding="utf-8")
        else:
            frame.to_excel(target, index=False, sheet_name=sheet_title[:31], engine="openpyxl")
    except OSError as exc:
        raise ExportError(f"failed to write {target}: {exc}") from exc
    return target


__all__ = ["export_records", "record_columns", "records_to_frame"]
