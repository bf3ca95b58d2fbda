"""Reshape raw spreadsheet grids into keyed records."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence

from gsheet_processor.core.errors import ProcessingError

from .matching import filter_records
from .models import FilterOptions, FilterSpec, HeaderMap, Record

LOGGER = logging.getLogger(__name__)

HEADER_ROW = 0


def extract_values(payload: Any) -> List[Sequence[Any]]:
    """Return the ``values`` grid of an API response body."""

    if not isinstance(payload, Mapping):
        raise ProcessingError(f"Unexpected GSheet response type: {type(payload).__name__}")
    if "values" not in payload:
        raise ProcessingError("GSheet response has no 'values' field")
    values = payload["values"]
    if not isinstance(values, list):
        raise ProcessingError("GSheet 'values' field must be a list of rows")
    return values


def build_header_map(header_row: Sequence[Any]) -> HeaderMap:
    return {index: name for index, name in enumerate(header_row)}


def _usable_header(name: Any) -> bool:
    return isinstance(name, str) and len(name) > 0


def rows_to_records(grid: Sequence[Sequence[Any]]) -> List[Record]:
    """Convert a grid into records keyed by the header row.

    Cells under an empty header, or beyond the header's width, are dropped,
    and rows left without any key are skipped.
    """

    if not grid:
        return []
    for index, row in enumerate(grid):
        if not isinstance(row, (list, tuple)):
            raise ProcessingError(f"GSheet row {index} is not a list")

    headers = build_header_map(grid[HEADER_ROW])
    records: List[Record] = []
    for row in grid[HEADER_ROW + 1 :]:
        record: Record = {}
        for column, cell in enumerate(row):
            name = headers.get(column)
            if _usable_header(name):
                record[name] = cell
        if record:
            records.append(record)
    return records


def process(
    raw_grid: Sequence[Sequence[Any]],
    return_all: bool = False,
    filter: Optional[FilterSpec] = None,  # noqa: A002
    filter_options: Optional[FilterOptions] = None,
) -> List[Record]:
    """Build records from ``raw_grid`` and optionally filter them.

    With ``return_all`` set, or when ``filter`` is ``None``, every record is
    returned in row order. Otherwise only records passing the filter are kept,
    so an empty mapping keeps everything under "and" and nothing under "or".
    """

    records = rows_to_records(raw_grid)
    LOGGER.debug("Built %d records from %d rows", len(records), len(raw_grid))
    if return_all or filter is None:
        return records

    filtered = filter_records(records, filter, filter_options)
    LOGGER.debug("Filter kept %d of %d records", len(filtered), len(records))
    return filtered


def process_response(
    payload: Any,
    return_all: bool = False,
    filter: Optional[FilterSpec] = None,  # noqa: A002
    filter_options: Optional[FilterOptions] = None,
) -> List[Record]:
    """Same as :func:`process`, starting from the decoded API response body."""

    return process(extract_values(payload), return_all, filter, filter_options)


__all__ = [
    "build_header_map",
    "extract_values",
    "process",
    "process_response",
    "rows_to_records",
]
