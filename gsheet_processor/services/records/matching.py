"""Per-field text matching used to filter records."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from .models import MATCH_LOOSE, MATCH_STRICT, OPERATOR_AND, OPERATOR_OR, FilterOptions, FilterSpec, Record

LOGGER = logging.getLogger(__name__)


def _normalize(value: str) -> str:
    return value.lower().strip()


def match_values(actual: Any, expected: Any, matching: str = MATCH_LOOSE) -> bool:
    """Compare a cell value against a filter value, ignoring case and surrounding whitespace.

    ``strict`` requires equality; ``loose`` also accepts ``expected`` as a
    substring of ``actual``. A missing cell, an unknown mode, or values that
    cannot be compared as text never match.
    """

    if actual is None:
        return False
    try:
        actual_norm = _normalize(actual)
        expected_norm = _normalize(expected)
        if matching == MATCH_STRICT:
            return actual_norm == expected_norm
        if matching == MATCH_LOOSE:
            return expected_norm in actual_norm or actual_norm == expected_norm
    except (AttributeError, TypeError) as exc:
        LOGGER.debug("match_values failed actual=%r expected=%r error=%s", actual, expected, exc)
        return False
    return False


def find_field(record: Record, field: str) -> Optional[str]:
    """Return the first record key equal to ``field`` ignoring case and whitespace."""

    if not isinstance(field, str):
        return None
    wanted = _normalize(field)
    for key in record:
        if isinstance(key, str) and _normalize(key) == wanted:
            return key
    return None


def record_matches(record: Record, filter_spec: FilterSpec, options: FilterOptions) -> bool:
    if not record:
        return False

    matches: List[bool] = []
    for field, expected in filter_spec.items():
        key = find_field(record, field)
        actual = record[key] if key is not None else None
        matches.append(match_values(actual, expected, options.matching_mode))

    if options.operator == OPERATOR_OR:
        return any(matches)
    if options.operator == OPERATOR_AND:
        return all(matches)
    return False


def filter_records(
    records: Iterable[Record],
    filter_spec: FilterSpec,
    options: FilterOptions | None = None,
) -> List[Record]:
    """Return the records matching ``filter_spec``, keeping their original order."""

    options = options or FilterOptions()
    if options.operator not in (OPERATOR_AND, OPERATOR_OR):
        LOGGER.warning("Unrecognized filter operator %r; no records will match", options.operator)
    return [record for record in records if record_matches(record, filter_spec, options)]


__all__ = ["filter_records", "find_field", "match_values", "record_matches"]
