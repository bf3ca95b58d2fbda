from __future__ import annotations

import pytest

from conftest import COURSE_GRID
from gsheet_processor.core.errors import ProcessingError
from gsheet_processor.services.records.models import FilterOptions
from gsheet_processor.services.records.processor import (
    build_header_map,
    extract_values,
    process,
    process_response,
    rows_to_records,
)


def test_header_row_becomes_keys() -> None:
    records = rows_to_records(COURSE_GRID)
    assert records == [
        {"Dept": "Archaeology", "Desc": "Introduction to digs"},
        {"Dept": "Physics", "Desc": "Intro to mechanics"},
    ]
    assert {"Dept": "Dept", "Desc": "Desc"} not in records


def test_header_map_is_index_based() -> None:
    assert build_header_map(["A", "", "C"]) == {0: "A", 1: "", 2: "C"}


def test_empty_header_columns_are_dropped() -> None:
    grid = [
        ["Name", "", "Code"],
        ["Alice", "hidden", "A1"],
    ]
    assert rows_to_records(grid) == [{"Name": "Alice", "Code": "A1"}]


def test_cells_beyond_header_width_are_dropped() -> None:
    grid = [
        ["Name"],
        ["Alice", "extra", "more"],
    ]
    assert rows_to_records(grid) == [{"Name": "Alice"}]


def test_partial_rows_keep_present_columns() -> None:
    grid = [
        ["Name", "Code", "Room"],
        ["Bob"],
    ]
    assert rows_to_records(grid) == [{"Name": "Bob"}]


def test_rows_without_keys_are_excluded() -> None:
    grid = [
        ["", "Name"],
        [],
        ["orphan"],
        ["x", "Carol"],
        ["", ""],
    ]
    records = rows_to_records(grid)
    assert records == [{"Name": "Carol"}, {"Name": ""}]
    assert len(records) <= len(grid) - 1


def test_only_header_row_yields_nothing() -> None:
    assert rows_to_records([["Name", "Code"]]) == []
    assert rows_to_records([]) == []


def test_return_all_ignores_filter() -> None:
    unfiltered = process(COURSE_GRID)
    everything = process(
        COURSE_GRID,
        True,
        {"dept": "nothing-matches"},
        FilterOptions(operator="and", matching="strict"),
    )
    assert everything == unfiltered


def test_none_filter_returns_everything() -> None:
    assert process(COURSE_GRID, False, None, FilterOptions(operator="or")) == rows_to_records(COURSE_GRID)


def test_empty_filter_with_and_keeps_every_record() -> None:
    assert process(COURSE_GRID, False, {}, FilterOptions(operator="and")) == rows_to_records(COURSE_GRID)


@pytest.mark.parametrize("operator", ["or", "xor", None])
def test_empty_filter_without_and_keeps_nothing(operator) -> None:
    assert process(COURSE_GRID, False, {}, FilterOptions(operator=operator)) == []


def test_department_example() -> None:
    result = process(
        COURSE_GRID,
        False,
        {"department": "archaeology", "dept": "archaeology"},
        FilterOptions(operator="or", matching="loose"),
    )
    assert result == [{"Dept": "Archaeology", "Desc": "Introduction to digs"}]


def test_process_response_requires_values() -> None:
    with pytest.raises(ProcessingError, match="values"):
        process_response({"range": "Sheet1!A1:B2"})


@pytest.mark.parametrize("payload", [None, [], "values", {"values": "a,b"}, {"values": [["A"], "B"]}])
def test_malformed_payloads_raise(payload) -> None:
    with pytest.raises(ProcessingError):
        process_response(payload)


def test_extract_values_returns_grid(course_payload) -> None:
    assert extract_values(course_payload) == COURSE_GRID


def test_department_sheet_example() -> None:
    grid = [
        ["Department", "Module Description"],
        ["Archaeology", "Introduction to digs"],
        ["Physics", "Intro to mechanics"],
    ]
    result = process(grid, False, {"department": "archaeology"}, FilterOptions(operator="or", matching="loose"))
    assert result == [{"Department": "Archaeology", "Module Description": "Introduction to digs"}]


def test_filter_field_without_matching_header_matches_nothing() -> None:
    result = process(COURSE_GRID, False, {"department": "archaeology"}, FilterOptions(operator="or"))
    assert result == []
