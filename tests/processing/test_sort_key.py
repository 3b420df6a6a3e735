import pytest

from tabsort.core.exceptions import ColumnNotFoundError, InvalidConfigurationError
from tabsort.processing.comparators import NumericComparator, StringComparator
from tabsort.processing.sort_key import SortColumn, SortDirection, SortKey


def test_direction_multiplier():
    assert SortDirection.ASC.multiplier == 1
    assert SortDirection.DESC.multiplier == -1


def test_build_from_column_name_uses_given_comparator():
    key = SortKey.build("age", NumericComparator())
    assert key.names == ["age"]
    assert key.columns[0].direction is SortDirection.ASC
    assert isinstance(key.columns[0].comparator, NumericComparator)


def test_build_from_name_defaults_to_string_comparator():
    key = SortKey.build("name")
    assert isinstance(key.columns[0].comparator, StringComparator)


def test_build_accepts_sort_column_sequence_and_names():
    key = SortKey.build([SortColumn("city"), "name"])
    assert key.names == ["city", "name"]
    assert SortKey.build(key) is key


def test_empty_sort_key_is_rejected():
    with pytest.raises(InvalidConfigurationError, match="At least one sort column"):
        SortKey.build([])


def test_validate_against_lists_available_columns():
    key = SortKey.build([SortColumn("name"), SortColumn("salary")])
    with pytest.raises(ColumnNotFoundError) as exc_info:
        key.validate_against(["name", "age", "city"])

    assert exc_info.value.column == "salary"
    assert exc_info.value.available == ["name", "age", "city"]
    assert "name, age, city" in str(exc_info.value)


def test_compare_short_circuits_on_first_difference():
    key = SortKey.build(
        [
            SortColumn("city"),
            SortColumn("age", SortDirection.DESC, NumericComparator()),
        ]
    )
    chicago_25 = {"city": "Chicago", "age": "25"}
    chicago_30 = {"city": "Chicago", "age": "30"}
    ny_25 = {"city": "NY", "age": "25"}

    assert key.compare(chicago_30, chicago_25) < 0
    assert key.compare(chicago_25, ny_25) < 0
    assert key.compare(chicago_25, dict(chicago_25)) == 0


def test_missing_field_compares_as_empty_string():
    key = SortKey.build("name")
    assert key.extract({}) == ("",)
    assert key.compare({}, {"name": ""}) == 0
    assert key.compare({}, {"name": "a"}) < 0


def test_extract_keeps_falsy_values():
    key = SortKey.build(["a", "b"])
    assert key.extract({"a": 0, "b": None}) == (0, "")


def test_as_sort_key_orders_records():
    key = SortKey.build(SortColumn("n", SortDirection.DESC, NumericComparator()))
    rows = [{"n": "9"}, {"n": "10"}, {"n": "2"}]
    assert [r["n"] for r in sorted(rows, key=key.as_sort_key())] == ["10", "9", "2"]
