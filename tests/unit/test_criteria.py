"""Tests for query-string criteria parsing and pagination validation."""

import math

import pytest

from device_registry.modules.devices import DeviceCriteria, DeviceValidationError, parse_criteria
from device_registry.modules.devices.criteria import validate_pagination


class TestParseCriteria:
    def test_filter_sort_and_limit(self):
        criteria = parse_criteria({"filter[brand]": "Dell", "sort": "-model", "limit": "10"})

        assert criteria.filter_by.field == "brand"
        assert criteria.filter_by.value == "Dell"
        assert criteria.sort_by.field == "model"
        assert criteria.sort_by.is_ascending is False
        assert criteria.limit == 10
        assert criteria.offset is None
        assert criteria.search is None

    def test_ascending_sort_without_prefix(self):
        criteria = parse_criteria({"sort": "ownerName"})
        assert criteria.sort_by.field == "ownerName"
        assert criteria.sort_by.is_ascending is True

    def test_first_filter_wins(self):
        criteria = parse_criteria({"filter[brand]": "Dell", "filter[model]": "XPS"})
        assert criteria.filter_by.field == "brand"
        assert criteria.filter_by.value == "Dell"

    def test_search_and_offset(self):
        criteria = parse_criteria({"search": "lenovo", "offset": "20"})
        assert criteria.search == "lenovo"
        assert criteria.offset == 20

    def test_integer_prefix_parsing(self):
        criteria = parse_criteria({"limit": "15items", "offset": " 3"})
        assert criteria.limit == 15
        assert criteria.offset == 3

    def test_unparseable_numbers_become_nan(self):
        criteria = parse_criteria({"limit": "ten"})
        assert math.isnan(criteria.limit)

    def test_unknown_keys_are_ignored(self):
        assert parse_criteria({"page": "2", "foo": "bar"}) == DeviceCriteria()

    def test_empty_input(self):
        assert parse_criteria({}) == DeviceCriteria()


class TestValidatePagination:
    def test_accepts_unset_and_positive_values(self):
        validate_pagination(DeviceCriteria())
        validate_pagination(DeviceCriteria(limit=5, offset=0))

    def test_rejects_nan(self):
        with pytest.raises(DeviceValidationError) as exc_info:
            validate_pagination(parse_criteria({"offset": "abc"}))
        assert exc_info.value.errors[0]["loc"] == ["offset"]

    def test_rejects_negative(self):
        with pytest.raises(DeviceValidationError):
            validate_pagination(DeviceCriteria(limit=-1))
