"""
Query-string parsing for the order listing and product search.
"""

import pytest
from werkzeug.datastructures import MultiDict

from ldcshop.core.query_params import (
    OrderFilter,
    PageRequest,
    escape_like,
    first_param,
    parse_int_param,
    parse_order_filters,
    parse_search_filters,
    total_pages,
)


@pytest.mark.parametrize("value, expected", [
    ("3", 3),
    ("12abc", 12),
    (" 7", 7),
    ("0", 1),
    ("-4", 1),
    ("abc", 1),
    ("", 1),
    (None, 1),
])
def test_parse_int_param(value, expected):
    assert parse_int_param(value, 1) == expected


def test_first_param_takes_first_of_repeated_values():
    assert first_param(["2", "9"]) == "2"
    assert first_param("5") == "5"
    assert first_param([]) is None
    assert first_param(None) is None


def test_order_filters_defaults():
    filters = parse_order_filters(MultiDict())

    assert filters.q == ""
    assert filters.status == "all"
    assert filters.fulfillment == "all"
    assert filters.page_request == PageRequest(1, 50)


def test_order_filters_trim_and_clamp():
    filters = parse_order_filters(MultiDict([
        ("q", "  alice  "),
        ("status", "paid"),
        ("fulfillment", "needsDelivery"),
        ("page", "3"),
        ("pageSize", "1000"),
    ]))

    assert filters.q == "alice"
    assert filters.status == "paid"
    assert filters.fulfillment == "needsDelivery"
    assert filters.page_request == PageRequest(3, 200)


def test_repeated_page_uses_first_value():
    filters = parse_order_filters(MultiDict([("page", "2"), ("page", "7")]))
    assert filters.page_request.page == 2


def test_plain_dict_with_list_values():
    filters = parse_search_filters({"page": ["4", "1"], "pageSize": ["10"]})
    assert filters.page_request == PageRequest(4, 10)


def test_search_filters_defaults_and_max():
    filters = parse_search_filters(MultiDict([("pageSize", "61"), ("category", "")]))

    assert filters.category == "all"
    assert filters.sort == "default"
    assert filters.page_request == PageRequest(1, 60)


def test_bad_numbers_fall_back():
    filters = parse_search_filters(MultiDict([("page", "zero"), ("pageSize", "-5")]))
    assert filters.page_request == PageRequest(1, 24)


def test_page_request_offset():
    request = PageRequest(3, 20)
    assert request.offset == 40
    assert request.limit == 20


def test_query_args_drop_empty_values():
    filters = OrderFilter(q="", status="paid", page_request=PageRequest(2, 50))
    assert filters.query_args(page=3) == {
        "status": "paid",
        "fulfillment": "all",
        "page": 3,
        "pageSize": 50,
    }


def test_escape_like():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"


@pytest.mark.parametrize("total, size, expected", [
    (0, 50, 1),
    (50, 50, 1),
    (51, 50, 2),
    (120, 24, 5),
])
def test_total_pages(total, size, expected):
    assert total_pages(total, size) == expected
