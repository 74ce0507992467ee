"""Tests for the paired fetch/count statements behind the customer listing."""

import itertools
from typing import get_args

import pytest
from pydantic import ValidationError

from crm_backend.crud import address_crud, customer_crud
from crm_backend.crud.customer_query import SORT_COLUMNS, compose_customer_query
from crm_backend.schemas.address_schemas import AddressCreate
from crm_backend.schemas.customer_schemas import CustomerCreate, CustomerListParams, SortField


def _sql(statement) -> str:
    return str(statement.compile())


# ── Statement shape ──────────────────────

def test_defaults_select_first_page_ordered_by_id():
    query = compose_customer_query(CustomerListParams())

    assert query.page == 1
    assert query.limit == 10
    assert query.offset == 0
    assert "ORDER BY customers.id ASC" in _sql(query.fetch)
    assert "JOIN addresses" not in _sql(query.fetch)
    assert "WHERE" not in _sql(query.count)
    assert query.parameters == {}


def test_offset_follows_page_and_limit():
    query = compose_customer_query(CustomerListParams(page=3, limit=20))

    assert query.offset == 40
    assert "LIMIT" in _sql(query.fetch)
    assert "OFFSET" in _sql(query.fetch)
    bound = sorted(query.fetch.compile().params.values())
    assert bound == sorted([query.limit, query.offset])


def test_search_uses_one_pattern_for_all_three_columns():
    query = compose_customer_query(CustomerListParams(search="smith"))

    assert query.parameters == {"search_pattern": "%smith%"}
    count_sql = _sql(query.count)
    assert count_sql.count(":search_pattern") == 3
    for column in ("first_name", "last_name", "phone_number"):
        assert f"customers.{column}" in count_sql
    assert " OR " in count_sql


def test_location_filters_join_addresses_and_count_distinct_customers():
    query = compose_customer_query(CustomerListParams(city="Pune", pin_code="411001"))

    fetch_sql = _sql(query.fetch)
    count_sql = _sql(query.count)
    assert "JOIN addresses ON addresses.customer_id = customers.id" in fetch_sql
    assert "SELECT DISTINCT" in fetch_sql
    assert "count(DISTINCT customers.id)" in count_sql
    assert "addresses.city = :city" in count_sql
    assert "addresses.pin_code = :pin_code" in count_sql
    assert "addresses.state" not in count_sql
    assert query.parameters == {"city": "Pune", "pin_code": "411001"}


def test_count_statement_is_never_sorted_or_paginated():
    query = compose_customer_query(
        CustomerListParams(search="a", state="Goa", page=4, limit=5, sortBy="last_name", sortOrder="DESC")
    )

    count_sql = _sql(query.count)
    assert "ORDER BY" not in count_sql
    assert "LIMIT" not in count_sql
    assert "OFFSET" not in count_sql


def test_fetch_and_count_share_filter_parameters():
    query = compose_customer_query(
        CustomerListParams(search="98", city="Mumbai", state="Maharashtra", pin_code="400050", page=2)
    )

    fetch_params = query.fetch.compile().params
    for name, value in query.parameters.items():
        assert fetch_params[name] == value
    assert query.parameters == {
        "search_pattern": "%98%",
        "city": "Mumbai",
        "state": "Maharashtra",
        "pin_code": "400050",
    }


def test_search_and_location_filters_form_a_single_where_clause():
    query = compose_customer_query(CustomerListParams(search="smith", city="Pune"))

    fetch_sql = _sql(query.fetch)
    assert fetch_sql.count("WHERE") == 1
    assert " AND " in fetch_sql


def test_non_id_sort_breaks_ties_by_id():
    query = compose_customer_query(CustomerListParams(sortBy="first_name", sortOrder="desc"))

    assert "ORDER BY customers.first_name DESC, customers.id ASC" in _sql(query.fetch)


def test_sort_by_id_descending_has_no_tie_breaker():
    query = compose_customer_query(CustomerListParams(sortBy="id", sortOrder="DESC"))

    fetch_sql = _sql(query.fetch)
    assert "ORDER BY customers.id DESC" in fetch_sql
    assert "customers.id ASC" not in fetch_sql


def test_every_sortable_field_maps_to_a_column():
    assert set(SORT_COLUMNS) == set(get_args(SortField))


def test_total_pages_rounds_up():
    query = compose_customer_query(CustomerListParams(limit=10))

    assert query.total_pages(0) == 0
    assert query.total_pages(10) == 1
    assert query.total_pages(21) == 3


# ── Parameter validation ──────────────────────

@pytest.mark.parametrize("sort_by", ["email", "id; DROP TABLE customers", "ID", ""])
def test_sort_by_outside_allow_list_is_rejected(sort_by):
    with pytest.raises(ValidationError):
        CustomerListParams(sortBy=sort_by)


@pytest.mark.parametrize("kwargs", [{"page": 0}, {"page": -1}, {"limit": 0}, {"limit": 101}, {"sortOrder": "UP"}])
def test_out_of_range_values_are_rejected(kwargs):
    with pytest.raises(ValidationError):
        CustomerListParams(**kwargs)


def test_blank_filters_are_ignored():
    params = CustomerListParams(search="  ", city="", state=None, pin_code=" ")

    assert params.search is None
    assert params.city is None
    assert params.pin_code is None
    assert not params.has_location_filter
    assert "JOIN" not in _sql(compose_customer_query(params).fetch)


# ── Against a database ──────────────────────

SEED = [
    # (first_name, last_name, phone_number, [(city, state, pin_code), ...])
    ("John", "Smith", "9810000001", [("Pune", "Maharashtra", "411001"), ("Pune", "Maharashtra", "411002")]),
    ("Jane", "Goldsmith", "9810000002", [("Mumbai", "Maharashtra", "400050")]),
    ("Smithy", "Jones", "9720000003", []),
    ("Alan", "Brown", "9720000004", [("Pune", "Maharashtra", "411001"), ("Panaji", "Goa", "403001")]),
    ("Bea", "Brown", "9830000005", [("Mumbai", "Karnataka", "560001")]),
    ("Carl", "Adams", "9830000006", [("Panaji", "Goa", "403001")]),
    ("alice", "smith", "9840000007", [("Pune", "Maharashtra", "411001")]),
]


@pytest.fixture
def seeded(db):
    for first_name, last_name, phone_number, addresses in SEED:
        customer = customer_crud.create_customer(
            db, CustomerCreate(first_name=first_name, last_name=last_name, phone_number=phone_number)
        )
        for city, state, pin_code in addresses:
            address_crud.create_address(
                db,
                AddressCreate(address_details="somewhere", city=city, state=state, pin_code=pin_code),
                customer_id=customer.id,
            )
    return SEED


def _expected_phones(search=None, city=None, state=None, pin_code=None):
    phones = []
    for first_name, last_name, phone_number, addresses in SEED:
        if search and not any(search.lower() in value.lower() for value in (first_name, last_name, phone_number)):
            continue
        if city or state or pin_code:
            if not any(
                (not city or a_city == city) and (not state or a_state == state) and (not pin_code or a_pin == pin_code)
                for a_city, a_state, a_pin in addresses
            ):
                continue
        phones.append(phone_number)
    return phones


FILTER_COMBINATIONS = list(itertools.product(
    [None, "smith", "SMITH", "98"],
    [None, "Pune", "Mumbai"],
    [None, "Maharashtra", "Goa"],
    [None, "411001"],
))


@pytest.mark.parametrize("search,city,state,pin_code", FILTER_COMBINATIONS)
def test_total_items_matches_unpaginated_result(db, seeded, search, city, state, pin_code):
    params = CustomerListParams(search=search, city=city, state=state, pin_code=pin_code, limit=100)

    customers, total_items, _ = customer_crud.list_customers(db, params)

    expected = _expected_phones(search, city, state, pin_code)
    assert total_items == len(customers)
    assert sorted(c.phone_number for c in customers) == sorted(expected)


@pytest.mark.parametrize("limit", [1, 2, 3, 5])
@pytest.mark.parametrize("sort_by,sort_order", [
    ("id", "ASC"),
    ("last_name", "ASC"),
    ("last_name", "DESC"),
    ("created_at", "DESC"),
    ("phone_number", "DESC"),
])
def test_pages_partition_the_filtered_set(db, seeded, limit, sort_by, sort_order):
    base = dict(search=None, state="Maharashtra", sortBy=sort_by, sortOrder=sort_order)
    full, total_items, _ = customer_crud.list_customers(db, CustomerListParams(limit=100, **base))

    collected = []
    _, _, total_pages = customer_crud.list_customers(db, CustomerListParams(limit=limit, **base))
    for page in range(1, total_pages + 1):
        page_items, page_total, _ = customer_crud.list_customers(
            db, CustomerListParams(page=page, limit=limit, **base)
        )
        assert page_total == total_items
        assert len(page_items) <= limit
        collected.extend(c.id for c in page_items)

    assert collected == [c.id for c in full]
    assert len(set(collected)) == total_items


def test_page_past_the_end_is_empty(db, seeded):
    customers, total_items, total_pages = customer_crud.list_customers(
        db, CustomerListParams(page=50, limit=5)
    )

    assert customers == []
    assert total_items == len(SEED)
    assert total_pages == 2
