# crm_backend/crud/customer_query.py
"""
Builds the paired statements behind the customer listing.

The fetch statement returns one page of customers, the count statement
returns how many customers match in total. Both are assembled from the
same predicate objects, so totalItems always describes the set the page
was drawn from.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict

from sqlalchemy import Select, bindparam, distinct, func, or_, select

from crm_backend.db.models import Address, Customer
from crm_backend.schemas.customer_schemas import CustomerListParams

# Client-supplied sortBy values only ever select from this mapping
SORT_COLUMNS = {
    "id": Customer.id,
    "first_name": Customer.first_name,
    "last_name": Customer.last_name,
    "phone_number": Customer.phone_number,
    "created_at": Customer.created_at,
}

LOCATION_COLUMNS = {
    "city": Address.city,
    "state": Address.state,
    "pin_code": Address.pin_code,
}


@dataclass(frozen=True)
class ComposedQuery:
    fetch: Select
    count: Select
    page: int
    limit: int
    offset: int

    @property
    def parameters(self) -> Dict[str, Any]:
        """Values bound by the filter predicates, shared by both statements."""
        return dict(self.count.compile().params)

    def total_pages(self, total_items: int) -> int:
        return math.ceil(total_items / self.limit)


def build_predicates(params: CustomerListParams) -> list:
    predicates = []

    if params.search:
        # One bound value serves all three comparisons
        pattern = bindparam("search_pattern", f"%{params.search}%")
        predicates.append(or_(
            Customer.first_name.ilike(pattern),
            Customer.last_name.ilike(pattern),
            Customer.phone_number.ilike(pattern),
        ))

    for name, column in LOCATION_COLUMNS.items():
        value = getattr(params, name)
        if value:
            predicates.append(column == bindparam(name, value))

    return predicates


def build_ordering(params: CustomerListParams) -> list:
    column = SORT_COLUMNS[params.sort_by]
    ordering = [column.desc() if params.sort_order == "DESC" else column.asc()]
    if params.sort_by != "id":
        # Stable pages when the sort key has duplicates
        ordering.append(Customer.id.asc())
    return ordering


def compose_customer_query(params: CustomerListParams) -> ComposedQuery:
    """
    Translates listing parameters into a (fetch, count) statement pair.

    Location filters join customers to their addresses; a customer matches
    when a single address satisfies every supplied location filter.
    """
    offset = (params.page - 1) * params.limit
    predicates = build_predicates(params)

    fetch = select(Customer)
    count = select(func.count(distinct(Customer.id))).select_from(Customer)

    if params.has_location_filter:
        fetch = fetch.join(Address, Address.customer_id == Customer.id).distinct()
        count = count.join(Address, Address.customer_id == Customer.id)

    fetch = fetch.where(*predicates)
    count = count.where(*predicates)

    fetch = (
        fetch.order_by(*build_ordering(params))
        .limit(params.limit)
        .offset(offset)
    )

    return ComposedQuery(fetch=fetch, count=count, page=params.page, limit=params.limit, offset=offset)
