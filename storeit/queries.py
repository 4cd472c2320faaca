"""Query predicates for listing file records.

This module provides a small expression system for document database
queries. Predicates are composed into trees and serialized to the
backend's JSON query strings when a request is sent.

Example:
    from storeit.queries import contains, equal, limit, order_desc

    queries = [
        equal("owner", [user.id]) | contains("users", [user.email]),
        equal("type", ["image", "video"]),
        contains("name", "holiday"),
        limit(10),
        order_desc("$createdAt"),
    ]

    params = {"queries[]": [str(q) for q in queries]}
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import CurrentUser, FileType

# Newest first
DEFAULT_SORT = "$createdAt-desc"


# =============================================================================
# Base Query Class
# =============================================================================


class Query(ABC):
    """Base class for all query predicates.

    Queries support logical operators:
    - `|` for OR
    - `&` for AND

    Two queries are equal when they serialize to the same payload.
    """

    method: str

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Convert to the backend's query payload."""

    def __str__(self) -> str:
        """Render as the JSON query string sent to the backend."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Query):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __or__(self, other: Query) -> Or:
        """Combine queries with OR."""
        return Or(self, other)

    def __and__(self, other: Query) -> And:
        """Combine queries with AND."""
        return And(self, other)


# =============================================================================
# Attribute Filters
# =============================================================================


class AttributeQuery(Query):
    """Base class for filters on a single attribute."""

    def __init__(self, attribute: str, values: Sequence[Any]):
        self.attribute = attribute
        self.values = list(values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "attribute": self.attribute,
            "values": self.values,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.attribute!r}, {self.values!r})"


class Equal(AttributeQuery):
    """Attribute equals one of the values."""

    method = "equal"


class Contains(AttributeQuery):
    """Array attribute contains a value, or string attribute contains a substring."""

    method = "contains"


# =============================================================================
# Logical Queries
# =============================================================================


class _Compound(Query):
    """Base class for logical combinations of queries."""

    def __init__(self, *queries: Query):
        # Flatten nested combinations of the same kind: (a | b) | c -> or(a, b, c)
        flattened: list[Query] = []
        for query in queries:
            if type(query) is type(self):
                flattened.extend(query.queries)  # type: ignore[attr-defined]
            else:
                flattened.append(query)
        self.queries = flattened

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "values": [query.to_dict() for query in self.queries],
        }

    def __repr__(self) -> str:
        inner = ", ".join(repr(query) for query in self.queries)
        return f"{self.__class__.__name__}({inner})"


class Or(_Compound):
    """Logical OR of queries.

    Created using the `|` operator or `or_()` function.
    """

    method = "or"


class And(_Compound):
    """Logical AND of queries.

    Created using the `&` operator or `and_()` function.
    """

    method = "and"


# =============================================================================
# Ordering and Pagination
# =============================================================================


class _Order(Query):
    def __init__(self, attribute: str):
        self.attribute = attribute

    def to_dict(self) -> dict[str, Any]:
        return {"method": self.method, "attribute": self.attribute}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.attribute!r})"


class OrderAsc(_Order):
    """Sort results ascending by attribute."""

    method = "orderAsc"


class OrderDesc(_Order):
    """Sort results descending by attribute."""

    method = "orderDesc"


class Limit(Query):
    """Cap the number of returned documents."""

    method = "limit"

    def __init__(self, value: int):
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        return {"method": self.method, "values": [self.value]}

    def __repr__(self) -> str:
        return f"Limit({self.value!r})"


# =============================================================================
# Helper Functions
# =============================================================================


def equal(attribute: str, values: Sequence[Any]) -> Equal:
    """Match documents whose attribute equals any of the values.

    Example:
        equal("type", ["image", "video"])
    """
    return Equal(attribute, values)


def contains(attribute: str, value: Any) -> Contains:
    """Match documents whose attribute contains the value.

    Accepts a single value or a list of values.

    Example:
        contains("users", ["friend@example.com"])
        contains("name", "report")
    """
    if isinstance(value, (list, tuple)):
        return Contains(attribute, value)
    return Contains(attribute, [value])


def or_(*queries: Query) -> Query:
    """Combine multiple queries with OR."""
    if len(queries) == 0:
        raise ValueError("or_() requires at least one query")
    if len(queries) == 1:
        return queries[0]
    return Or(*queries)


def and_(*queries: Query) -> Query:
    """Combine multiple queries with AND."""
    if len(queries) == 0:
        raise ValueError("and_() requires at least one query")
    if len(queries) == 1:
        return queries[0]
    return And(*queries)


def order_asc(attribute: str) -> OrderAsc:
    """Sort ascending by attribute."""
    return OrderAsc(attribute)


def order_desc(attribute: str) -> OrderDesc:
    """Sort descending by attribute."""
    return OrderDesc(attribute)


def limit(value: int) -> Limit:
    """Return at most `value` documents."""
    return Limit(value)


# =============================================================================
# File Queries
# =============================================================================


def parse_sort(sort: str) -> Query:
    """Parse a "<field>-<direction>" sort string.

    The string is split on its first hyphen. A direction of "asc" sorts
    ascending; any other direction (including a missing one) sorts
    descending.

    Example:
        parse_sort("size-asc")         # OrderAsc("size")
        parse_sort("$createdAt-desc")  # OrderDesc("$createdAt")
    """
    attribute, _, direction = sort.partition("-")
    if direction == "asc":
        return order_asc(attribute)
    return order_desc(attribute)


def visibility_query(current_user: CurrentUser) -> Query:
    """Files owned by the user or shared with the user's email."""
    return equal("owner", [current_user.id]) | contains("users", [current_user.email])


def build_file_queries(
    current_user: CurrentUser,
    types: Sequence[FileType | str] = (),
    search_text: str = "",
    sort: str | None = DEFAULT_SORT,
    limit: int | None = None,
) -> list[Query]:
    """Build the predicates for a file listing request.

    The visibility predicate always comes first, followed by the
    optional type, search and limit filters, and finally the sort order
    (omitted for an empty sort string).

    Args:
        current_user: User the listing is scoped to
        types: File types to include (empty for all types)
        search_text: Substring to match against file names
        sort: Sort string (default: newest first; empty for no ordering)
        limit: Maximum number of results (falsy for no cap)

    Returns:
        Ordered list of query predicates
    """
    queries: list[Query] = [visibility_query(current_user)]

    if types:
        queries.append(equal("type", [_type_value(t) for t in types]))
    if search_text:
        queries.append(contains("name", search_text))
    if limit:
        queries.append(Limit(limit))

    if sort is None:
        sort = DEFAULT_SORT
    if sort:
        queries.append(parse_sort(sort))

    return queries


def _type_value(file_type: FileType | str) -> str:
    return getattr(file_type, "value", file_type)
