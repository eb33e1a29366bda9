# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Horizontal filtering operators.

Each operator appends one ``(column, "{operator}.{value}")`` pair to the query
list of the builder and returns the new builder. Columns and scalar values go
through ``clean_param`` so reserved characters never leak into the filter
grammar.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Literal, Mapping, Self, Sequence

from postgrest_builder.escape import clean_param, join_params, wildcard
from postgrest_builder.exceptions import InvalidArgumentError

FILTER_OPERATORS = frozenset(
    {
        "eq",
        "neq",
        "gt",
        "gte",
        "lt",
        "lte",
        "like",
        "ilike",
        "is",
        "in",
        "cs",
        "cd",
        "ov",
        "sl",
        "sr",
        "nxl",
        "nxr",
        "adj",
        "fts",
        "plfts",
        "phfts",
        "wfts",
    }
)

RANGE_OPERATORS = Literal["sl", "sr", "nxl", "nxr", "adj"]
TEXT_SEARCH_OPERATORS = Literal["fts", "plfts", "phfts", "wfts"]

RangeBounds = tuple[int | float, int | float]


def render_collection(values: str | Sequence[str]) -> str:
    """
    Render the right hand side of a containment operator.

    Strings are array, range or json literals and pass through verbatim.
    Sequences become a ``{a,b}`` array literal.
    """
    if isinstance(values, str):
        return values
    return "{%s}" % join_params(values)


def render_range(range_: RangeBounds) -> str:
    low, high = range_
    return f"({low},{high})"


def text_search_operator(operator: str, config: str | None) -> str:
    if config:
        return f"{operator}({config})"
    return operator


class FilterMixin(ABC):
    """Filter operators shared by the request builder."""

    @abstractmethod
    def _append_query(self, key: str, value: str) -> Self:
        """Return a copy of the builder with the ``(key, value)`` pair appended."""

    def _append_filter(self, column: str, operator: str, value: str) -> Self:
        return self._append_query(clean_param(column), f"{operator}.{value}")

    # Comparison

    def eq(self, column: str, value: str) -> Self:
        """Rows whose ``column`` exactly matches ``value``."""
        return self._append_filter(column, "eq", clean_param(value))

    def neq(self, column: str, value: str) -> Self:
        """Rows whose ``column`` does not match ``value``."""
        return self._append_filter(column, "neq", clean_param(value))

    def gt(self, column: str, value: str) -> Self:
        return self._append_filter(column, "gt", clean_param(value))

    def gte(self, column: str, value: str) -> Self:
        return self._append_filter(column, "gte", clean_param(value))

    def lt(self, column: str, value: str) -> Self:
        return self._append_filter(column, "lt", clean_param(value))

    def lte(self, column: str, value: str) -> Self:
        return self._append_filter(column, "lte", clean_param(value))

    # Pattern matching

    def like(self, column: str, pattern: str) -> Self:
        """
        Rows whose ``column`` matches ``pattern``, case sensitive.

        ``%`` may be used as the wildcard, it is rewritten to the gateway's
        ``*`` token so ``%`` stays available for URL encoding.
        """
        return self._append_filter(column, "like", clean_param(wildcard(pattern)))

    def ilike(self, column: str, pattern: str) -> Self:
        """Case insensitive variant of ``like``."""
        return self._append_filter(column, "ilike", clean_param(wildcard(pattern)))

    def is_(self, column: str, value: str) -> Self:
        """Exact equality against the ``null``, ``true`` and ``false`` literals."""
        return self._append_filter(column, "is", clean_param(value))

    def in_(self, column: str, values: Iterable[str]) -> Self:
        """
        Rows whose ``column`` is one of ``values``.

        Every value containing a reserved character is quoted on its own,
        order is preserved and an empty iterable yields ``in.()``.
        """
        return self._append_filter(column, "in", f"({join_params(values)})")

    # Array, range and json containment

    def cs(self, column: str, values: str | Sequence[str]) -> Self:
        """Rows whose array, range or json ``column`` contains ``values``."""
        return self._append_filter(column, "cs", render_collection(values))

    def cd(self, column: str, values: str | Sequence[str]) -> Self:
        """Rows whose array, range or json ``column`` is contained by ``values``."""
        return self._append_filter(column, "cd", render_collection(values))

    def ov(self, column: str, values: str | Sequence[str]) -> Self:
        """Rows whose array or range ``column`` overlaps ``values``."""
        return self._append_filter(column, "ov", render_collection(values))

    # Range position

    def _range_filter(
        self, operator: RANGE_OPERATORS, column: str, range_: RangeBounds
    ) -> Self:
        return self._append_filter(column, operator, render_range(range_))

    def sl(self, column: str, range_: RangeBounds) -> Self:
        """Rows whose range ``column`` is strictly left of ``range_``."""
        return self._range_filter("sl", column, range_)

    def sr(self, column: str, range_: RangeBounds) -> Self:
        """Rows whose range ``column`` is strictly right of ``range_``."""
        return self._range_filter("sr", column, range_)

    def nxl(self, column: str, range_: RangeBounds) -> Self:
        """Rows whose range ``column`` does not extend to the left of ``range_``."""
        return self._range_filter("nxl", column, range_)

    def nxr(self, column: str, range_: RangeBounds) -> Self:
        """Rows whose range ``column`` does not extend to the right of ``range_``."""
        return self._range_filter("nxr", column, range_)

    def adj(self, column: str, range_: RangeBounds) -> Self:
        """Rows whose range ``column`` is adjacent to ``range_``."""
        return self._range_filter("adj", column, range_)

    # Full text search

    def _text_search(
        self,
        operator: TEXT_SEARCH_OPERATORS,
        column: str,
        query: str,
        config: str | None,
    ) -> Self:
        return self._append_filter(
            column, text_search_operator(operator, config), clean_param(query)
        )

    def fts(self, column: str, query: str, config: str | None = None) -> Self:
        """Match the tsvector ``column`` against ``to_tsquery(query)``."""
        return self._text_search("fts", column, query, config)

    def plfts(self, column: str, query: str, config: str | None = None) -> Self:
        """Match the tsvector ``column`` against ``plainto_tsquery(query)``."""
        return self._text_search("plfts", column, query, config)

    def phfts(self, column: str, query: str, config: str | None = None) -> Self:
        """Match the tsvector ``column`` against ``phraseto_tsquery(query)``."""
        return self._text_search("phfts", column, query, config)

    def wfts(self, column: str, query: str, config: str | None = None) -> Self:
        """Match the tsvector ``column`` against ``websearch_to_tsquery(query)``."""
        return self._text_search("wfts", column, query, config)

    # Logical

    def not_(self, operator: str, column: str, value: str) -> Self:
        """
        Negate another operator: ``not_("in", "id", "(1,2)")`` encodes
        ``id=not.in.(1,2)``.

        ``value`` is used verbatim since it is already in the encoding the
        negated operator expects.
        """
        base_operator = operator.split("(", 1)[0]
        if base_operator not in FILTER_OPERATORS:
            raise InvalidArgumentError(f"Unknown filter operator: {operator}")
        return self._append_filter(column, "not", f"{operator}.{value}")

    def _logical(
        self, key: Literal["and", "or"], filters: str, foreign_table: str | None
    ) -> Self:
        if foreign_table:
            key_name = f"{foreign_table}.{key}"
        else:
            key_name = key
        return self._append_query(key_name, f"({filters})")

    def and_(self, filters: str, foreign_table: str | None = None) -> Self:
        """
        Rows satisfying every filter of the raw ``filters`` expression, e.g.
        ``"age.gte.18,status.eq.ONLINE"``.
        """
        return self._logical("and", filters, foreign_table)

    def or_(self, filters: str, foreign_table: str | None = None) -> Self:
        """Rows satisfying at least one filter of the raw ``filters`` expression."""
        return self._logical("or", filters, foreign_table)

    # Shorthands

    def match(self, query: Mapping[str, str]) -> Self:
        builder = self
        for column, value in query.items():
            builder = builder.eq(column, value)
        return builder

    def filter(self, column: str, operator: str, value: str) -> Self:
        """
        Escape hatch appending ``column=operator.value`` without any quoting,
        for syntax the typed operators do not cover (embedded resource
        columns such as ``messages.id`` for instance).
        """
        return self._append_query(column, f"{operator}.{value}")


__all__ = [
    "FILTER_OPERATORS",
    "FilterMixin",
    "render_collection",
    "render_range",
    "text_search_operator",
]
