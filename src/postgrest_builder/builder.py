# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Literal, Mapping, Self, get_args

from pydantic import BaseModel

from postgrest_builder.exceptions import InvalidArgumentError
from postgrest_builder.filters import FilterMixin
from postgrest_builder.headers import (
    HeaderPairs,
    has_header,
    set_header,
    validate_header,
)
from postgrest_builder.headers import get_header as find_header
from postgrest_builder.transport.types import (
    GatewayRequest,
    GatewayResponse,
    HttpAsyncBackend,
    RequestMiddleware,
    encode_query,
)

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "HEAD", "POST", "PATCH", "PUT", "DELETE"]
CountKind = Literal["exact", "planned", "estimated"]
ProfilePolicy = Literal["by_method", "rpc_accept_profile"]

READ_METHODS: frozenset[str] = frozenset({"GET", "HEAD"})

JSON_MEDIA_TYPE = "application/json"
SINGLE_OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"
CSV_MEDIA_TYPE = "text/csv"

# Prefer sub-directives, in the order they are rendered.
PREFER_DIRECTIVES = ("return", "resolution", "count")

PreferPairs = tuple[tuple[str, str], ...]
QueryPairs = tuple[tuple[str, str], ...]
Body = str | bytes | BaseModel | dict[str, Any] | list[Any]


def serialize_body(body: Body) -> str | bytes:
    """
    Bodies are normally pre-serialized by the caller and sent verbatim.
    Models and plain JSON containers are dumped for convenience.
    """
    if isinstance(body, (str, bytes)):
        return body
    if isinstance(body, BaseModel):
        return body.model_dump_json()
    if isinstance(body, (dict, list)):
        return json.dumps(body)
    raise InvalidArgumentError(f"Invalid body type: {type(body)}")


def set_prefer(prefer: PreferPairs, directive: str, value: str | None) -> PreferPairs:
    """Replace (or drop, when ``value`` is None) one Prefer sub-directive."""
    result = tuple((key, current) for key, current in prefer if key != directive)
    if value is None:
        return result
    return result + ((directive, value),)


def parse_prefer(value: str) -> PreferPairs:
    """Split a raw ``Prefer`` header value into its sub-directives."""
    directives: list[tuple[str, str]] = []
    for item in value.split(","):
        directive, _, argument = item.strip().partition("=")
        if directive:
            directives.append((directive.strip(), argument.strip()))
    return tuple(directives)


def render_prefer(prefer: PreferPairs) -> str | None:
    """
    Render the sub-directives as one header value: ``return``, ``resolution``
    and ``count`` first, then any other directive in the order it was set.
    """
    known = dict(prefer)
    ordered = [(key, known[key]) for key in PREFER_DIRECTIVES if key in known]
    ordered += [(key, value) for key, value in prefer if key not in PREFER_DIRECTIVES]
    rendered = [f"{key}={value}" if value else key for key, value in ordered]
    return ",".join(rendered) if rendered else None


def check_row_count(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")


def clean_columns(columns: str) -> str:
    """Strip whitespace from a column list, except inside double quotes."""
    quoted = False
    cleaned: list[str] = []
    for char in columns:
        if char.isspace() and not quoted:
            continue
        if char == '"':
            quoted = not quoted
        cleaned.append(char)
    return "".join(cleaned)


@dataclass(frozen=True)
class Builder(FilterMixin):
    """
    Accumulates the state of one gateway request.

    Builders are immutable: every modifier returns a new builder, so a
    partially built chain can be kept as a template and extended several
    times. ``build`` freezes the state into a ``GatewayRequest`` and
    ``execute`` hands it to the transport.
    """

    url: str
    method: HttpMethod = "GET"
    schema: str | None = None
    queries: QueryPairs = ()
    headers: HeaderPairs = ()
    prefer: PreferPairs = ()
    body: str | bytes | None = None
    is_rpc: bool = False
    profile_policy: ProfilePolicy = "by_method"
    timeout: float | None = None
    backend: HttpAsyncBackend | None = field(default=None, repr=False, compare=False)
    middlewares: tuple[RequestMiddleware, ...] = field(
        default=(), repr=False, compare=False
    )

    @classmethod
    def new(
        cls,
        url: str,
        schema: str | None = None,
        headers: HeaderPairs = (),
        **kwargs: Any,
    ) -> "Builder":
        builder = cls(
            url=url,
            schema=schema,
            headers=set_header((), "Accept", JSON_MEDIA_TYPE),
            **kwargs,
        )
        for name, value in headers:
            builder = builder.insert_header(name, value)
        return builder

    # State helpers

    def _append_query(self, key: str, value: str) -> Self:
        return replace(self, queries=self.queries + ((key, value),))

    def _with_header(self, name: str, value: str) -> Self:
        return replace(self, headers=set_header(self.headers, name, value))

    def _with_prefer(self, directives: Mapping[str, str | None]) -> Self:
        prefer = self.prefer
        for directive, value in directives.items():
            prefer = set_prefer(prefer, directive, value)
        return replace(self, prefer=prefer)

    def _with_range(self, low: int, high: int) -> Self:
        return self._with_header("Range-Unit", "items")._with_header(
            "Range", f"{low}-{high}"
        )

    # Authentication and headers

    def auth(self, token: str) -> Self:
        return self._with_header("Authorization", f"Bearer {token}")

    def insert_header(self, name: str, value: str) -> Self:
        """
        Set ``name`` to ``value``, replacing any previous value. ``Prefer`` is
        merged per sub-directive instead, so directives such as
        ``tx=rollback`` survive the ones set by the write modifiers.
        """
        if name.lower() == "prefer":
            validate_header(name, value)
            return self._with_prefer(dict(parse_prefer(value)))
        return self._with_header(name, value)

    # Vertical filtering

    def select(self, columns: str = "*") -> Self:
        """
        Perform a read on the columns. ``columns`` is an opaque expression of
        the gateway: renames (``alias:column``), casts (``column::text``),
        json paths and embedded resources (``table(columns)``) are allowed.
        """
        return replace(self, method="GET")._append_query(
            "select", clean_columns(columns)
        )

    # Ordering and pagination

    def order(self, columns: str) -> Self:
        return self._append_query("order", columns)

    def order_with_options(
        self,
        columns: str,
        foreign_table: str | None = None,
        ascending: bool = True,
        nulls_first: bool = False,
    ) -> Self:
        """
        Order by ``columns``. Successive calls targeting the same table are
        merged into a single comma separated ``order`` value.
        """
        key = f"{foreign_table}.order" if foreign_table else "order"
        direction = "asc" if ascending else "desc"
        nulls = "nullsfirst" if nulls_first else "nullslast"
        value = f"{columns}.{direction}.{nulls}"

        for index, (existing_key, existing_value) in enumerate(self.queries):
            if existing_key == key:
                queries = list(self.queries)
                queries[index] = (key, f"{existing_value},{value}")
                return replace(self, queries=tuple(queries))

        return self._append_query(key, value)

    def limit(self, count: int) -> Self:
        check_row_count("limit count", count)
        if count < 1:
            raise InvalidArgumentError(f"limit count must be at least 1, got {count}")
        return self._with_range(0, count - 1)

    def foreign_table_limit(self, count: int, foreign_table: str) -> Self:
        check_row_count("limit count", count)
        return self._append_query(f"{foreign_table}.limit", str(count))

    def range(self, low: int, high: int) -> Self:
        """
        Fetch the rows between ``low`` and ``high`` (both inclusive). The
        bounds are not checked against each other.
        """
        check_row_count("range low bound", low)
        check_row_count("range high bound", high)
        if low < 0 or high < 0:
            raise InvalidArgumentError(
                f"range bounds must not be negative, got {low}-{high}"
            )
        return self._with_range(low, high)

    def single(self) -> Self:
        """Ask the gateway for one object instead of an array of rows."""
        return self._with_header("Accept", SINGLE_OBJECT_MEDIA_TYPE)

    def count(self, kind: CountKind) -> Self:
        if kind not in get_args(CountKind):
            raise InvalidArgumentError(f"Unknown count kind: {kind}")
        return self._with_range(0, 0)._with_prefer({"count": kind})

    def exact_count(self) -> Self:
        return self.count("exact")

    def planned_count(self) -> Self:
        return self.count("planned")

    def estimated_count(self) -> Self:
        return self.count("estimated")

    def head(self) -> Self:
        return replace(self, method="HEAD")

    # Mutations

    def insert(self, body: Body) -> Self:
        return replace(self, method="POST", body=serialize_body(body))._with_prefer(
            {"return": "representation", "resolution": None}
        )

    def insert_csv(self, body: str) -> Self:
        return self._with_header("Content-Type", CSV_MEDIA_TYPE).insert(body)

    def upsert(self, body: Body) -> Self:
        return replace(self, method="POST", body=serialize_body(body))._with_prefer(
            {"return": "representation", "resolution": "merge-duplicates"}
        )

    def ignore_duplicates(self) -> Self:
        return self._with_prefer({"resolution": "ignore-duplicates"})

    def on_conflict(self, columns: str) -> Self:
        return self._append_query("on_conflict", columns)

    def single_upsert(self, primary_column: str, key: str, body: Body) -> Self:
        """Insert or replace the one row whose ``primary_column`` equals ``key``."""
        return (
            replace(self, method="PUT", body=serialize_body(body))
            ._with_prefer({"return": "representation", "resolution": None})
            .eq(primary_column, key)
        )

    def update(self, body: Body) -> Self:
        return replace(self, method="PATCH", body=serialize_body(body))._with_prefer(
            {"return": "representation", "resolution": None}
        )

    def delete(self) -> Self:
        return replace(self, method="DELETE", body=None)._with_prefer(
            {"return": "representation", "resolution": None}
        )

    def rpc(self, params: Body) -> Self:
        return replace(self, method="POST", body=serialize_body(params), is_rpc=True)

    # Inspection

    def _accumulated_headers(self) -> HeaderPairs:
        prefer = render_prefer(self.prefer)
        if prefer is None:
            return self.headers
        return set_header(self.headers, "Prefer", prefer)

    def get_header(self, name: str) -> str | None:
        return find_header(self._accumulated_headers(), name)

    def headers_dict(self) -> dict[str, str]:
        return dict(self._accumulated_headers())

    def query_string(self) -> str:
        return encode_query(list(self.queries))

    def profile_header(self) -> str:
        """Name of the header carrying the schema for this request."""
        if self.method in READ_METHODS:
            return "Accept-Profile"
        if self.is_rpc and self.profile_policy == "rpc_accept_profile":
            return "Accept-Profile"
        return "Content-Profile"

    # Finalize

    def build(self) -> GatewayRequest:
        headers = self._accumulated_headers()

        if self.schema is not None:
            profile_header = self.profile_header()
            logger.debug(
                "Selecting schema %s through %s", self.schema, profile_header
            )
            headers = set_header(headers, profile_header, self.schema)

        if self.method not in READ_METHODS and not has_header(
            headers, "Content-Type"
        ):
            headers = set_header(headers, "Content-Type", JSON_MEDIA_TYPE)

        body = self.body.encode() if isinstance(self.body, str) else self.body

        return GatewayRequest(
            url=self.url,
            method=self.method,
            headers=list(headers),
            query_params=list(self.queries),
            body=body,
            timeout=self.timeout,
        )

    async def execute(self) -> GatewayResponse:
        """
        Send the request and return the gateway response untouched. Non 2xx
        statuses are not raised, see ``GatewayResponse.raise_for_status``.
        """
        if self.backend is None:
            raise InvalidArgumentError(
                "Builder has no transport backend, create it from a Client"
            )

        request = self.build()

        for middleware in self.middlewares:
            request = middleware.on_request(request)

        logger.debug(
            "Prepared request: %s %s\nHeaders: %s\nQuery Params: %s\nBody: %s",
            request.method,
            request.url,
            request.headers,
            request.query_params,
            request.body,
        )

        response = await self.backend.request(request)

        logger.debug("Received response: status=%s", response.status_code)

        return response


__all__ = [
    "Builder",
    "HttpMethod",
    "CountKind",
    "ProfilePolicy",
    "READ_METHODS",
    "JSON_MEDIA_TYPE",
    "SINGLE_OBJECT_MEDIA_TYPE",
    "CSV_MEDIA_TYPE",
    "serialize_body",
    "set_prefer",
    "parse_prefer",
    "render_prefer",
    "check_row_count",
    "clean_columns",
]
