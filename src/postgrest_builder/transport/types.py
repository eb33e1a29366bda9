# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol
from urllib.parse import quote, urlencode

from postgrest_builder.exceptions import GatewayResponseError

# Structural characters of the filter grammar stay readable in the query string.
QUERY_SAFE_CHARACTERS = "(),*:"


def encode_query(query_params: list[tuple[str, str]]) -> str:
    return urlencode(query_params, safe=QUERY_SAFE_CHARACTERS, quote_via=quote)


@dataclass
class GatewayRequest:
    url: str
    method: str
    headers: list[tuple[str, str]]
    query_params: list[tuple[str, str]] = field(default_factory=list)
    body: bytes | None = None
    timeout: Optional[float] = None

    def full_url(self) -> str:
        """Render the URL with the query pairs encoded in insertion order."""
        if not self.query_params:
            return self.url
        return f"{self.url}?{encode_query(self.query_params)}"

    def get_header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


@dataclass
class GatewayResponse:
    status_code: int
    data: bytes
    headers: Optional[Dict[str, str]] = None
    elapsed_time: Optional[float] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.data)

    def raise_for_status(self) -> "GatewayResponse":
        """
        Raise a ``GatewayResponseError`` when the gateway answered with a non
        2xx status. The gateway error fields (message, code, details, hint) are
        extracted when the body is a JSON object.
        """
        if self.ok:
            return self

        error: dict[str, Any] = {}
        try:
            payload = self.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error = payload

        raise GatewayResponseError(
            self,
            message=error.get("message"),
            code=error.get("code"),
            details=error.get("details"),
            hint=error.get("hint"),
        )


class HttpAsyncBackend(Protocol):

    async def request(
        self,
        request: GatewayRequest,
    ) -> GatewayResponse: ...


class RequestMiddleware(Protocol):

    def on_request(self, request: GatewayRequest) -> GatewayRequest: ...


__all__ = [
    "GatewayRequest",
    "GatewayResponse",
    "HttpAsyncBackend",
    "RequestMiddleware",
    "encode_query",
]
