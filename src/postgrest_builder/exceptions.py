# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from postgrest_builder.transport.types import GatewayRequest, GatewayResponse


class PostgrestBuilderError(Exception):
    """Base exception for every error raised by this library."""


class InvalidArgumentError(PostgrestBuilderError, ValueError):
    """Raised when a modifier receives an argument it cannot encode."""


class InvalidHeaderValueError(PostgrestBuilderError, ValueError):
    """Raised when a header name or value is not legal in an HTTP header."""

    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value
        super().__init__(f"Invalid header value for {name!r}: {value!r}")


class TransportError(PostgrestBuilderError):

    def __init__(self, message: str, request: "GatewayRequest | None" = None):
        self.request = request
        super().__init__(message)


class RequestNetworkError(TransportError):

    def __init__(self, request: "GatewayRequest", backend_request: Any = None):
        self.backend_request = backend_request
        super().__init__("Network error", request)


class TimeoutException(TransportError):
    """Exception raised when a request times out"""


class GatewayResponseError(PostgrestBuilderError):
    """Raised by ``GatewayResponse.raise_for_status`` on non 2xx responses."""

    def __init__(
        self,
        response: "GatewayResponse",
        message: str | None = None,
        code: str | None = None,
        details: str | None = None,
        hint: str | None = None,
    ):
        self.response = response
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint
        super().__init__(
            f"Gateway responded {response.status_code}: {message or response.text()}"
        )


__all__ = [
    "PostgrestBuilderError",
    "InvalidArgumentError",
    "InvalidHeaderValueError",
    "TransportError",
    "RequestNetworkError",
    "TimeoutException",
    "GatewayResponseError",
]
