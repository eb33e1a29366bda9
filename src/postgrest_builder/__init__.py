# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .builder import Builder, serialize_body
    from .client import Client
    from .config import ClientConfig
    from .escape import clean_param
    from .exceptions import (
        GatewayResponseError,
        InvalidArgumentError,
        InvalidHeaderValueError,
        PostgrestBuilderError,
        RequestNetworkError,
        TimeoutException,
        TransportError,
    )
    from .transport.backends.httpx import HTTPXAsyncBackend
    from .transport.backends.otel import TracedRequestMiddleware
    from .transport.types import (
        GatewayRequest,
        GatewayResponse,
        HttpAsyncBackend,
        RequestMiddleware,
    )

__all__ = [
    # Entry points
    "Client",
    "ClientConfig",
    "Builder",
    # Helpers
    "clean_param",
    "serialize_body",
    # Transport
    "GatewayRequest",
    "GatewayResponse",
    "HttpAsyncBackend",
    "RequestMiddleware",
    "HTTPXAsyncBackend",
    "TracedRequestMiddleware",
    # Exceptions
    "PostgrestBuilderError",
    "InvalidArgumentError",
    "InvalidHeaderValueError",
    "TransportError",
    "RequestNetworkError",
    "TimeoutException",
    "GatewayResponseError",
]

__SPEC_PARENT__: str = __spec__.parent  # type: ignore
# A mapping of {<member name>: (package, <module name>)} defining dynamic imports
_dynamic_imports: "dict[str, tuple[str, str]]" = {
    "Client": (__SPEC_PARENT__, "client"),
    "ClientConfig": (__SPEC_PARENT__, "config"),
    "Builder": (__SPEC_PARENT__, "builder"),
    "serialize_body": (__SPEC_PARENT__, "builder"),
    "clean_param": (__SPEC_PARENT__, "escape"),
    "GatewayRequest": (__SPEC_PARENT__, "transport.types"),
    "GatewayResponse": (__SPEC_PARENT__, "transport.types"),
    "HttpAsyncBackend": (__SPEC_PARENT__, "transport.types"),
    "RequestMiddleware": (__SPEC_PARENT__, "transport.types"),
    "HTTPXAsyncBackend": (__SPEC_PARENT__, "transport.backends.httpx"),
    # Needs the otel extra
    "TracedRequestMiddleware": (__SPEC_PARENT__, "transport.backends.otel"),
    "PostgrestBuilderError": (__SPEC_PARENT__, "exceptions"),
    "InvalidArgumentError": (__SPEC_PARENT__, "exceptions"),
    "InvalidHeaderValueError": (__SPEC_PARENT__, "exceptions"),
    "TransportError": (__SPEC_PARENT__, "exceptions"),
    "RequestNetworkError": (__SPEC_PARENT__, "exceptions"),
    "TimeoutException": (__SPEC_PARENT__, "exceptions"),
    "GatewayResponseError": (__SPEC_PARENT__, "exceptions"),
}


def __getattr__(attr_name: str) -> object:

    dynamic_attr = _dynamic_imports.get(attr_name)
    if dynamic_attr is None:
        raise AttributeError(f"module {__name__!r} has no attribute {attr_name!r}")

    package, module_name = dynamic_attr

    module = import_module(f"{package}.{module_name}", package=package)
    result = getattr(module, attr_name)
    globals()[attr_name] = result
    return result


def __dir__() -> "list[str]":
    return list(__all__)
