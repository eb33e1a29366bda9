# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from .backends.httpx import HTTPXAsyncBackend
from .types import (
    GatewayRequest,
    GatewayResponse,
    HttpAsyncBackend,
    RequestMiddleware,
    encode_query,
)

__all__ = [
    # Data structures
    "GatewayRequest",
    "GatewayResponse",
    # Protocols
    "HttpAsyncBackend",
    "RequestMiddleware",
    # Backend
    "HTTPXAsyncBackend",
    "encode_query",
]
