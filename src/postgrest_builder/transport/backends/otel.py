# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from postgrest_builder.transport.types import GatewayRequest, RequestMiddleware


class TracedRequestMiddleware(RequestMiddleware):
    """Propagates the current trace context and baggage to the gateway."""

    def on_request(self, request: GatewayRequest) -> GatewayRequest:

        headers: dict[str, str] = {}
        W3CBaggagePropagator().inject(headers)
        TraceContextTextMapPropagator().inject(headers)

        for key, value in headers.items():
            request.headers.append((key, value))

        return request
