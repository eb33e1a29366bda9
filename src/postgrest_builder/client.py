# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
from dataclasses import dataclass, field, replace
from types import TracebackType
from typing import Iterable, Optional

from postgrest_builder.builder import Body, Builder, ProfilePolicy
from postgrest_builder.config import ClientConfig, check_profile_policy
from postgrest_builder.headers import HeaderPairs, set_header, validate_header
from postgrest_builder.transport.backends.httpx import HTTPXAsyncBackend
from postgrest_builder.transport.types import HttpAsyncBackend, RequestMiddleware

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Client:
    """
    Entry point producing request builders for one gateway.

    ``schema``, ``insert_header`` and ``auth`` return updated clients; the
    transport backend is shared by every derived client and builder so the
    connection pool is reused.
    """

    base_url: str
    schema_name: str | None = None
    headers: HeaderPairs = ()
    backend: HttpAsyncBackend = field(
        default_factory=HTTPXAsyncBackend, repr=False, compare=False
    )
    middlewares: tuple[RequestMiddleware, ...] = field(
        default=(), repr=False, compare=False
    )
    timeout: float | None = None
    profile_policy: ProfilePolicy = "by_method"

    def __post_init__(self) -> None:
        check_profile_policy(self.profile_policy)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        backend: Optional[HttpAsyncBackend] = None,
        middlewares: Iterable[RequestMiddleware] = (),
    ) -> "Client":
        client = cls(
            base_url=config.base_url,
            backend=(
                backend
                if backend is not None
                else HTTPXAsyncBackend(default_timeout=config.timeout)
            ),
            middlewares=tuple(middlewares),
            timeout=config.timeout,
            profile_policy=config.profile_policy,
        )
        for name, value in config.headers.items():
            client = client.insert_header(name, value)
        if config.schema is not None:
            client = client.schema(config.schema)
        return client

    @classmethod
    def from_env(
        cls,
        backend: Optional[HttpAsyncBackend] = None,
        middlewares: Iterable[RequestMiddleware] = (),
    ) -> "Client":
        return cls.from_config(ClientConfig.from_env(), backend, middlewares)

    def schema(self, name: str) -> "Client":
        """Select the schema used by the builders created afterwards."""
        validate_header("Accept-Profile", name)
        return replace(self, schema_name=name)

    def insert_header(self, name: str, value: str) -> "Client":
        """Add a default header copied into every builder created afterwards."""
        return replace(self, headers=set_header(self.headers, name, value))

    def auth(self, token: str) -> "Client":
        return self.insert_header("Authorization", f"Bearer {token}")

    def _builder(self, url: str) -> Builder:
        return Builder.new(
            url,
            schema=self.schema_name,
            headers=self.headers,
            profile_policy=self.profile_policy,
            timeout=self.timeout,
            backend=self.backend,
            middlewares=self.middlewares,
        )

    def from_(self, table: str) -> Builder:
        """Start a request on ``table``."""
        return self._builder(f"{self.base_url}/{table}")

    def rpc(self, function: str, params: Body) -> Builder:
        """Start a call to the stored procedure ``function``."""
        logger.debug("Preparing RPC call to %s", function)
        return self._builder(f"{self.base_url}/rpc/{function}").rpc(params)

    async def aclose(self) -> None:
        aclose = getattr(self.backend, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()


__all__ = [
    "Client",
]
