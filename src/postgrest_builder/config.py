# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field
from typing import get_args

from postgrest_builder.builder import ProfilePolicy
from postgrest_builder.exceptions import InvalidArgumentError
from postgrest_builder.utils.env_parse_utils import (
    get_env_dict,
    get_env_float,
    get_env_str,
)

DEFAULT_TIMEOUT = 30.0
DEFAULT_ENV_PREFIX = "POSTGREST_"


def check_profile_policy(policy: str) -> ProfilePolicy:
    if policy not in get_args(ProfilePolicy):
        raise InvalidArgumentError(
            "Unknown profile policy %r, expected one of %s"
            % (policy, ", ".join(get_args(ProfilePolicy)))
        )
    return policy  # type: ignore[return-value]


@dataclass
class ClientConfig:
    """
    Settings of a gateway client.

    ``profile_policy`` selects the header carrying the schema of RPC calls:
    ``by_method`` (default) uses ``Content-Profile`` for POST like any other
    write, as PostgREST 8 and later expect. ``rpc_accept_profile`` sends
    ``Accept-Profile`` on RPC calls, for PostgREST 7 gateways that resolved
    the function schema from that header.
    """

    base_url: str
    schema: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    profile_policy: ProfilePolicy = "by_method"

    @classmethod
    def from_env(
        cls, prefix: str = DEFAULT_ENV_PREFIX, base_url: str | None = None
    ) -> "ClientConfig":
        """
        Read the configuration from environment variables.

        Recognized variables (with the default ``POSTGREST_`` prefix):
        ``POSTGREST_URL`` (required), ``POSTGREST_SCHEMA``,
        ``POSTGREST_TIMEOUT``, ``POSTGREST_PROFILE_POLICY``,
        ``POSTGREST_API_KEY``, ``POSTGREST_TOKEN`` and ``POSTGREST_HEADERS``
        (``name=value`` pairs separated by commas).

        An explicit ``base_url`` takes precedence over ``POSTGREST_URL``.
        """
        if base_url is None:
            base_url = get_env_str(f"{prefix}URL")
        if base_url is None:
            raise InvalidArgumentError(f"{prefix}URL is not set")

        timeout = get_env_float(f"{prefix}TIMEOUT", DEFAULT_TIMEOUT)
        if timeout is False or timeout <= 0:
            raise InvalidArgumentError(
                f"{prefix}TIMEOUT must be a positive number of seconds"
            )

        headers = get_env_dict(f"{prefix}HEADERS")
        if (api_key := get_env_str(f"{prefix}API_KEY")) is not None:
            headers["apikey"] = api_key
        if (token := get_env_str(f"{prefix}TOKEN")) is not None:
            headers["Authorization"] = f"Bearer {token}"

        return cls(
            base_url=base_url,
            schema=get_env_str(f"{prefix}SCHEMA"),
            headers=headers,
            timeout=timeout,
            profile_policy=check_profile_policy(
                get_env_str(f"{prefix}PROFILE_POLICY", "by_method")
            ),
        )


__all__ = [
    "ClientConfig",
    "DEFAULT_TIMEOUT",
    "check_profile_policy",
]
