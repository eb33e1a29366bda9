# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import re

from postgrest_builder.exceptions import InvalidHeaderValueError

HeaderPairs = tuple[tuple[str, str], ...]

_HEADER_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
# Visible ASCII plus space and horizontal tab.
_HEADER_VALUE_RE = re.compile(r"^[\t\x20-\x7e]*$")


def validate_header(name: str, value: str) -> None:
    if not _HEADER_NAME_RE.match(name) or not _HEADER_VALUE_RE.match(value):
        raise InvalidHeaderValueError(name, value)


def set_header(headers: HeaderPairs, name: str, value: str) -> HeaderPairs:
    """
    Return a copy of ``headers`` where ``name`` holds only ``value``.

    Names compare case-insensitively. An existing header keeps its position,
    a new one is appended.
    """
    validate_header(name, value)
    lowered = name.lower()
    result: list[tuple[str, str]] = []
    replaced = False
    for key, current in headers:
        if key.lower() != lowered:
            result.append((key, current))
        elif not replaced:
            result.append((name, value))
            replaced = True
    if not replaced:
        result.append((name, value))
    return tuple(result)


def get_header(headers: HeaderPairs, name: str) -> str | None:
    lowered = name.lower()
    for key, value in headers:
        if key.lower() == lowered:
            return value
    return None


def has_header(headers: HeaderPairs, name: str) -> bool:
    return get_header(headers, name) is not None


__all__ = [
    "HeaderPairs",
    "validate_header",
    "set_header",
    "get_header",
    "has_header",
]
