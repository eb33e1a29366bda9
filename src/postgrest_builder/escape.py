# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Escaping rules of the gateway filter grammar.

The gateway uses ``,``, ``.``, ``:``, ``(`` and ``)`` as structural delimiters
inside query values. Any column or value containing one of them must be wrapped
in double quotes so it is read as a single literal.
"""

from typing import Iterable

RESERVED_CHARACTERS = ",.:()"


def clean_param(param: str) -> str:
    if any(char in param for char in RESERVED_CHARACTERS):
        return f'"{param}"'
    return param


def wildcard(pattern: str) -> str:
    """Rewrite SQL ``%`` wildcards to the gateway's ``*`` token."""
    return pattern.replace("%", "*")


def join_params(values: Iterable[str]) -> str:
    return ",".join(clean_param(value) for value in values)


__all__ = [
    "RESERVED_CHARACTERS",
    "clean_param",
    "wildcard",
    "join_params",
]
