# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Gateway transport backends
"""
Backend implementations for sending gateway requests.
"""

from .httpx import HTTPXAsyncBackend

__all__ = [
    "HTTPXAsyncBackend",
]
