# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared by probes, scenarios and the email routes."""

from __future__ import annotations


def normalize(url: str) -> str:
    """
    Remove a single trailing slash from a base URL.

    Only one slash is stripped: `"http://host//"` becomes `"http://host/"`.

    Example:
      https://x.com/ -> https://x.com
    """
    if url.endswith("/"):
        return url[:-1]
    return url


def join_url(base_url: str, path: str) -> str:
    """Concatenate a base URL and an absolute path without doubling the slash."""
    if path and not path.startswith("/"):
        path = f"/{path}"
    return f"{normalize(base_url)}{path}"


__all__ = ["join_url", "normalize"]
