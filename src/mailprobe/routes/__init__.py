# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Explicit route registry used for mounting and diagnostics."""

from .registry import RouteGroup, list_routes

__all__ = ["RouteGroup", "list_routes"]
