# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Route groups that remember what they register.

Each group records `(method, path)` descriptors as routes are declared, so the set of
live endpoints can be listed without reading the web framework's router internals.
`RouteGroup.to_router()` turns a group into a FastAPI `APIRouter` for mounting.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from fastapi import APIRouter

from ..http.url import join_url, normalize
from ..models.route import HttpMethod, RouteDescriptor

Endpoint = Callable[..., Any]


@dataclass(frozen=True)
class _RouteEntry:
    descriptor: RouteDescriptor
    endpoint: Endpoint
    options: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True)
class _MountEntry:
    prefix: str
    group: RouteGroup


def _check_path(path: str, *, allow_empty: bool) -> str:
    if not path:
        if allow_empty:
            return ""
        raise ValueError("Route path must not be empty")
    if not path.startswith("/"):
        raise ValueError(f"Route path must start with '/': {path!r}")
    return path


class RouteGroup:
    """An ordered collection of routes and nested groups."""

    def __init__(self, name: str = ""):
        self.name = name
        self._entries: list[_RouteEntry | _MountEntry] = []

    def add(self, method: str | HttpMethod, path: str, endpoint: Endpoint, **options: Any) -> RouteDescriptor:
        descriptor = RouteDescriptor(HttpMethod.parse(method), _check_path(path, allow_empty=False))
        self._entries.append(_RouteEntry(descriptor, endpoint, dict(options)))
        return descriptor

    def route(self, method: str | HttpMethod, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        """Decorator form of `add`; extra options go to FastAPI's `add_api_route`."""

        def decorator(endpoint: Endpoint) -> Endpoint:
            self.add(method, path, endpoint, **options)
            return endpoint

        return decorator

    def get(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route(HttpMethod.GET, path, **options)

    def post(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route(HttpMethod.POST, path, **options)

    def include(self, group: RouteGroup, prefix: str = "") -> None:
        if group is self:
            raise ValueError("A route group cannot include itself")
        self._entries.append(_MountEntry(_check_path(prefix, allow_empty=True), group))

    def to_router(self) -> APIRouter:
        router = APIRouter()
        for entry in self._entries:
            if isinstance(entry, _RouteEntry):
                router.add_api_route(
                    entry.descriptor.path,
                    entry.endpoint,
                    methods=[entry.descriptor.method.value],
                    **entry.options,
                )
            else:
                router.include_router(entry.group.to_router(), prefix=normalize(entry.prefix))
        return router

    def entries(self) -> list[_RouteEntry | _MountEntry]:
        return list(self._entries)


def list_routes(group: RouteGroup, prefix: str = "") -> Iterator[RouteDescriptor]:
    """
    Yield every route reachable through `group`, depth-first in registration order.

    Nested groups contribute their routes with the mount prefixes concatenated, so
    each descriptor carries the full externally reachable path.
    """
    for entry in group.entries():
        if isinstance(entry, _RouteEntry):
            path = join_url(prefix, entry.descriptor.path) if prefix else entry.descriptor.path
            yield RouteDescriptor(entry.descriptor.method, path)
        else:
            nested_prefix = join_url(prefix, entry.prefix) if prefix else entry.prefix
            yield from list_routes(entry.group, nested_prefix)


__all__ = ["RouteGroup", "list_routes"]
