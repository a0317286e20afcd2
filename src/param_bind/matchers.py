"""Shared BindMatcher implementations.

Exports
-------
MethodMatcher
    Match by request method (case-insensitive).

MissingBodyMatcher
    Match requests whose body stream is absent.

MediaTypeMatcher
    Match by ``Content-Type`` prefix, so ``application/json; charset=utf-8``
    matches ``application/json``.

AlwaysMatcher
    Unconditional match — catch-all / fallback sentinel.
"""

from __future__ import annotations

from typing import Iterable

from .core import BindMatcher
from .request import HEADER_CONTENT_TYPE, RequestContext


def content_type_of(request: RequestContext) -> str:
    return (request.headers.get(HEADER_CONTENT_TYPE) or "").strip().lower()


class MethodMatcher(BindMatcher):
    """::

        MethodMatcher({"GET"}).matches(Request(method="get"))    # True
        MethodMatcher({"GET"}).matches(Request(method="POST"))   # False
    """

    def __init__(self, methods: Iterable[str]) -> None:
        self._methods = frozenset(m.upper() for m in methods)

    def matches(self, request: RequestContext) -> bool:
        return (request.method or "").upper() in self._methods


class MissingBodyMatcher(BindMatcher):
    def matches(self, request: RequestContext) -> bool:
        return request.body is None


class MediaTypeMatcher(BindMatcher):
    """Match when ``Content-Type`` starts with any of *prefixes*."""

    def __init__(self, *prefixes: str) -> None:
        self._prefixes = tuple(p.lower() for p in prefixes)

    def matches(self, request: RequestContext) -> bool:
        return content_type_of(request).startswith(self._prefixes)


class AlwaysMatcher(BindMatcher):
    def matches(self, request: RequestContext) -> bool:
        return True
