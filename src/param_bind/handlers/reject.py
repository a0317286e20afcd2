"""Handlers that refuse the request outright."""

from __future__ import annotations

from ..core import BindContext, BindHandler
from ..errors import EmptyBodyError, UnsupportedMediaTypeError
from ..request import HEADER_CONTENT_TYPE


class EmptyBodyHandler(BindHandler):
    def execute(self, ctx: BindContext) -> None:
        raise EmptyBodyError()


class UnsupportedMediaTypeHandler(BindHandler):
    """Catch-all for body-bearing requests nothing else claimed."""

    def execute(self, ctx: BindContext) -> None:
        raise UnsupportedMediaTypeError(ctx.request.headers.get(HEADER_CONTENT_TYPE))
