"""Key/value handlers — bind from the query string or the form body."""

from __future__ import annotations

from ..core import BindContext, BindHandler


class QueryParamsHandler(BindHandler):
    """Populate the destination from ``request.query_params``."""

    def execute(self, ctx: BindContext) -> None:
        ctx.binder.populator.populate(ctx.dest, ctx.request.query_params)


class FormParamsHandler(BindHandler):
    """Populate the destination from ``request.form_params``.

    Used for both ``application/x-www-form-urlencoded`` and
    ``multipart/form-data``; the transport layer has already parsed either
    into the same multi-valued mapping.
    """

    def execute(self, ctx: BindContext) -> None:
        ctx.binder.populator.populate(ctx.dest, ctx.request.form_params)
