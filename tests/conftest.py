"""pytest configuration and shared fixtures."""

import io

import pytest

from param_bind import Request, build_default_binder


@pytest.fixture
def binder():
    """Binder with the default wiring."""
    return build_default_binder()


@pytest.fixture
def make_request():
    """Build a ``Request``; *body* may be ``bytes`` and is wrapped in a stream."""

    def _make(method="POST", content_type=None, body=None, query=None, form=None):
        headers = {"Content-Type": content_type} if content_type is not None else {}
        stream = io.BytesIO(body) if isinstance(body, bytes) else body
        return Request(
            method=method,
            headers=headers,
            body=stream,
            query_params=query or {},
            form_params=form or {},
        )

    return _make
