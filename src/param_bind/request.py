"""Request context consumed by ``Binder.bind``.

The binder only needs five things from the transport layer; any object with
these attributes satisfies ``RequestContext``.  ``Request`` is a ready-made
implementation for callers (and tests) that do not already have one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, BinaryIO, Iterator, Mapping, MutableMapping, Optional, Protocol, Sequence, runtime_checkable

HEADER_CONTENT_TYPE = "Content-Type"

MIME_APPLICATION_JSON = "application/json"
MIME_APPLICATION_XML = "application/xml"
MIME_APPLICATION_FORM = "application/x-www-form-urlencoded"
MIME_MULTIPART_FORM = "multipart/form-data"


class HeaderLookup(Protocol):
    def get(self, name: str, default: Any = None) -> Any: ...


@runtime_checkable
class RequestContext(Protocol):
    method: str
    headers: HeaderLookup
    body: Optional[BinaryIO]
    query_params: Mapping[str, Sequence[str]]
    form_params: Mapping[str, Sequence[str]]


class Headers(MutableMapping[str, str]):
    """Case-insensitive header mapping.

    ::

        h = Headers({"content-type": "application/json"})
        h.get("Content-Type")   # "application/json"
    """

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        self._store: dict[str, tuple[str, str]] = {}
        if data:
            self.update(data)

    def __getitem__(self, name: str) -> str:
        return self._store[name.lower()][1]

    def __setitem__(self, name: str, value: str) -> None:
        self._store[name.lower()] = (name, value)

    def __delitem__(self, name: str) -> None:
        del self._store[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"


@dataclass
class Request:
    method: str = "GET"
    headers: Headers = field(default_factory=Headers)
    body: Optional[BinaryIO] = None
    query_params: Mapping[str, Sequence[str]] = field(default_factory=dict)
    form_params: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get(HEADER_CONTENT_TYPE)
