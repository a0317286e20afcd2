"""Binder factory — the single place where all pieces are assembled.

``build_default_binder`` is the recommended entry point for users who want a
fully functional Binder without hand-wiring the registry.

Customisation points:

* **tag**           – field-metadata key holding source-key annotations.
* **query_methods** – methods bound from the query string only.
* **casters**       – per-``Kind`` overrides of the built-in string casters.
* **json_codec** / **xml_codec** – replace the default payload codecs.
* **max_depth**     – nesting limit for flattened records.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from .casters import Coercer
from .codecs import JsonCodec, PayloadCodec, XmlCodec
from .core import BindNode, BindRegistry, Binder
from .handlers import (
    EmptyBodyHandler,
    FormParamsHandler,
    JsonPayloadHandler,
    QueryParamsHandler,
    UnsupportedMediaTypeHandler,
    XmlPayloadHandler,
)
from .kinds import Kind
from .matchers import AlwaysMatcher, MediaTypeMatcher, MethodMatcher, MissingBodyMatcher
from .populator import StructPopulator
from .request import MIME_APPLICATION_FORM, MIME_APPLICATION_JSON, MIME_APPLICATION_XML, MIME_MULTIPART_FORM
from .schema import SchemaRegistry

DEFAULT_QUERY_METHODS = ("GET", "HEAD")


def build_default_binder(
        *,
        tag: str = "form",
        query_methods: Iterable[str] = DEFAULT_QUERY_METHODS,
        casters: Mapping[Kind, Callable[[str], Any]] | None = None,
        json_codec: PayloadCodec | None = None,
        xml_codec: PayloadCodec | None = None,
        max_depth: int = 32,
) -> Binder:
    """Assemble a Binder with the standard dispatch order.

    What gets wired
    ---------------
    registry (first match wins)
        * ``query``       (priority 100) – method in *query_methods* → query params
        * ``empty-body``  (priority  90) – no body stream → ``EmptyBodyError``
        * ``json``        (priority  50) – ``application/json…`` → JSON codec
        * ``xml``         (priority  50) – ``application/xml…`` → XML codec
        * ``form``        (priority  50) – urlencoded / multipart → form params
        * ``unsupported`` (priority -999) – ``UnsupportedMediaTypeError``

    populator
        ``StructPopulator`` sharing one ``Coercer`` and one ``SchemaRegistry``
        with the default codecs.

    Example::

        binder = build_default_binder()
        query = SearchQuery()
        binder.bind(query, Request(method="GET", query_params={"q": ["shoes"]}))
    """
    coercer = Coercer(casters)
    schemas = SchemaRegistry()
    populator = StructPopulator(coercer=coercer, schemas=schemas, tag=tag, max_depth=max_depth)

    if json_codec is None:
        json_codec = JsonCodec(coercer=coercer, schemas=schemas)
    if xml_codec is None:
        xml_codec = XmlCodec(coercer=coercer, schemas=schemas)

    registry = BindRegistry()
    registry.register(BindNode(
        name="query", priority=100,
        matcher=MethodMatcher(query_methods),
        handler=QueryParamsHandler(),
    ))
    registry.register(BindNode(
        name="empty-body", priority=90,
        matcher=MissingBodyMatcher(),
        handler=EmptyBodyHandler(),
    ))
    registry.register(BindNode(
        name="json", priority=50,
        matcher=MediaTypeMatcher(MIME_APPLICATION_JSON),
        handler=JsonPayloadHandler(json_codec),
    ))
    registry.register(BindNode(
        name="xml", priority=50,
        matcher=MediaTypeMatcher(MIME_APPLICATION_XML),
        handler=XmlPayloadHandler(xml_codec),
    ))
    registry.register(BindNode(
        name="form", priority=50,
        matcher=MediaTypeMatcher(MIME_APPLICATION_FORM, MIME_MULTIPART_FORM),
        handler=FormParamsHandler(),
    ))
    registry.register(BindNode(
        name="unsupported", priority=-999,
        matcher=AlwaysMatcher(),
        handler=UnsupportedMediaTypeHandler(),
    ))

    return Binder(registry=registry, populator=populator)
