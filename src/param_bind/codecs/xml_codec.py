"""XML codec built on ``xml.etree.ElementTree``.

The root element's name is not checked.  Below it, fields are matched by
their ``xml`` metadata or their own name::

    field(metadata={"xml": "id,attr"})    attribute ``id``
    field(metadata={"xml": ",chardata"})  the element's own text
    field(metadata={"xml": "-"})          never bound
    field(metadata={"xml": "item"})       child element ``<item>``

Repeated child elements append to list fields.  Text for numeric and boolean
kinds is whitespace-trimmed and converted with the same casters the form
path uses, so ``""`` still yields the zero value.  Records nested deeper than
``max_depth`` fail with ``DecodeError``.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Optional
from xml.etree import ElementTree

from ..casters import Coercer
from ..errors import CoercionError
from ..hooks import allocate, try_custom_decode
from ..kinds import Kind
from ..schema import FieldDescriptor, SchemaRegistry, Shape, TypeShape, is_record
from .base import DecodeError, PayloadCodec, PayloadSyntaxError, UnsupportedTypeError

DEFAULT_MAX_DEPTH = 128


def _local(name: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix."""
    return name.rsplit("}", 1)[-1]


class _RecordLayout:
    """Attribute, element and chardata slots of one dataclass."""

    def __init__(self) -> None:
        self.attrs: dict[str, FieldDescriptor] = {}
        self.elements: dict[str, FieldDescriptor] = {}
        self.chardata: Optional[FieldDescriptor] = None


class XmlCodec(PayloadCodec):
    def __init__(
            self,
            *,
            coercer: Coercer | None = None,
            schemas: SchemaRegistry | None = None,
            tag: str = "xml",
            max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.coercer = coercer or Coercer()
        self.schemas = schemas or SchemaRegistry()
        self.tag = tag
        self.max_depth = max_depth

    def decode(self, stream: BinaryIO, destination: Any) -> None:
        data = stream.read()
        if not data.strip():
            raise DecodeError("EOF")
        try:
            root = ElementTree.fromstring(data)
        except ElementTree.ParseError as exc:
            line, _column = exc.position
            raise PayloadSyntaxError(str(exc), line=line) from None

        if not is_record(destination):
            raise UnsupportedTypeError(type(destination).__name__)
        self._into_record(destination, root, 1)

    # -- layout -------------------------------------------------------------

    def _layout(self, cls: type) -> _RecordLayout:
        layout = _RecordLayout()
        for desc in self.schemas.describe(cls, self.tag):
            if not desc.settable:
                continue
            name, flags = desc.name, set()
            if desc.tagged:
                head, *rest = desc.key.split(",")
                if head == "-" and not rest:
                    continue
                name, flags = head or desc.name, set(rest)
            if "chardata" in flags:
                layout.chardata = desc
            elif "attr" in flags:
                layout.attrs[name] = desc
            else:
                layout.elements[name] = desc
        return layout

    # -- assignment ---------------------------------------------------------

    def _into_record(self, dest: Any, elem: ElementTree.Element, depth: int) -> None:
        if depth > self.max_depth:
            raise DecodeError("exceeded max depth")
        layout = self._layout(type(dest))

        for name, raw in elem.attrib.items():
            desc = layout.attrs.get(_local(name))
            if desc is not None:
                setattr(dest, desc.name, self._text(desc.shape, raw, getattr(dest, desc.name, None)))

        for child in elem:
            desc = layout.elements.get(_local(child.tag))
            if desc is not None:
                setattr(dest, desc.name, self._element(desc.shape, child, getattr(dest, desc.name, None), depth))

        if layout.chardata is not None:
            desc = layout.chardata
            setattr(dest, desc.name, self._text(desc.shape, elem.text or "", getattr(dest, desc.name, None)))

    def _element(self, shape: TypeShape, elem: ElementTree.Element, current: Any, depth: int) -> Any:
        if shape.shape is Shape.SEQUENCE:
            items = list(current) if current else []
            items.append(self._element(shape.elem, elem, None, depth))
            return items
        if shape.shape is Shape.POINTER:
            return self._element(shape.elem, elem, current, depth)
        if shape.shape is Shape.RECORD:
            target = current if current is not None else allocate(shape.tp)
            self._into_record(target, elem, depth + 1)
            return target
        return self._text(shape, "".join(elem.itertext()), current)

    def _text(self, shape: TypeShape, raw: str, current: Any) -> Any:
        applied, decoded = try_custom_decode(shape, current, raw)
        if applied:
            return decoded
        if shape.shape is Shape.POINTER:
            return self._text(shape.elem, raw, None)

        if shape.shape is not Shape.SCALAR:
            raise UnsupportedTypeError(shape.type_name)
        if shape.kind is Kind.STRING:
            return raw
        try:
            return self.coercer.coerce(shape.kind, raw.strip())
        except CoercionError as exc:
            raise DecodeError(str(exc)) from exc
