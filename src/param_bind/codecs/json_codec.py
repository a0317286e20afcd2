"""JSON codec with byte offsets in its errors.

The standard ``json`` module decodes into plain dicts and forgets where each
value came from.  Binding needs more: a type mismatch must name the byte
offset of the offending value.  ``JsonCodec`` therefore works in two passes:

1. ``_Parser`` builds a small node tree (kind, raw value, start/end index).
   The whole document is syntax-checked before anything is written.
2. ``_Assigner`` walks the destination dataclass against the tree.

Assignment rules
----------------
* Object keys match the field's ``json`` metadata name (text before the first
  comma; ``"-"`` hides the field), then the field name, then the field name
  case-insensitively.  Unknown keys are ignored; repeated keys overwrite.
* ``null`` clears pointer (``Optional``) fields, empties list fields and
  leaves every other field untouched.
* Integers must be integral literals in range; floats accept any number.
* Arrays and objects nested deeper than ``max_depth`` are a syntax error.
* Byte offsets count the raw input, invalid UTF-8 included.  Invalid bytes
  and lone surrogates inside strings decode to U+FFFD.
* A type mismatch skips that field; decoding continues and the *first*
  mismatch is raised once the whole document has been applied.
* Custom-hook types accept JSON strings through ``unmarshal_param``.
"""

from __future__ import annotations

from dataclasses import dataclass
from json import JSONDecodeError
from json.decoder import scanstring
from typing import Any, BinaryIO, List, Mapping, MutableMapping, Optional, Tuple, get_origin

import regex

from ..casters import Coercer
from ..errors import CoercionError
from ..hooks import allocate, is_unmarshaler, try_custom_decode
from ..kinds import Kind
from ..schema import SchemaRegistry, Shape, TypeShape, is_record
from .base import DecodeError, PayloadCodec, PayloadSyntaxError, TypeMismatchError, UnsupportedTypeError

_WS_RE = regex.compile(r"[ \t\n\r]*")
_NUMBER_RE = regex.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_INTEGER_RE = regex.compile(r"-?[0-9]+")
_SURROGATE_RE = regex.compile(r"[\ud800-\udfff]")
_MAX_PLAIN_INT_DIGITS = 20

DEFAULT_MAX_DEPTH = 128

_LITERALS = (("true", "bool", True), ("false", "bool", False), ("null", "null", None))


def _byte_offset(text: str, pos: int) -> int:
    return len(text[:pos].encode("utf-8", errors="surrogateescape"))


# ─────────────────────────────────────────────────────────────────────────────
# Pass 1 — position-aware parse
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class _Node:
    """One JSON value.

    *value* holds ``[(key, node), …]`` for objects, ``[node, …]`` for arrays,
    the raw literal text for numbers, and the decoded value otherwise.
    """

    kind: str
    value: Any
    start: int
    end: int


class _Parser:
    def __init__(self, text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.text = text
        self.max_depth = max_depth
        self.depth = 0

    def parse(self) -> _Node:
        idx = self._skip(0)
        if idx == len(self.text):
            raise DecodeError("EOF")
        node, _ = self._value(idx)
        return node

    # -- helpers ------------------------------------------------------------

    def _skip(self, idx: int) -> int:
        return _WS_RE.match(self.text, idx).end()

    def _error(self, msg: str, pos: int) -> PayloadSyntaxError:
        return PayloadSyntaxError(msg, offset=_byte_offset(self.text, pos))

    def _unexpected(self, idx: int, context: str) -> PayloadSyntaxError:
        if idx >= len(self.text):
            return self._error("unexpected end of JSON input", idx)
        return self._error(f"invalid character {self.text[idx]!r} {context}", idx)

    # -- grammar ------------------------------------------------------------

    def _value(self, idx: int) -> Tuple[_Node, int]:
        text = self.text
        ch = text[idx:idx + 1]
        if ch == "{" or ch == "[":
            if self.depth >= self.max_depth:
                raise self._error("exceeded max depth", idx)
            self.depth += 1
            try:
                return self._object(idx) if ch == "{" else self._array(idx)
            finally:
                self.depth -= 1
        if ch == '"':
            return self._string(idx)

        match = _NUMBER_RE.match(text, idx)
        if match:
            return _Node("number", match.group(), idx, match.end()), match.end()

        for literal, kind, value in _LITERALS:
            if text.startswith(literal, idx):
                end = idx + len(literal)
                return _Node(kind, value, idx, end), end

        raise self._unexpected(idx, "looking for beginning of value")

    def _string(self, idx: int) -> Tuple[_Node, int]:
        try:
            value, end = scanstring(self.text, idx + 1, True)
        except JSONDecodeError as exc:
            raise self._error(exc.msg, exc.pos) from None
        return _Node("string", _SURROGATE_RE.sub("\ufffd", value), idx, end), end

    def _object(self, start: int) -> Tuple[_Node, int]:
        members: List[Tuple[str, _Node]] = []
        idx = self._skip(start + 1)
        if self.text[idx:idx + 1] == "}":
            return _Node("object", members, start, idx + 1), idx + 1

        while True:
            if self.text[idx:idx + 1] != '"':
                raise self._unexpected(idx, "looking for beginning of object key string")
            key_node, idx = self._string(idx)
            idx = self._skip(idx)
            if self.text[idx:idx + 1] != ":":
                raise self._unexpected(idx, "after object key")
            value, idx = self._value(self._skip(idx + 1))
            members.append((key_node.value, value))

            idx = self._skip(idx)
            ch = self.text[idx:idx + 1]
            if ch == ",":
                idx = self._skip(idx + 1)
                continue
            if ch == "}":
                return _Node("object", members, start, idx + 1), idx + 1
            raise self._unexpected(idx, "after object key:value pair")

    def _array(self, start: int) -> Tuple[_Node, int]:
        items: List[_Node] = []
        idx = self._skip(start + 1)
        if self.text[idx:idx + 1] == "]":
            return _Node("array", items, start, idx + 1), idx + 1

        while True:
            item, idx = self._value(idx)
            items.append(item)
            idx = self._skip(idx)
            ch = self.text[idx:idx + 1]
            if ch == ",":
                idx = self._skip(idx + 1)
                continue
            if ch == "]":
                return _Node("array", items, start, idx + 1), idx + 1
            raise self._unexpected(idx, "after array element")


# ─────────────────────────────────────────────────────────────────────────────
# Pass 2 — assignment
# ─────────────────────────────────────────────────────────────────────────────

_UNTOUCHED = object()
_FLOAT64_SHAPE = TypeShape(Shape.SCALAR, float, kind=Kind.FLOAT64)


class _Assigner:
    def __init__(self, codec: 'JsonCodec', text: str) -> None:
        self.codec = codec
        self.text = text
        self.first_error: Optional[TypeMismatchError] = None

    def mismatch(self, shape: TypeShape, node: _Node) -> TypeMismatchError:
        pos = node.start + 1 if node.kind in ("object", "array") else node.end
        described = node.kind
        if node.kind == "number" and shape.kind not in (Kind.STRING, Kind.BOOL, None):
            described = f"number {node.value}"
        return TypeMismatchError(shape.type_name, described, _byte_offset(self.text, pos))

    def plain(self, node: _Node) -> Any:
        """Convert a node to plain Python data (for ``Any`` / ``dict`` targets)."""
        if node.kind == "object":
            return {k: self.plain(v) for k, v in node.value}
        if node.kind == "array":
            return [self.plain(v) for v in node.value]
        if node.kind == "number":
            return self.number(node)
        return node.value

    def number(self, node: _Node) -> Any:
        # Integers wider than uint64 are read as float64.
        if _INTEGER_RE.fullmatch(node.value) and len(node.value.lstrip("-")) <= _MAX_PLAIN_INT_DIGITS:
            return int(node.value)
        try:
            return self.codec.coercer.coerce(Kind.FLOAT64, node.value)
        except CoercionError:
            raise self.mismatch(_FLOAT64_SHAPE, node) from None

    def into_record(self, dest: Any, node: _Node) -> None:
        fields = self.codec.fields_of(type(dest))
        for key, child in node.value:
            desc = fields.get(key)
            if desc is None:
                desc = fields.get(key.casefold())
            if desc is None:
                continue
            try:
                value = self.convert(desc.shape, child, getattr(dest, desc.name, None))
            except TypeMismatchError as exc:
                if self.first_error is None:
                    self.first_error = exc
                continue
            if value is not _UNTOUCHED:
                setattr(dest, desc.name, value)

    def convert(self, shape: TypeShape, node: _Node, current: Any) -> Any:
        if node.kind == "null":
            if shape.shape is Shape.POINTER:
                return None
            if shape.shape is Shape.SEQUENCE:
                return []
            return _UNTOUCHED

        if shape.shape is Shape.POINTER:
            return self.convert(shape.elem, node, current)

        if shape.shape is Shape.SEQUENCE:
            if node.kind != "array":
                raise self.mismatch(shape, node)
            return [self.convert(shape.elem, item, None) for item in node.value]

        if shape.shape is Shape.RECORD:
            if node.kind != "object":
                raise self.mismatch(shape, node)
            target = current if current is not None else allocate(shape.tp)
            self.into_record(target, node)
            return target

        if shape.shape is Shape.SCALAR:
            return self.scalar(shape, node)

        return self.other(shape, node, current)

    def scalar(self, shape: TypeShape, node: _Node) -> Any:
        kind = shape.kind
        if kind is Kind.STRING:
            if node.kind != "string":
                raise self.mismatch(shape, node)
            return node.value
        if kind is Kind.BOOL:
            if node.kind != "bool":
                raise self.mismatch(shape, node)
            return node.value
        if node.kind != "number":
            raise self.mismatch(shape, node)
        try:
            return self.codec.coercer.coerce(kind, node.value)
        except CoercionError:
            raise self.mismatch(shape, node) from None

    def other(self, shape: TypeShape, node: _Node, current: Any) -> Any:
        if shape.tp is Any or shape.tp is object:
            return self.plain(node)
        if shape.tp is dict or get_origin(shape.tp) in (dict, Mapping, MutableMapping):
            if node.kind != "object":
                raise self.mismatch(shape, node)
            return self.plain(node)
        if is_unmarshaler(shape.tp):
            if node.kind != "string":
                raise self.mismatch(shape, node)
            _, decoded = try_custom_decode(shape, current, node.value)
            return decoded
        raise UnsupportedTypeError(shape.type_name)


# ─────────────────────────────────────────────────────────────────────────────
# Codec
# ─────────────────────────────────────────────────────────────────────────────


class JsonCodec(PayloadCodec):
    """Decode a JSON document into a dataclass instance or a mutable mapping.

    Args:
        coercer:   Used for number literals so integer widths and float32
                   rounding match the form path.
        schemas:   Descriptor cache.
        tag:       Field-metadata key for JSON names.
        max_depth: Deepest allowed nesting of arrays and objects.
    """

    def __init__(
            self,
            *,
            coercer: Coercer | None = None,
            schemas: SchemaRegistry | None = None,
            tag: str = "json",
            max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.coercer = coercer or Coercer()
        self.schemas = schemas or SchemaRegistry()
        self.tag = tag
        self.max_depth = max_depth

    def fields_of(self, cls: type) -> dict:
        """Map JSON names (exact and casefolded) to field descriptors."""
        exact: dict = {}
        folded: dict = {}
        for desc in self.schemas.describe(cls, self.tag):
            if not desc.settable:
                continue
            name = desc.key.split(",", 1)[0] if desc.tagged else desc.name
            if name == "-":
                continue
            name = name or desc.name
            exact.setdefault(name, desc)
            folded.setdefault(name.casefold(), desc)
        return {**folded, **exact}

    def decode(self, stream: BinaryIO, destination: Any) -> None:
        text = stream.read().decode("utf-8", errors="surrogateescape")
        root = _Parser(text, self.max_depth).parse()
        assigner = _Assigner(self, text)

        if is_record(destination):
            if root.kind != "object":
                raise assigner.mismatch(TypeShape(Shape.RECORD, type(destination)), root)
            assigner.into_record(destination, root)
        elif isinstance(destination, MutableMapping):
            if root.kind != "object":
                raise assigner.mismatch(TypeShape(Shape.OTHER, type(destination)), root)
            destination.update(assigner.plain(root))
        else:
            raise UnsupportedTypeError(type(destination).__name__)

        if assigner.first_error is not None:
            raise assigner.first_error
