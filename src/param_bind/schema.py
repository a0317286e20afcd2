"""Field descriptors derived from dataclass schemas.

A *type shape* classifies one declared type hint::

    int, str, Uint8, Float32 …     → SCALAR    (kind set)
    Optional[T] / T | None         → POINTER   (elem = shape of T)
    list[T] / List[T] / list       → SEQUENCE  (elem = shape of T)
    @dataclass class               → RECORD
    anything else                  → OTHER     (custom-hook types land here)

``SchemaRegistry.describe`` walks a dataclass once per ``(type, tag)`` pair
and caches the resulting ``FieldDescriptor`` tuple.  Descriptors depend only
on the class, so caching does not change what a bind call observes.
"""

from __future__ import annotations

import dataclasses
import logging
import types
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, List, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from .errors import SchemaError
from .kinds import Kind, kind_of

logger = logging.getLogger(__name__)


class Shape(Enum):
    SCALAR = "scalar"
    POINTER = "pointer"
    SEQUENCE = "sequence"
    RECORD = "record"
    OTHER = "other"


@dataclass(frozen=True)
class TypeShape:
    """Classification of a single type hint.

    Attributes:
        shape: Which branch of the coercion / population rules applies.
        tp:    The hint with ``Annotated`` metadata stripped.
        kind:  Scalar kind (``SCALAR`` only).
        elem:  Shape of the pointee / element (``POINTER`` and ``SEQUENCE``).
    """

    shape: Shape
    tp: Any
    kind: Optional[Kind] = None
    elem: Optional['TypeShape'] = None

    @property
    def type_name(self) -> str:
        if self.kind is not None:
            return str(self.kind)
        return getattr(self.tp, "__name__", None) or repr(self.tp)


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    key: str
    tagged: bool
    shape: TypeShape
    settable: bool


_ANY_SHAPE = TypeShape(Shape.OTHER, Any)


def is_record_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def is_record(obj: Any) -> bool:
    """True for dataclass *instances* (not dataclass classes)."""
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def resolve_shape(hint: Any) -> TypeShape:
    """Classify *hint* (see module docstring)."""
    metadata: Tuple[Any, ...] = ()
    if get_origin(hint) is Annotated:
        hint, *rest = get_args(hint)
        metadata = tuple(rest)

    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = get_args(hint)
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1 and len(non_none) < len(args):
            return TypeShape(Shape.POINTER, hint, elem=resolve_shape(non_none[0]))
        return TypeShape(Shape.OTHER, hint)

    if origin is list or hint is list or hint is List:
        args = get_args(hint)
        elem = resolve_shape(args[0]) if args else _ANY_SHAPE
        return TypeShape(Shape.SEQUENCE, hint, elem=elem)

    if is_record_type(hint):
        return TypeShape(Shape.RECORD, hint)

    kind = kind_of(hint, metadata)
    if kind is not None:
        return TypeShape(Shape.SCALAR, hint, kind=kind)
    return TypeShape(Shape.OTHER, hint)


class SchemaRegistry:
    """Cache of ``FieldDescriptor`` tuples keyed by ``(record type, tag)``."""

    def __init__(self) -> None:
        self._cache: dict[tuple[type, str], Tuple[FieldDescriptor, ...]] = {}

    def describe(self, cls: type, tag: str) -> Tuple[FieldDescriptor, ...]:
        key = (cls, tag)
        cached = self._cache.get(key)
        if cached is None:
            cached = self._cache[key] = _build_descriptors(cls, tag)
        return cached

    def clear(self) -> None:
        self._cache.clear()


def _build_descriptors(cls: type, tag: str) -> Tuple[FieldDescriptor, ...]:
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as exc:
        raise SchemaError(f"cannot resolve type hints of {cls.__name__}: {exc}") from exc

    frozen = cls.__dataclass_params__.frozen
    out: List[FieldDescriptor] = []
    for f in dataclasses.fields(cls):
        annotated_key = f.metadata.get(tag) if f.metadata else None
        settable = not frozen and not f.name.startswith("_")
        if not settable:
            logger.debug("%s.%s is not settable, it will be skipped", cls.__name__, f.name)
        out.append(FieldDescriptor(
            name=f.name,
            key=annotated_key or f.name,
            tagged=bool(annotated_key),
            shape=resolve_shape(hints.get(f.name, f.type)),
            settable=settable,
        ))
    return tuple(out)
