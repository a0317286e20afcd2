"""Built-in string casters and the coercion engine.

This module converts a single string into a typed value for one destination
slot.  The syntax accepted for each kind is strict: no surrounding
whitespace, no digit separators, base 10 for integers.

Exports
-------
BUILTIN_CASTERS
    Dictionary mapping ``Kind`` to a caster ``str → value``.  A caster raises
    ``CoercionError`` on bad input.  Casters never see the empty string:
    ``Coercer`` short-circuits it to the kind's zero value.

Coercer
    Applies casters to type shapes, honouring custom decode hooks, pointer
    allocation and the empty-string default.

Custom casters can be registered by passing a casters dict to
``build_default_binder(casters=...)``.
"""

from __future__ import annotations

import math
import struct
from typing import Any, Callable, Mapping

import regex

from .errors import CoercionError, UnsupportedKindError
from .hooks import try_custom_decode
from .kinds import FLOAT_KINDS, Kind, SIGNED_KINDS, UNSIGNED_KINDS, ZERO_VALUES, int_bounds
from .schema import Shape, TypeShape

# ─────────────────────────────────────────────────────────────────────────────
# Token grammars
# ─────────────────────────────────────────────────────────────────────────────

_SIGNED_RE = regex.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = regex.compile(r"[0-9]+")

# Digits in the widest integer kind (uint64).
_MAX_INT_DIGITS = 20

_DECIMAL_FLOAT_RE = regex.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX_FLOAT_RE = regex.compile(r"[+-]?0[xX](?:[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+")
_SPECIAL_FLOAT_RE = regex.compile(r"(?i)[+-]?inf(?:inity)?|nan")

TRUE_TOKENS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_TOKENS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


# ─────────────────────────────────────────────────────────────────────────────
# Built-in casters
# ─────────────────────────────────────────────────────────────────────────────


def _make_int_caster(kind: Kind) -> Callable[[str], int]:
    pattern = _SIGNED_RE if kind in SIGNED_KINDS else _UNSIGNED_RE
    low, high = int_bounds(kind)

    def cast(value: str) -> int:
        if not pattern.fullmatch(value):
            raise CoercionError(kind, value)
        if len(value.lstrip("+-").lstrip("0")) > _MAX_INT_DIGITS:
            raise CoercionError(kind, value, "value out of range")
        number = int(value)
        if not low <= number <= high:
            raise CoercionError(kind, value, "value out of range")
        return number

    return cast


def _make_float_caster(kind: Kind) -> Callable[[str], float]:
    def cast(value: str) -> float:
        if _DECIMAL_FLOAT_RE.fullmatch(value):
            number = float(value)
        elif _HEX_FLOAT_RE.fullmatch(value):
            try:
                number = float.fromhex(value)
            except OverflowError:
                raise CoercionError(kind, value, "value out of range") from None
        elif _SPECIAL_FLOAT_RE.fullmatch(value):
            return float(value)
        else:
            raise CoercionError(kind, value)

        if math.isinf(number):
            raise CoercionError(kind, value, "value out of range")
        if kind is Kind.FLOAT32:
            try:
                number = struct.unpack("f", struct.pack("f", number))[0]
            except OverflowError:
                raise CoercionError(kind, value, "value out of range") from None
        return number

    return cast


def _cast_bool(value: str) -> bool:
    if value in TRUE_TOKENS:
        return True
    if value in FALSE_TOKENS:
        return False
    raise CoercionError(Kind.BOOL, value)


BUILTIN_CASTERS: dict[Kind, Callable[[str], Any]] = {
    **{k: _make_int_caster(k) for k in SIGNED_KINDS},
    **{k: _make_int_caster(k) for k in UNSIGNED_KINDS},
    **{k: _make_float_caster(k) for k in FLOAT_KINDS},
    Kind.BOOL: _cast_bool,
    Kind.STRING: str,
}


# ─────────────────────────────────────────────────────────────────────────────
# Coercer
# ─────────────────────────────────────────────────────────────────────────────


class Coercer:
    """Turn strings into values for scalar, pointer and custom-hook shapes.

    ``coerce``        – kind-level: ``(Kind, str) → value``.
    ``coerce_value``  – shape-level: what ends up in one field or list slot.
    """

    def __init__(self, casters: Mapping[Kind, Callable[[str], Any]] | None = None) -> None:
        self._casters: dict[Kind, Callable[[str], Any]] = dict(BUILTIN_CASTERS)
        if casters:
            self._casters.update(casters)

    def coerce(self, kind: Kind, value: str) -> Any:
        """Convert *value* to *kind*.  ``""`` yields the kind's zero value."""
        caster = self._casters.get(kind)
        if caster is None:
            raise UnsupportedKindError(kind)
        if value == "":
            return ZERO_VALUES[kind]
        return caster(value)

    def coerce_value(self, shape: TypeShape, value: str, current: Any = None) -> Any:
        """Return the value to store in a slot of *shape* for input *value*.

        Order: custom hook → pointer to scalar → scalar.  A pointer always
        receives a freshly coerced pointee; a parse failure is raised, not
        defaulted.  Every other shape raises ``UnsupportedKindError``.
        """
        applied, decoded = try_custom_decode(shape, current, value)
        if applied:
            return decoded

        if shape.shape is Shape.POINTER and shape.elem is not None and shape.elem.shape is Shape.SCALAR:
            return self.coerce(shape.elem.kind, value)
        if shape.shape is Shape.SCALAR:
            return self.coerce(shape.kind, value)
        raise UnsupportedKindError(shape.type_name)
