"""Scalar kinds and their ``Annotated`` aliases.

Python has a single ``int`` and a single ``float``; width-specific kinds are
declared on dataclass fields through ``typing.Annotated``::

    @dataclass
    class Query:
        page: Uint16 = 0
        ratio: Float32 = 0.0
        name: str = ""

Plain ``int`` is the platform-width signed integer (64 bits), plain ``float``
is ``float64``.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Iterable, Optional


class Kind(str, Enum):
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOL = "bool"
    STRING = "string"

    def __str__(self) -> str:
        return self.value


SIGNED_KINDS = {
    Kind.INT: 64,
    Kind.INT8: 8,
    Kind.INT16: 16,
    Kind.INT32: 32,
    Kind.INT64: 64,
}

UNSIGNED_KINDS = {
    Kind.UINT: 64,
    Kind.UINT8: 8,
    Kind.UINT16: 16,
    Kind.UINT32: 32,
    Kind.UINT64: 64,
}

FLOAT_KINDS = {Kind.FLOAT32: 32, Kind.FLOAT64: 64}

#: Value written for an empty input string.
ZERO_VALUES: dict[Kind, Any] = {
    **{k: 0 for k in SIGNED_KINDS},
    **{k: 0 for k in UNSIGNED_KINDS},
    Kind.FLOAT32: 0.0,
    Kind.FLOAT64: 0.0,
    Kind.BOOL: False,
    Kind.STRING: "",
}

# Plain Python types → default kind.  ``bool`` must be looked up by identity,
# never through ``issubclass`` (bool is an int subclass).
_DEFAULT_KINDS: dict[type, Kind] = {
    bool: Kind.BOOL,
    int: Kind.INT,
    float: Kind.FLOAT64,
    str: Kind.STRING,
}

Int = Annotated[int, Kind.INT]
Int8 = Annotated[int, Kind.INT8]
Int16 = Annotated[int, Kind.INT16]
Int32 = Annotated[int, Kind.INT32]
Int64 = Annotated[int, Kind.INT64]
Uint = Annotated[int, Kind.UINT]
Uint8 = Annotated[int, Kind.UINT8]
Uint16 = Annotated[int, Kind.UINT16]
Uint32 = Annotated[int, Kind.UINT32]
Uint64 = Annotated[int, Kind.UINT64]
Float32 = Annotated[float, Kind.FLOAT32]
Float64 = Annotated[float, Kind.FLOAT64]


def int_bounds(kind: Kind) -> tuple[int, int]:
    """Inclusive ``(low, high)`` range of an integer kind."""
    if kind in SIGNED_KINDS:
        bits = SIGNED_KINDS[kind]
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    if kind in UNSIGNED_KINDS:
        return 0, (1 << UNSIGNED_KINDS[kind]) - 1
    raise ValueError(f"{kind} is not an integer kind")


def kind_of(tp: Any, metadata: Iterable[Any] = ()) -> Optional[Kind]:
    """Return the scalar kind of *tp*, honouring a ``Kind`` in *metadata*."""
    for item in metadata:
        if isinstance(item, Kind):
            return item
    if isinstance(tp, type):
        return _DEFAULT_KINDS.get(tp)
    return None
