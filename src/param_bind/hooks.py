"""Custom string-decode capability.

A type opts in by implementing ``unmarshal_param``::

    class Csv:
        def __init__(self) -> None:
            self.items: list[str] = []

        def unmarshal_param(self, param: str) -> None:
            self.items = param.split(",")

The check is structural (``ParamUnmarshaler`` is a runtime-checkable
protocol), done per field at bind time.  A capable type must be constructible
with no arguments.  Failure is signalled by raising; anything other than a
``BindError`` is wrapped in ``CustomDecodeError``.
"""

from __future__ import annotations

from typing import Any, Protocol, Tuple, get_origin, runtime_checkable

from .errors import BindError, CustomDecodeError, SchemaError
from .schema import Shape, TypeShape


@runtime_checkable
class ParamUnmarshaler(Protocol):
    def unmarshal_param(self, param: str) -> None: ...


def is_unmarshaler(tp: Any) -> bool:
    # Parametrised generics (``list[int]``) pass ``isinstance(tp, type)`` on
    # some interpreters but are rejected by ``issubclass``.
    return isinstance(tp, type) and get_origin(tp) is None and issubclass(tp, ParamUnmarshaler)


def allocate(tp: type) -> Any:
    """Instantiate *tp* with no arguments (its zero value)."""
    try:
        return tp()
    except TypeError as exc:
        raise SchemaError(f"cannot allocate {tp.__name__}: {exc}") from exc


def _decode(target: ParamUnmarshaler, value: str) -> None:
    try:
        target.unmarshal_param(value)
    except BindError:
        raise
    except Exception as exc:
        raise CustomDecodeError(str(exc) or type(exc).__name__) from exc


def try_custom_decode(shape: TypeShape, current: Any, value: str) -> Tuple[bool, Any]:
    """Decode *value* through the field type's own capability, if it has one.

    Returns ``(False, None)`` when the type does not opt in, otherwise
    ``(True, new_value)`` where *new_value* must be written to the field.

    * Pointer (``Optional[T]``): *current* is reused when not ``None``, else
      a new ``T()`` is allocated.  The result is never ``None``.
    * Non-pointer: a fresh ``T()`` is decoded.
    """
    if shape.shape is Shape.POINTER:
        pointee = shape.elem
        if pointee is None or not is_unmarshaler(pointee.tp):
            return False, None
        target = current if current is not None else allocate(pointee.tp)
        _decode(target, value)
        return True, target

    if not is_unmarshaler(shape.tp):
        return False, None
    target = allocate(shape.tp)
    _decode(target, value)
    return True, target
