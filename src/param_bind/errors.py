"""Error taxonomy for bind calls.

Every failure raised by the engine derives from ``BindError``.  The
``client_error`` flag tells the surrounding request layer how to treat it:

* ``True``  – the input data was bad (malformed payload, unparsable value,
              unsupported media type, …).  Map to a 4xx-class response.
* ``False`` – the destination schema itself is unusable (not a dataclass,
              cyclic nesting) or no handler claims the request.  A
              programming error by the caller.

Binding stops at the first error; the destination may be partially written.
"""

from __future__ import annotations

from typing import Any, Tuple


class BindError(Exception):
    """Base class for all binding failures."""

    client_error: bool = True


# ─────────────────────────────────────────────────────────────────────────────
# Request-level errors
# ─────────────────────────────────────────────────────────────────────────────


class EmptyBodyError(BindError):
    """A body-bearing request arrived without a body stream."""

    def __init__(self) -> None:
        super().__init__("request body can't be empty")


class UnsupportedMediaTypeError(BindError):
    """The declared content type matches no payload or form kind."""

    def __init__(self, media_type: str | None) -> None:
        self.media_type = media_type
        super().__init__(f"unsupported media type: {media_type or '<none>'}")


class CodecError(BindError):
    """A structured-payload codec failed; *detail* is the reclassified message."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


# ─────────────────────────────────────────────────────────────────────────────
# Field-level errors
# ─────────────────────────────────────────────────────────────────────────────


class CoercionError(BindError):
    """A string could not be converted to the declared kind."""

    def __init__(self, kind: Any, value: str, reason: str = "invalid syntax") -> None:
        self.kind = kind
        self.value = value
        self.reason = reason
        super().__init__(f"cannot coerce {value!r} to {kind}: {reason}")


class UnsupportedKindError(BindError):
    """The declared field type has no coercion rule."""

    def __init__(self, kind: Any) -> None:
        self.kind = kind
        super().__init__(f"unknown type: {kind}")


class CustomDecodeError(BindError):
    """A type's own ``unmarshal_param`` reported failure."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


# ─────────────────────────────────────────────────────────────────────────────
# Schema (programming) errors
# ─────────────────────────────────────────────────────────────────────────────


class SchemaError(BindError):
    """The destination schema cannot be bound at all."""

    client_error = False


class NotAStructError(SchemaError):
    def __init__(self, obj: Any) -> None:
        self.type = type(obj)
        super().__init__(f"binding element must be a dataclass instance, got {type(obj).__name__}")


class SchemaCycleError(SchemaError):
    """Nested-record flattening re-entered a type or went too deep."""

    def __init__(self, path: Tuple[type, ...], reason: str) -> None:
        self.path = path
        names = " -> ".join(t.__name__ for t in path)
        super().__init__(f"{reason}: {names}")


class DispatchError(SchemaError):
    """No registered handler claimed the request; the binder is misconfigured."""

    def __init__(self, method: str | None) -> None:
        self.method = method
        super().__init__(f"no bind handler for {method} request")
