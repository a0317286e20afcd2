"""Codec interface and the error family codecs report through."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Optional


class DecodeError(Exception):
    """Generic codec failure; surfaced with its raw message."""


class TypeMismatchError(DecodeError):
    """A payload value does not fit the destination field type.

    Attributes:
        type:   Name of the expected (destination) type.
        value:  Description of the payload value (``"string"``, ``"number 3.5"``…).
        offset: Byte offset just past the offending value.
    """

    def __init__(self, type: str, value: str, offset: int) -> None:
        self.type = type
        self.value = value
        self.offset = offset
        super().__init__(f"cannot unmarshal {value} into value of type {type}")


class PayloadSyntaxError(DecodeError):
    """The payload is not well-formed.  JSON reports *offset*, XML *line*."""

    def __init__(self, msg: str, *, offset: Optional[int] = None, line: Optional[int] = None) -> None:
        self.msg = msg
        self.offset = offset
        self.line = line
        super().__init__(msg)


class UnsupportedTypeError(DecodeError):
    """The destination contains a field type the codec cannot produce."""

    def __init__(self, type: str) -> None:
        self.type = type
        super().__init__(f"unsupported type: {type}")


class PayloadCodec(ABC):
    """Decode a stream into *destination* in place."""

    @abstractmethod
    def decode(self, stream: BinaryIO, destination: Any) -> None: ...


