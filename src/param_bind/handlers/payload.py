"""Structured-payload handlers.

Each handler hands the body stream to its codec and reclassifies codec
errors into ``CodecError`` with a fixed message layout::

    JSON  TypeMismatchError     unmarshal type error: expected=<type>, got=<value>, offset=<n>
          PayloadSyntaxError    syntax error: offset=<n>, error=<msg>
    XML   UnsupportedTypeError  unsupported type error: type=<type>, error=<msg>
          PayloadSyntaxError    syntax error: line=<n>, error=<msg>
    any   other DecodeError     <raw message>
"""

from __future__ import annotations

from ..codecs import DecodeError, PayloadCodec, PayloadSyntaxError, TypeMismatchError, UnsupportedTypeError
from ..core import BindContext, BindHandler
from ..errors import CodecError


class JsonPayloadHandler(BindHandler):
    def __init__(self, codec: PayloadCodec) -> None:
        self.codec = codec

    def execute(self, ctx: BindContext) -> None:
        try:
            self.codec.decode(ctx.request.body, ctx.dest)
        except TypeMismatchError as exc:
            raise CodecError(
                f"unmarshal type error: expected={exc.type}, got={exc.value}, offset={exc.offset}"
            ) from exc
        except PayloadSyntaxError as exc:
            raise CodecError(f"syntax error: offset={exc.offset}, error={exc.msg}") from exc
        except DecodeError as exc:
            raise CodecError(str(exc)) from exc


class XmlPayloadHandler(BindHandler):
    def __init__(self, codec: PayloadCodec) -> None:
        self.codec = codec

    def execute(self, ctx: BindContext) -> None:
        try:
            self.codec.decode(ctx.request.body, ctx.dest)
        except UnsupportedTypeError as exc:
            raise CodecError(f"unsupported type error: type={exc.type}, error={exc}") from exc
        except PayloadSyntaxError as exc:
            raise CodecError(f"syntax error: line={exc.line}, error={exc.msg}") from exc
        except DecodeError as exc:
            raise CodecError(str(exc)) from exc
