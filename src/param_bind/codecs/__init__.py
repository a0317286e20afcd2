"""Structured-payload codecs.

A codec decodes a byte stream into a destination object and reports
failures through the ``DecodeError`` family.  The binder never looks at
codec internals: it only reclassifies these errors into ``CodecError``
messages (see ``handlers.payload``).

base       – ``PayloadCodec`` interface and the error family
json_codec – ``JsonCodec`` (offset-aware type and syntax errors)
xml_codec  – ``XmlCodec`` (line-aware syntax errors)
"""

from .base import DecodeError, PayloadCodec, PayloadSyntaxError, TypeMismatchError, UnsupportedTypeError
from .json_codec import JsonCodec
from .xml_codec import XmlCodec

__all__ = [
    "DecodeError",
    "TypeMismatchError",
    "PayloadSyntaxError",
    "UnsupportedTypeError",
    "PayloadCodec",
    "JsonCodec",
    "XmlCodec",
]
