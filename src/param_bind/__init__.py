from .casters import BUILTIN_CASTERS, Coercer
from .codecs import (
    DecodeError,
    JsonCodec,
    PayloadCodec,
    PayloadSyntaxError,
    TypeMismatchError,
    UnsupportedTypeError,
    XmlCodec,
)
from .core import BindContext, BindHandler, BindMatcher, BindNode, BindRegistry, Binder
from .errors import (
    BindError,
    CodecError,
    CoercionError,
    CustomDecodeError,
    DispatchError,
    EmptyBodyError,
    NotAStructError,
    SchemaCycleError,
    SchemaError,
    UnsupportedKindError,
    UnsupportedMediaTypeError,
)
from .factory import build_default_binder
from .hooks import ParamUnmarshaler, try_custom_decode
from .kinds import (
    Float32,
    Float64,
    Int,
    Int8,
    Int16,
    Int32,
    Int64,
    Kind,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from .matchers import AlwaysMatcher, MediaTypeMatcher, MethodMatcher, MissingBodyMatcher
from .populator import StructPopulator, ValueSource
from .request import Headers, Request, RequestContext
from .schema import FieldDescriptor, SchemaRegistry, Shape, TypeShape, resolve_shape

__all__ = [
    # entry points
    "build_default_binder",
    "Binder",
    "StructPopulator",
    "Coercer",
    "BUILTIN_CASTERS",
    # dispatch
    "BindContext",
    "BindHandler",
    "BindMatcher",
    "BindNode",
    "BindRegistry",
    "AlwaysMatcher",
    "MediaTypeMatcher",
    "MethodMatcher",
    "MissingBodyMatcher",
    # request
    "Request",
    "RequestContext",
    "Headers",
    "ValueSource",
    # schema
    "FieldDescriptor",
    "SchemaRegistry",
    "Shape",
    "TypeShape",
    "resolve_shape",
    # hooks
    "ParamUnmarshaler",
    "try_custom_decode",
    # kinds
    "Kind",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Float32",
    "Float64",
    # codecs
    "PayloadCodec",
    "JsonCodec",
    "XmlCodec",
    "DecodeError",
    "TypeMismatchError",
    "PayloadSyntaxError",
    "UnsupportedTypeError",
    # errors
    "BindError",
    "EmptyBodyError",
    "UnsupportedMediaTypeError",
    "CodecError",
    "CoercionError",
    "UnsupportedKindError",
    "CustomDecodeError",
    "SchemaError",
    "NotAStructError",
    "SchemaCycleError",
    "DispatchError",
]
