"""Handlers sub-package — concrete BindHandler implementations, grouped by
the kind of input they bind from.

params  – query-string and form-body key/value binding
payload – JSON / XML codec delegation and error reclassification
reject  – empty body and unsupported media type
"""

from .params import FormParamsHandler, QueryParamsHandler
from .payload import JsonPayloadHandler, XmlPayloadHandler
from .reject import EmptyBodyHandler, UnsupportedMediaTypeHandler

__all__ = [
    "QueryParamsHandler",
    "FormParamsHandler",
    "JsonPayloadHandler",
    "XmlPayloadHandler",
    "EmptyBodyHandler",
    "UnsupportedMediaTypeHandler",
]
