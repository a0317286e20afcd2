"""Tests for build_default_binder factory."""

from dataclasses import dataclass, field

import pytest
from param_bind import (
    CodecError,
    EmptyBodyError,
    Kind,
    PayloadCodec,
    UnsupportedMediaTypeError,
    build_default_binder,
)


@dataclass
class Person:
    Name: str = ""
    Age: int = 0


@dataclass
class Search:
    q: str = field(default="", metadata={"query": "term"})
    exact: bool = False


@dataclass
class Bag:
    extra: dict = field(default_factory=dict)


class StubCodec(PayloadCodec):
    def __init__(self):
        self.calls = []

    def decode(self, stream, destination):
        self.calls.append(stream.read())
        destination.Name = "stub"


class TestDispatch:
    """Test which source each request kind is bound from."""

    @pytest.mark.parametrize("method", ["GET", "HEAD", "get"])
    def test_query_methods_read_query_only(self, binder, make_request, method):
        """Query methods ignore the body and its content type."""
        dest = Person()
        request = make_request(
            method=method,
            content_type="application/json",
            body=b'{"Name": "body"}',
            query={"Name": ["query"], "Age": ["7"]},
        )

        binder.bind(dest, request)

        assert dest == Person(Name="query", Age=7)

    def test_missing_body_checked_before_content_type(self, binder, make_request):
        """A body-bearing method without a body fails even for JSON."""
        with pytest.raises(EmptyBodyError, match="request body can't be empty") as exc_info:
            binder.bind(Person(), make_request(content_type="application/json"))

        assert exc_info.value.client_error is True

    def test_json(self, binder, make_request):
        dest = Person()
        binder.bind(dest, make_request(content_type="application/json", body=b'{"Name": "Ann", "Age": 30}'))

        assert dest == Person(Name="Ann", Age=30)

    def test_json_with_parameters(self, binder, make_request):
        """Content-type parameters are ignored."""
        dest = Person()
        request = make_request(content_type="application/json; charset=UTF-8", body=b'{"Name": "Ann"}')

        binder.bind(dest, request)

        assert dest.Name == "Ann"

    def test_xml(self, binder, make_request):
        dest = Person()
        binder.bind(dest, make_request(
            method="PUT",
            content_type="application/xml",
            body=b"<person><Name>Ann</Name><Age> 30 </Age></person>",
        ))

        assert dest == Person(Name="Ann", Age=30)

    @pytest.mark.parametrize("content_type", [
        "application/x-www-form-urlencoded",
        "multipart/form-data; boundary=----x",
    ])
    def test_form(self, binder, make_request, content_type):
        """Form bodies bind from the already-parsed form params."""
        dest = Person()
        request = make_request(
            content_type=content_type,
            body=b"Name=raw",
            query={"Name": ["query"]},
            form={"Name": ["Ann"], "Age": ["30"]},
        )

        binder.bind(dest, request)

        assert dest == Person(Name="Ann", Age=30)

    def test_unsupported_media_type(self, binder, make_request):
        with pytest.raises(UnsupportedMediaTypeError) as exc_info:
            binder.bind(Person(), make_request(content_type="text/plain", body=b"hi"))

        assert exc_info.value.media_type == "text/plain"

    def test_missing_content_type(self, binder, make_request):
        with pytest.raises(UnsupportedMediaTypeError) as exc_info:
            binder.bind(Person(), make_request(body=b"{}"))

        assert exc_info.value.media_type is None


class TestCodecErrors:
    """Test how codec failures are reported."""

    def test_json_type_mismatch(self, binder, make_request):
        dest = Person()
        with pytest.raises(CodecError) as exc_info:
            binder.bind(dest, make_request(content_type="application/json", body=b'{"Age": "abc"}'))

        assert str(exc_info.value) == "unmarshal type error: expected=int, got=string, offset=13"
        assert exc_info.value.client_error is True

    def test_json_syntax(self, binder, make_request):
        with pytest.raises(CodecError) as exc_info:
            binder.bind(Person(), make_request(content_type="application/json", body=b'{"Name": "Ann",}'))

        assert exc_info.value.detail == (
            "syntax error: offset=15, error=invalid character '}' looking for beginning of object key string"
        )

    def test_json_empty_stream(self, binder, make_request):
        with pytest.raises(CodecError, match="^EOF$"):
            binder.bind(Person(), make_request(content_type="application/json", body=b""))

    def test_json_too_deep(self, binder, make_request):
        with pytest.raises(CodecError) as exc_info:
            binder.bind(Person(), make_request(content_type="application/json", body=b"[" * 5000))

        assert exc_info.value.detail == "syntax error: offset=128, error=exceeded max depth"
        assert exc_info.value.client_error is True

    def test_xml_syntax(self, binder, make_request):
        with pytest.raises(CodecError) as exc_info:
            binder.bind(Person(), make_request(
                content_type="application/xml",
                body=b"<person>\n<Name>Ann</Age>\n</person>",
            ))

        assert exc_info.value.detail.startswith("syntax error: line=2, error=mismatched tag")

    def test_xml_unsupported_type(self, binder, make_request):
        with pytest.raises(CodecError) as exc_info:
            binder.bind(Bag(), make_request(content_type="application/xml", body=b"<bag><extra>1</extra></bag>"))

        assert exc_info.value.detail == "unsupported type error: type=dict, error=unsupported type: dict"

    def test_xml_other_failure_is_raw(self, binder, make_request):
        with pytest.raises(CodecError) as exc_info:
            binder.bind(Person(), make_request(content_type="application/xml", body=b"<p><Age>x</Age></p>"))

        assert exc_info.value.detail == "cannot coerce 'x' to int: invalid syntax"


class TestConfiguration:
    """Test factory keyword arguments."""

    def test_custom_query_methods(self, make_request):
        binder = build_default_binder(query_methods=["GET", "DELETE"])
        dest = Person()

        binder.bind(dest, make_request(method="DELETE", query={"Name": ["Ann"]}))

        assert dest.Name == "Ann"
        with pytest.raises(EmptyBodyError):
            binder.bind(Person(), make_request(method="HEAD"))

    def test_custom_tag(self, make_request):
        binder = build_default_binder(tag="query")
        dest = Search()

        binder.bind(dest, make_request(method="GET", query={"term": ["shoes"], "q": ["ignored"]}))

        assert dest.q == "shoes"

    def test_custom_caster(self, make_request):
        binder = build_default_binder(casters={Kind.BOOL: lambda s: s == "yes"})
        dest = Search()

        binder.bind(dest, make_request(method="GET", query={"exact": ["yes"]}))

        assert dest.exact is True

    def test_injected_codec(self, make_request):
        codec = StubCodec()
        binder = build_default_binder(json_codec=codec)
        dest = Person()

        binder.bind(dest, make_request(content_type="application/json", body=b"raw"))

        assert codec.calls == [b"raw"]
        assert dest.Name == "stub"

    def test_registry_order(self):
        names = [node.name for node in build_default_binder().registry.nodes()]

        assert names == ["query", "empty-body", "json", "xml", "form", "unsupported"]
