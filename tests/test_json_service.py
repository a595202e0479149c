import json
from dataclasses import dataclass
from typing import Dict, List

import pytest
from flask import request
from pydantic import BaseModel, ConfigDict

from toolkit.config import ToolsSettings
from toolkit.errors import (
    EmptyBody,
    JSONSyntaxError,
    MissingField,
    MultipleValues,
    PayloadTooLarge,
    TypeMismatch,
    UnknownField,
)
from toolkit.schemas import JSONResponse
from toolkit.services.json_service import decode_strict, error_json, read_json, write_json
from toolkit.tools import Tools


class Foo(BaseModel):
    foo: str = ""


class Required(BaseModel):
    foo: str


class Inner(BaseModel):
    count: int


class Outer(BaseModel):
    inner: Inner
    tags: List[str] = []


@dataclass
class Point:
    x: int
    y: int


class Closed(BaseModel):
    model_config = ConfigDict(extra="forbid")

    foo: str = ""


def _body(app, raw):
    return app.test_request_context("/", method="POST", data=raw, content_type="application/json")


@pytest.mark.parametrize(
    "name,body,max_size,allow_unknown,error",
    [
        ("good json", '{"foo": "bar"}', 1024, False, None),
        ("badly formatted json", '{"foo": }', 1024, False, JSONSyntaxError),
        ("incorrect type", '{"foo": 1}', 1024, False, TypeMismatch),
        ("two json values", '{"foo": "bar"}{"name": "haha"}', 1024, False, MultipleValues),
        ("empty body", "", 1024, False, EmptyBody),
        ("syntax error in json", '{"foo": "bar"', 1024, False, JSONSyntaxError),
        ("unknown field in json", '{"fooo": "bar"}', 1024, False, UnknownField),
        ("allow unknown field in json", '{"fooo": "bar"}', 1024, True, None),
        ("missing field name", '{"jack": "bar"}', 1024, False, UnknownField),
        ("file too large", '{"foo": "bar"}', 2, False, PayloadTooLarge),
        ("not json", "hello world", 1024, False, JSONSyntaxError),
    ],
)
def test_read_json(app, name, body, max_size, allow_unknown, error):
    tools = Tools(ToolsSettings(max_json_size=max_size, allow_unknown_fields=allow_unknown))
    with _body(app, body):
        if error is None:
            decoded = tools.read_json(request, Foo)
            assert isinstance(decoded, Foo), name
        else:
            with pytest.raises(error):
                tools.read_json(request, Foo)


def test_read_json_decodes_value(app):
    with _body(app, '{"foo":"bar"}'):
        assert read_json(request, Foo).foo == "bar"


def test_zero_max_size_uses_default_ceiling(app):
    body = json.dumps({"foo": "x" * 5000})
    with _body(app, body):
        assert read_json(request, Foo, max_size=0).foo == "x" * 5000


def test_payload_too_large_reports_limit(app):
    with _body(app, '{"foo": "bar"}'):
        with pytest.raises(PayloadTooLarge) as exc:
            read_json(request, Foo, max_size=5)
    assert exc.value.limit == 5
    assert "5 bytes" in str(exc.value)


def test_syntax_error_offset():
    with pytest.raises(JSONSyntaxError) as exc:
        decode_strict(b'{"foo": }', Foo)
    assert exc.value.offset == 8
    assert not exc.value.truncated
    assert "at character 8" in str(exc.value)


def test_truncated_body_is_syntax_error():
    with pytest.raises(JSONSyntaxError) as exc:
        decode_strict(b'{"foo": "bar"', Foo)
    assert exc.value.truncated


def test_invalid_utf8_is_syntax_error():
    with pytest.raises(JSONSyntaxError) as exc:
        decode_strict(b'{"foo": "\xff"}', Foo)
    assert exc.value.offset == 9


def test_non_standard_constants_rejected():
    with pytest.raises(JSONSyntaxError):
        decode_strict(b'{"foo": NaN}', Dict[str, float])


def test_whitespace_only_body_is_empty():
    with pytest.raises(EmptyBody):
        decode_strict(b" \n\t ", Foo)


def test_surrounding_whitespace_is_allowed():
    assert decode_strict(b'  {"foo": "bar"}\n  ', Foo).foo == "bar"


def test_trailing_garbage_is_multiple_values():
    with pytest.raises(MultipleValues):
        decode_strict(b'{"foo": "bar"} xyz', Foo)


def test_type_mismatch_names_field():
    with pytest.raises(TypeMismatch) as exc:
        decode_strict(b'{"foo": 1}', Foo)
    assert exc.value.field == "foo"


def test_nested_type_mismatch_names_path():
    with pytest.raises(TypeMismatch) as exc:
        decode_strict(b'{"inner": {"count": "three"}}', Outer)
    assert exc.value.field == "inner.count"


def test_top_level_type_mismatch_has_no_field():
    with pytest.raises(TypeMismatch) as exc:
        decode_strict(b'["foo"]', Foo)
    assert exc.value.field is None


def test_unknown_field_names_key():
    with pytest.raises(UnknownField) as exc:
        decode_strict(b'{"fooo": "bar"}', Foo)
    assert exc.value.field == "fooo"


def test_first_violation_in_document_order():
    with pytest.raises(TypeMismatch):
        decode_strict(b'{"foo": 1, "extra": true}', Foo)
    with pytest.raises(UnknownField):
        decode_strict(b'{"extra": true, "foo": 1}', Foo)


def test_missing_required_field():
    with pytest.raises(MissingField) as exc:
        decode_strict(b"{}", Required)
    assert exc.value.field == "foo"


def test_nested_unknown_field_rejected():
    with pytest.raises(UnknownField) as exc:
        decode_strict(b'{"inner": {"count": 1, "bogus": 2}}', Outer)
    assert exc.value.field == "inner.bogus"


def test_unknown_field_inside_list_items_rejected():
    with pytest.raises(UnknownField) as exc:
        decode_strict(b'[{"count": 1}, {"count": 2, "bogus": true}]', List[Inner])
    assert exc.value.field == "1.bogus"


def test_nested_unknown_field_allowed_when_configured():
    value = decode_strict(b'{"inner": {"count": 1, "bogus": 2}}', Outer, allow_unknown_fields=True)
    assert value.inner.count == 1


def test_dataclass_schema_forbids_unknown_fields():
    with pytest.raises(UnknownField) as exc:
        decode_strict(b'{"x": 1, "y": 2, "z": 3}', Point)
    assert exc.value.field == "z"
    assert decode_strict(b'{"x": 1, "y": 2, "z": 3}', Point, allow_unknown_fields=True) == Point(1, 2)


def test_decoded_value_is_callers_class():
    value = decode_strict(b'{"inner": {"count": 3}}', Outer)
    assert type(value) is Outer
    assert type(value.inner) is Inner
    assert type(decode_strict(b'{"x": 1, "y": 2}', Point)) is Point


def test_schema_that_forbids_extras_always_forbids():
    with pytest.raises(UnknownField):
        decode_strict(b'{"other": 1}', Closed, allow_unknown_fields=True)


def test_validation_error_precedes_trailing_data():
    with pytest.raises(TypeMismatch):
        decode_strict(b'{"foo": 1}{"foo": "x"}', Foo)


def test_non_model_schema():
    assert decode_strict(b'{"a": 1, "b": 2}', Dict[str, int]) == {"a": 1, "b": 2}
    with pytest.raises(TypeMismatch):
        decode_strict(b'{"a": "1"}', Dict[str, int])


def test_write_json(app):
    with app.test_request_context("/"):
        resp = write_json(JSONResponse(message="foo"), 200, {"FOO": "BAR"})
    assert resp.status_code == 200
    assert resp.headers["FOO"] == "BAR"
    assert resp.mimetype == "application/json"
    assert resp.get_json() == {"error": False, "message": "foo"}


def test_write_json_plain_payload(app):
    with app.test_request_context("/"):
        resp = write_json({"items": [1, 2]}, 202)
    assert resp.status_code == 202
    assert resp.get_json() == {"items": [1, 2]}


def test_error_json(app):
    with app.test_request_context("/"):
        resp = error_json(RuntimeError("some error happened"), 503)
    assert resp.status_code == 503
    payload = resp.get_json()
    assert payload["error"] is True
    assert payload["message"] == "some error happened"
    assert "data" not in payload
