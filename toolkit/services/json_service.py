"""JSON request decoding and JSON responses.

``read_json`` reads a size-bounded request body and decodes exactly one JSON
value into a pydantic schema. Checks run in a single pass and the first
violation is raised:

    PayloadTooLarge -> EmptyBody -> JSONSyntaxError
        -> TypeMismatch / UnknownField / MissingField -> MultipleValues

``write_json`` and ``error_json`` build Flask responses around the
``JSONResponse`` envelope.
"""

from __future__ import annotations

import json
import re
from functools import lru_cache
from typing import Any, Dict, List, Mapping, NoReturn, Optional, Type, TypeVar

from flask import Response, current_app
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import SchemaValidator
from werkzeug.wrappers import Request

from toolkit.config import DEFAULT_MAX_JSON_SIZE
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

T = TypeVar("T")

# JSON insignificant whitespace (RFC 8259)
_WS = re.compile(r"[ \t\n\r]*")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


_decoder = json.JSONDecoder(parse_constant=_reject_constant)


# core schema nodes that validate keyed objects and honour ``extra_behavior``
_KEYED_SCHEMAS = frozenset({"model-fields", "typed-dict", "dataclass-args"})


def _forbid_extra(node: Any) -> Any:
    """Copy of a core schema with every keyed object set to reject unknown keys."""
    if isinstance(node, dict):
        out = {key: _forbid_extra(value) for key, value in node.items()}
        if out.get("type") in _KEYED_SCHEMAS:
            out["extra_behavior"] = "forbid"
        return out
    if isinstance(node, list):
        return [_forbid_extra(value) for value in node]
    if isinstance(node, tuple):
        return tuple(_forbid_extra(value) for value in node)
    return node


@lru_cache(maxsize=256)
def _validator(schema: Any, forbid_extra: bool) -> Any:
    adapter = TypeAdapter(schema)
    if not forbid_extra:
        return adapter.validator
    # same classes as the caller's schema, only the extra handling differs
    return SchemaValidator(_forbid_extra(adapter.core_schema))


def _read_body(request: Request, limit: int) -> bytes:
    if request.content_length is not None and request.content_length > limit:
        raise PayloadTooLarge(limit)
    # read at most one byte past the ceiling; short reads are possible
    chunks: List[bytes] = []
    total = 0
    while total <= limit:
        chunk = request.stream.read(limit + 1 - total)
        if not chunk:
            break
        chunks.append(chunk)
        total += len(chunk)
    if total > limit:
        raise PayloadTooLarge(limit)
    return b"".join(chunks)


def _field_name(loc: tuple) -> Optional[str]:
    return ".".join(str(p) for p in loc) if loc else None


def _first_violation(errors: List[Dict[str, Any]], document: Any) -> Dict[str, Any]:
    # order violations by where their key sits in the body; keyless ones last
    keys = list(document) if isinstance(document, dict) else []

    def position(err: Dict[str, Any]) -> int:
        loc = err.get("loc") or ()
        if err.get("type") != "missing" and loc and loc[0] in keys:
            return keys.index(loc[0])
        return len(keys)

    return min(errors, key=position)


def _raise_validation(exc: ValidationError, document: Any) -> NoReturn:
    err = _first_violation(exc.errors(), document)
    kind = err.get("type")
    field = _field_name(tuple(err.get("loc") or ()))
    # dataclasses report forbidden extras as unexpected keyword arguments
    if kind in ("extra_forbidden", "unexpected_keyword_argument"):
        raise UnknownField(field or "") from exc
    if kind == "missing":
        raise MissingField(field or "") from exc
    if kind == "json_invalid":
        raise JSONSyntaxError() from exc
    raise TypeMismatch(field) from exc


def decode_strict(body: bytes, schema: Any, allow_unknown_fields: bool = False) -> Any:
    """Decode exactly one JSON value from ``body`` into ``schema``."""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise JSONSyntaxError(offset=e.start) from e

    start = _WS.match(text, 0).end()
    if start == len(text):
        raise EmptyBody()

    try:
        document, end = _decoder.raw_decode(text, start)
    except json.JSONDecodeError as e:
        raise JSONSyntaxError(offset=e.pos, truncated=e.pos >= len(text)) from e
    except ValueError as e:
        raise JSONSyntaxError() from e

    segment = text[start:end]
    try:
        value = _validator(schema, not allow_unknown_fields).validate_json(segment, strict=True)
    except ValidationError as e:
        _raise_validation(e, document)

    if _WS.match(text, end).end() != len(text):
        raise MultipleValues()
    return value


def read_json(request: Request, schema: Type[T], max_size: int = 0, allow_unknown_fields: bool = False) -> T:
    """Read the request body (at most ``max_size`` bytes, 0 means 1 MiB) into ``schema``."""
    limit = max_size or DEFAULT_MAX_JSON_SIZE
    return decode_strict(_read_body(request, limit), schema, allow_unknown_fields)


def write_json(payload: Any, status: int = 200, headers: Optional[Mapping[str, str]] = None) -> Response:
    if isinstance(payload, JSONResponse):
        data = payload.to_payload()
    elif isinstance(payload, BaseModel):
        data = payload.model_dump(mode="json")
    else:
        data = payload
    resp = current_app.response_class(
        current_app.json.dumps(data),
        status=status,
        mimetype="application/json",
    )
    for key, value in (headers or {}).items():
        resp.headers[key] = value
    return resp


def error_json(err: BaseException, status: int = 400) -> Response:
    return write_json(JSONResponse(error=True, message=str(err)), status=status)
