"""
Encode/decode for stream protocol messages.

All functions here are pure: no module state is read or written per call, so any number
of threads may encode/decode concurrently. Failures are reported as `DecodeError` /
`EncodeError`; nothing is logged.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError
from pydantic_core import from_json

from lasersell.contracts.stream.base import WireMessage
from lasersell.contracts.stream.client import CLIENT_MESSAGE_TYPES, CLIENT_TAG_ALIASES, ClientMessage
from lasersell.contracts.stream.market import STRICT_MARKET_CONTEXT
from lasersell.contracts.stream.server import SERVER_MESSAGE_TYPES, SERVER_TAG_ALIASES, ServerMessage

TAG_FIELD = "type"


class ProtocolError(ValueError):
    """
    Base for codec failures. `errors` is a stable, JSON-serializable list.
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors: List[Dict[str, Any]] = list(errors or [])

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        first = self.errors[0]
        suffix = f" (+{len(self.errors) - 1} more)" if len(self.errors) > 1 else ""
        return f"{self.message}: {first.get('path') or '<root>'}: {first.get('message')}{suffix}"


class DecodeError(ProtocolError):
    """
    Input is not a well-typed message: bad JSON, wrong top-level shape, missing/unknown
    tag, missing required field, or a field of the wrong shape.
    """


class EncodeError(ProtocolError):
    """
    A message value cannot be represented on the wire (e.g. a non-finite float).
    """


def _errors_from_validation(e: ValidationError) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for err in e.errors(include_url=False):
        out.append(
            {
                "path": ".".join(str(p) for p in err.get("loc", ())),
                "message": str(err.get("msg", "")),
                "type": str(err.get("type", "")),
            }
        )
    return out


def parse_wire_text(raw: str | bytes | bytearray) -> Any:
    """
    UTF-8 JSON text (str or bytes) -> parsed JSON value.

    Integers stay exact (u64 included). `NaN`/`Infinity` literals and nesting past the
    parser's recursion limit are rejected.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError("invalid_utf8", [{"path": "", "message": str(e), "type": "utf8"}]) from e
    if not isinstance(raw, str):
        raise DecodeError(
            "invalid_input",
            [{"path": "", "message": f"expected str or bytes, got {type(raw).__name__}", "type": "input_type"}],
        )
    try:
        return from_json(raw, allow_inf_nan=False)
    except ValueError as e:
        raise DecodeError("invalid_json", [{"path": "", "message": str(e), "type": "json"}]) from e


def _resolve_tag(
    tag: Any,
    types: Mapping[str, Type[WireMessage]],
    aliases: Mapping[str, str],
    *,
    direction: str,
) -> tuple[str, Type[WireMessage]]:
    if not isinstance(tag, str):
        kind = "missing" if tag is None else type(tag).__name__
        raise DecodeError(
            "missing_tag" if tag is None else "invalid_tag",
            [{"path": TAG_FIELD, "message": f"{direction} message tag must be a string, got {kind}", "type": "tag"}],
        )
    model = types.get(tag)
    if model is not None:
        return tag, model
    current = aliases.get(tag)
    if current is not None and current in types:
        return current, types[current]
    raise DecodeError(
        "unknown_tag",
        [{"path": TAG_FIELD, "message": f"unknown {direction} message type: {tag!r}", "type": "unknown_tag"}],
    )


def resolve_client_tag(tag: Any) -> Type[WireMessage]:
    """
    Map a client `type` value (current name or legacy alias) to its message model.
    """

    return _resolve_tag(tag, CLIENT_MESSAGE_TYPES, CLIENT_TAG_ALIASES, direction="client")[1]


def resolve_server_tag(tag: Any) -> Type[WireMessage]:
    return _resolve_tag(tag, SERVER_MESSAGE_TYPES, SERVER_TAG_ALIASES, direction="server")[1]


def _from_wire(
    obj: Any,
    types: Mapping[str, Type[WireMessage]],
    aliases: Mapping[str, str],
    *,
    direction: str,
    strict_market_context: bool,
) -> WireMessage:
    if not isinstance(obj, Mapping):
        raise DecodeError(
            "not_an_object",
            [{"path": "", "message": f"expected JSON object, got {type(obj).__name__}", "type": "not_an_object"}],
        )
    tag, model = _resolve_tag(obj.get(TAG_FIELD), types, aliases, direction=direction)
    data = dict(obj)
    data[TAG_FIELD] = tag
    try:
        return model.model_validate(data, context={STRICT_MARKET_CONTEXT: strict_market_context})
    except ValidationError as e:
        raise DecodeError(f"invalid_{tag}", _errors_from_validation(e)) from e


def client_message_from_wire(obj: Any, *, strict_market_context: bool = False) -> ClientMessage:
    """
    Validate an already-parsed JSON value as a client message.
    """

    return _from_wire(  # type: ignore[return-value]
        obj,
        CLIENT_MESSAGE_TYPES,
        CLIENT_TAG_ALIASES,
        direction="client",
        strict_market_context=strict_market_context,
    )


def server_message_from_wire(obj: Any, *, strict_market_context: bool = False) -> ServerMessage:
    """
    Validate an already-parsed JSON value as a server message.
    """

    return _from_wire(  # type: ignore[return-value]
        obj,
        SERVER_MESSAGE_TYPES,
        SERVER_TAG_ALIASES,
        direction="server",
        strict_market_context=strict_market_context,
    )


def decode_client_message(raw: str | bytes, *, strict_market_context: bool = False) -> ClientMessage:
    """
    Decode UTF-8 JSON text into a client message.

    Raises DecodeError on any failure; there is no partial decode.
    """

    return client_message_from_wire(parse_wire_text(raw), strict_market_context=strict_market_context)


def decode_server_message(raw: str | bytes, *, strict_market_context: bool = False) -> ServerMessage:
    """
    Decode UTF-8 JSON text into a server message.

    Raises DecodeError on any failure; there is no partial decode.
    """

    return server_message_from_wire(parse_wire_text(raw), strict_market_context=strict_market_context)


def to_wire(msg: BaseModel) -> Dict[str, Any]:
    """
    JSON-ready mapping (plain dict/list/str/int/float) for a message or nested record.

    Absent optionals are omitted (never null); tags use their current names.
    """

    try:
        return msg.model_dump(mode="json", by_alias=True, exclude_none=True)
    except ValueError as e:
        raise EncodeError("unserializable", [{"path": "", "message": str(e), "type": "serialization"}]) from e


def encode_message(msg: BaseModel) -> str:
    """
    Encode a message as compact UTF-8 JSON text (one object, no framing).
    """

    try:
        return msg.model_dump_json(by_alias=True, exclude_none=True)
    except ValueError as e:
        raise EncodeError("unserializable", [{"path": "", "message": str(e), "type": "serialization"}]) from e


def encode_message_bytes(msg: BaseModel) -> bytes:
    return encode_message(msg).encode("utf-8")
