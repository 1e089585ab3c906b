"""
JSON text codec for the stream protocol.

See: lasersell.contracts.stream
"""

from .codec import (  # noqa: F401
    DecodeError,
    EncodeError,
    ProtocolError,
    client_message_from_wire,
    decode_client_message,
    decode_server_message,
    encode_message,
    encode_message_bytes,
    parse_wire_text,
    resolve_client_tag,
    resolve_server_tag,
    server_message_from_wire,
    to_wire,
)
