"""
Events and responses sent from server to client.
"""

from __future__ import annotations

import base64
import binascii
from typing import Annotated, Dict, Literal, Optional, Type, Union

from pydantic import Field

from lasersell.contracts.stream.base import WireMessage
from lasersell.contracts.stream.market import MarketContext
from lasersell.contracts.stream.session import Limits
from lasersell.contracts.stream.types import I64, U64, Pubkey, WireStr


class HelloOk(WireMessage):
    """
    Successful handshake response with the effective limits.
    """

    message_type: Literal["hello_ok"] = Field(default="hello_ok", alias="type")

    session_id: U64 = Field(..., description="Assigned session identifier.")
    server_time_ms: U64 = Field(..., description="Server timestamp in Unix milliseconds.")
    limits: Limits = Field(..., description="Effective limits for the session/API key.")


class Pong(WireMessage):
    message_type: Literal["pong"] = Field(default="pong", alias="type")

    server_time_ms: U64


class Error(WireMessage):
    """
    Error response for invalid requests or runtime failures.
    """

    message_type: Literal["error"] = Field(default="error", alias="type")

    code: WireStr = Field(..., description="Stable machine-readable error code.")
    message: WireStr = Field(..., description="Human-readable error message.")


class PnlUpdate(WireMessage):
    message_type: Literal["pnl_update"] = Field(default="pnl_update", alias="type")

    position_id: U64
    profit_units: I64 = Field(..., description="Profit/loss in quote units (may be negative).")
    proceeds_units: U64 = Field(..., description="Estimated proceeds in quote units.")
    server_time_ms: U64


class BalanceUpdate(WireMessage):
    """
    Token balance snapshot for a tracked wallet/mint.
    """

    message_type: Literal["balance_update"] = Field(default="balance_update", alias="type")

    wallet_pubkey: Pubkey
    mint: Pubkey
    token_account: Optional[Pubkey] = Field(default=None)
    token_program: Optional[Pubkey] = Field(default=None)
    tokens: U64 = Field(..., description="Token amount in native units.")
    slot: U64 = Field(..., description="Slot the snapshot came from.")


class PositionOpened(WireMessage):
    message_type: Literal["position_opened"] = Field(default="position_opened", alias="type")

    position_id: U64
    wallet_pubkey: Pubkey
    mint: Pubkey
    token_account: Pubkey
    token_program: Optional[Pubkey] = Field(default=None)
    tokens: U64 = Field(..., description="Position token amount in native units.")
    entry_quote_units: U64 = Field(..., description="Entry cost in quote units.")
    market_context: Optional[MarketContext] = Field(default=None)
    slot: U64 = Field(..., description="Slot when the position opened.")


class PositionClosed(WireMessage):
    message_type: Literal["position_closed"] = Field(default="position_closed", alias="type")

    position_id: U64
    wallet_pubkey: Pubkey
    mint: Pubkey
    token_account: Optional[Pubkey] = Field(default=None)
    reason: WireStr
    slot: U64


class ExitSignalWithTx(WireMessage):
    """
    Exit signal carrying an unsigned transaction for the client to sign and submit.

    `unsigned_tx_b64` is opaque to the protocol; `unsigned_tx_bytes()` is a convenience
    for consumers that need the raw transaction.
    """

    message_type: Literal["exit_signal_with_tx"] = Field(default="exit_signal_with_tx", alias="type")

    session_id: U64
    position_id: U64
    wallet_pubkey: Pubkey
    mint: Pubkey
    token_account: Optional[Pubkey] = Field(default=None)
    token_program: Optional[Pubkey] = Field(default=None)
    position_tokens: U64
    profit_units: I64
    reason: WireStr = Field(..., description="Trigger reason for the exit.")
    triggered_at_ms: U64
    market_context: Optional[MarketContext] = Field(default=None)
    unsigned_tx_b64: WireStr = Field(..., description="Standard base64 of the unsigned transaction.")

    def unsigned_tx_bytes(self) -> bytes:
        try:
            return base64.b64decode(self.unsigned_tx_b64, validate=True)
        except binascii.Error as e:
            raise ValueError(f"unsigned_tx_b64 is not valid base64: {e}") from e


ServerMessage = Annotated[
    Union[
        HelloOk,
        Pong,
        Error,
        PnlUpdate,
        BalanceUpdate,
        PositionOpened,
        PositionClosed,
        ExitSignalWithTx,
    ],
    Field(discriminator="message_type"),
]

SERVER_MESSAGE_TYPES: Dict[str, Type[WireMessage]] = {
    "hello_ok": HelloOk,
    "pong": Pong,
    "error": Error,
    "pnl_update": PnlUpdate,
    "balance_update": BalanceUpdate,
    "position_opened": PositionOpened,
    "position_closed": PositionClosed,
    "exit_signal_with_tx": ExitSignalWithTx,
}

SERVER_TAG_ALIASES: Dict[str, str] = {}
