"""
Commands sent from client to server.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Dict, Literal, Mapping, Optional, Tuple, Type, Union

from pydantic import Field, field_validator

from lasersell.contracts.stream.base import WireMessage
from lasersell.contracts.stream.session import StrategyConfig
from lasersell.contracts.stream.types import U16, U64, Pubkey, WireStr


class Ping(WireMessage):
    """
    Keepalive ping from client.
    """

    message_type: Literal["ping"] = Field(default="ping", alias="type")

    client_time_ms: U64 = Field(..., description="Client timestamp in Unix milliseconds.")


class Configure(WireMessage):
    """
    Initial session configuration for wallets and strategy.

    Older clients send a single `wallet_pubkey` (string or list); it decodes into
    `wallet_pubkeys` and is never emitted.
    """

    FIELD_ALIASES: ClassVar[Mapping[str, Tuple[str, ...]]] = {"wallet_pubkeys": ("wallet_pubkey",)}

    message_type: Literal["configure"] = Field(default="configure", alias="type")

    wallet_pubkeys: Tuple[Pubkey, ...] = Field(..., description="Wallet pubkeys to monitor.")
    strategy: StrategyConfig = Field(..., description="Strategy thresholds for the session.")

    @field_validator("wallet_pubkeys", mode="before")
    @classmethod
    def _one_or_many(cls, v: Any) -> Any:
        if isinstance(v, str):
            return (v,)
        return v


class UpdateStrategy(WireMessage):
    """
    Replace the strategy thresholds of an active session.
    """

    message_type: Literal["update_strategy"] = Field(default="update_strategy", alias="type")

    strategy: StrategyConfig


class ClosePosition(WireMessage):
    """
    Request that a tracked position be closed.

    Either identifier may be given; `token_account` is the lookup key when the id is unknown.
    """

    message_type: Literal["close_position"] = Field(default="close_position", alias="type")

    position_id: Optional[U64] = Field(default=None)
    token_account: Optional[WireStr] = Field(default=None)


class RequestExitSignal(WireMessage):
    """
    Request an immediate exit signal and unsigned transaction.

    Also decodes from the legacy `sell_now` message type.
    """

    message_type: Literal["request_exit_signal"] = Field(default="request_exit_signal", alias="type")

    position_id: Optional[U64] = Field(default=None)
    token_account: Optional[WireStr] = Field(default=None)
    slippage_bps: Optional[U16] = Field(default=None, description="Optional slippage tolerance, in basis points.")


ClientMessage = Annotated[
    Union[Ping, Configure, UpdateStrategy, ClosePosition, RequestExitSignal],
    Field(discriminator="message_type"),
]

# Current tag -> message model. Consulted before the legacy aliases below.
CLIENT_MESSAGE_TYPES: Dict[str, Type[WireMessage]] = {
    "ping": Ping,
    "configure": Configure,
    "update_strategy": UpdateStrategy,
    "close_position": ClosePosition,
    "request_exit_signal": RequestExitSignal,
}

# Legacy tag -> current tag. Decode only.
CLIENT_TAG_ALIASES: Dict[str, str] = {
    "sell_now": "request_exit_signal",
}
