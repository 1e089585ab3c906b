"""
LaserSell stream wire contracts.

Immutable (frozen) pydantic models for every client command and server event, plus the
per-market context attached to position events.
"""

from __future__ import annotations

from lasersell.contracts.stream.client import (
    ClientMessage,
    ClosePosition,
    Configure,
    Ping,
    RequestExitSignal,
    UpdateStrategy,
)
from lasersell.contracts.stream.market import (
    MarketContext,
    MeteoraDammV2Context,
    MeteoraDbcContext,
    PumpFunContext,
    PumpSwapContext,
    RaydiumCpmmContext,
    RaydiumLaunchpadContext,
)
from lasersell.contracts.stream.server import (
    BalanceUpdate,
    Error,
    ExitSignalWithTx,
    HelloOk,
    PnlUpdate,
    Pong,
    PositionClosed,
    PositionOpened,
    ServerMessage,
)
from lasersell.contracts.stream.session import Limits, StrategyConfig
from lasersell.contracts.stream.types import PROTOCOL_VERSION, MarketType

__all__ = [
    "BalanceUpdate",
    "ClientMessage",
    "ClosePosition",
    "Configure",
    "Error",
    "ExitSignalWithTx",
    "HelloOk",
    "Limits",
    "MarketContext",
    "MarketType",
    "MeteoraDammV2Context",
    "MeteoraDbcContext",
    "PROTOCOL_VERSION",
    "Ping",
    "PnlUpdate",
    "Pong",
    "PositionClosed",
    "PositionOpened",
    "PumpFunContext",
    "PumpSwapContext",
    "RaydiumCpmmContext",
    "RaydiumLaunchpadContext",
    "RequestExitSignal",
    "ServerMessage",
    "StrategyConfig",
    "UpdateStrategy",
]
