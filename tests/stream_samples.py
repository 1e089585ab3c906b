from __future__ import annotations

from lasersell.contracts.stream import (
    BalanceUpdate,
    ClosePosition,
    Configure,
    Error,
    ExitSignalWithTx,
    HelloOk,
    Limits,
    MarketContext,
    MeteoraDammV2Context,
    MeteoraDbcContext,
    Ping,
    PnlUpdate,
    Pong,
    PositionClosed,
    PositionOpened,
    PumpFunContext,
    PumpSwapContext,
    RaydiumCpmmContext,
    RaydiumLaunchpadContext,
    RequestExitSignal,
    StrategyConfig,
    UpdateStrategy,
)
from lasersell.contracts.stream.types import I64_MIN, U64_MAX

A1 = "11111111111111111111111111111111"
A2 = "22222222222222222222222222222222"
A3 = "33333333333333333333333333333333"
A4 = "44444444444444444444444444444444"
A5 = "55555555555555555555555555555555"

STRATEGY = StrategyConfig(target_profit_pct=5.0, stop_loss_pct=1.5, deadline_timeout_sec=45)


def all_market_contexts() -> list[MarketContext]:
    return [
        MarketContext.of(PumpFunContext()),
        MarketContext.of(PumpSwapContext(pool=A1, global_config=A2)),
        MarketContext.of(PumpSwapContext(pool=A1)),
        MarketContext.of(MeteoraDbcContext(pool=A1, config=A2, quote_mint=A3)),
        MarketContext.of(MeteoraDammV2Context(pool=A1)),
        MarketContext.of(
            RaydiumLaunchpadContext(pool=A1, config=A2, platform=A3, quote_mint=A4, user_quote_account=A5)
        ),
        MarketContext.of(RaydiumCpmmContext(pool=A1, config=A2, quote_mint=A3, user_quote_account=A4)),
    ]


def all_client_messages() -> list:
    return [
        Ping(client_time_ms=1_700_000_000_000),
        Configure(wallet_pubkeys=[A1, A2], strategy=STRATEGY),
        Configure(wallet_pubkeys=[A1], strategy=STRATEGY),
        UpdateStrategy(strategy=StrategyConfig(target_profit_pct=12.5, stop_loss_pct=-3.0, deadline_timeout_sec=0)),
        ClosePosition(),
        ClosePosition(position_id=7),
        ClosePosition(token_account=A3),
        RequestExitSignal(),
        RequestExitSignal(position_id=123, slippage_bps=42),
        RequestExitSignal(token_account=A3, slippage_bps=65535),
    ]


def all_server_messages() -> list:
    msgs = [
        HelloOk(
            session_id=42,
            server_time_ms=1_700_000_000_000,
            limits=Limits(
                hi_capacity=256,
                pnl_flush_ms=100,
                max_positions_per_session=256,
                max_wallets_per_session=8,
                max_positions_per_wallet=64,
                max_sessions_per_api_key=1,
            ),
        ),
        Pong(server_time_ms=U64_MAX),
        Error(code="invalid_request", message="unknown position"),
        PnlUpdate(position_id=5, profit_units=-12, proceeds_units=34, server_time_ms=999),
        PnlUpdate(position_id=U64_MAX, profit_units=I64_MIN, proceeds_units=U64_MAX, server_time_ms=0),
        BalanceUpdate(wallet_pubkey=A1, mint=A2, tokens=1000, slot=250_000_000),
        BalanceUpdate(wallet_pubkey=A1, mint=A2, token_account=A3, token_program=A4, tokens=0, slot=1),
        PositionOpened(
            position_id=1,
            wallet_pubkey="W",
            mint="M",
            token_account="T",
            tokens=100,
            entry_quote_units=50,
            slot=999,
        ),
        PositionClosed(position_id=1, wallet_pubkey=A1, mint=A2, reason="tp", slot=1000),
        PositionClosed(position_id=1, wallet_pubkey=A1, mint=A2, token_account=A3, reason="manual", slot=1001),
    ]
    for i, ctx in enumerate(all_market_contexts()):
        msgs.append(
            PositionOpened(
                position_id=10 + i,
                wallet_pubkey=A5,
                mint=A1,
                token_account=A2,
                token_program=A3,
                tokens=10**18,
                entry_quote_units=10**9,
                market_context=ctx,
                slot=300_000_000 + i,
            )
        )
        msgs.append(
            ExitSignalWithTx(
                session_id=7,
                position_id=10 + i,
                wallet_pubkey=A5,
                mint=A1,
                token_account=A2 if i % 2 else None,
                position_tokens=10,
                profit_units=5 - i,
                reason="tp",
                triggered_at_ms=123,
                market_context=ctx,
                unsigned_tx_b64="dGVzdA==",
            )
        )
    return msgs
