from __future__ import annotations

from pydantic import Field

from lasersell.contracts.stream.base import WireFragment
from lasersell.contracts.stream.types import U32, U64, Percent


class StrategyConfig(WireFragment):
    """
    Client-side exit thresholds. Values pass through unvalidated (no sign/range checks).
    """

    target_profit_pct: Percent = Field(..., description="Take-profit threshold, in percent.")
    stop_loss_pct: Percent = Field(..., description="Stop-loss threshold, in percent.")
    deadline_timeout_sec: U64 = Field(..., description="Max seconds before an exit is forced.")


class Limits(WireFragment):
    """
    Server-enforced per-session and per-key caps, sent in `hello_ok`.

    The first three fields predate the others; the later ones default to 0 so payloads
    from older servers still decode.
    """

    hi_capacity: U32 = Field(..., description="Max concurrent positions tracked at high priority.")
    pnl_flush_ms: U64 = Field(..., description="PnL push cadence in milliseconds.")
    max_positions_per_session: U32 = Field(..., description="Max positions allowed in one session.")

    max_wallets_per_session: U32 = Field(default=0, description="Max wallets accepted in one session.")
    max_positions_per_wallet: U32 = Field(default=0, description="Max tracked positions per wallet.")
    max_sessions_per_api_key: U32 = Field(default=0, description="Max simultaneous sessions per API key.")
