from __future__ import annotations

import pytest

from lasersell.contracts.stream import StrategyConfig


@pytest.fixture
def strategy() -> StrategyConfig:
    return StrategyConfig(target_profit_pct=5.0, stop_loss_pct=1.5, deadline_timeout_sec=45)


@pytest.fixture
def strategy_wire() -> dict:
    return {"target_profit_pct": 5.0, "stop_loss_pct": 1.5, "deadline_timeout_sec": 45}
