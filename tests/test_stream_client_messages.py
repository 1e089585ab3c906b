from __future__ import annotations

import json

import pytest

from lasersell.common.schemas.codec import (
    DecodeError,
    decode_client_message,
    encode_message,
    resolve_client_tag,
    to_wire,
)
from lasersell.contracts.stream import (
    ClosePosition,
    Configure,
    Ping,
    RequestExitSignal,
    UpdateStrategy,
)
from tests.stream_samples import A1, A2, all_client_messages


@pytest.mark.parametrize("msg", all_client_messages(), ids=lambda m: m.message_type)
def test_client_round_trip(msg) -> None:
    assert decode_client_message(encode_message(msg)) == msg


def test_to_text_matches_codec() -> None:
    msg = Ping(client_time_ms=5)
    assert msg.to_text() == encode_message(msg) == '{"type":"ping","client_time_ms":5}'


def test_configure_round_trip_two_wallets(strategy) -> None:
    msg = Configure(wallet_pubkeys=[A1, A2], strategy=strategy)
    wire = to_wire(msg)
    assert wire == {
        "type": "configure",
        "wallet_pubkeys": [A1, A2],
        "strategy": {"target_profit_pct": 5.0, "stop_loss_pct": 1.5, "deadline_timeout_sec": 45},
    }
    assert decode_client_message(json.dumps(wire)) == msg


def test_configure_legacy_wallet_pubkey_string(strategy_wire) -> None:
    legacy = decode_client_message(json.dumps({"type": "configure", "wallet_pubkey": A1, "strategy": strategy_wire}))
    current = decode_client_message(json.dumps({"type": "configure", "wallet_pubkeys": [A1], "strategy": strategy_wire}))
    assert legacy == current
    assert legacy.wallet_pubkeys == (A1,)

    encoded = json.loads(encode_message(legacy))
    assert encoded["wallet_pubkeys"] == [A1]
    assert "wallet_pubkey" not in encoded


def test_configure_legacy_wallet_pubkey_list(strategy_wire) -> None:
    msg = decode_client_message(json.dumps({"type": "configure", "wallet_pubkey": [A1, A2], "strategy": strategy_wire}))
    assert msg.wallet_pubkeys == (A1, A2)


def test_configure_current_field_accepts_single_string(strategy_wire) -> None:
    msg = decode_client_message(json.dumps({"type": "configure", "wallet_pubkeys": A1, "strategy": strategy_wire}))
    assert msg.wallet_pubkeys == (A1,)
    assert json.loads(msg.to_text())["wallet_pubkeys"] == [A1]


def test_configure_current_field_wins_over_alias(strategy_wire) -> None:
    msg = decode_client_message(
        json.dumps({"type": "configure", "wallet_pubkey": A2, "wallet_pubkeys": [A1], "strategy": strategy_wire})
    )
    assert msg.wallet_pubkeys == (A1,)


def test_configure_construct_with_single_string(strategy) -> None:
    assert Configure(wallet_pubkeys=A1, strategy=strategy).wallet_pubkeys == (A1,)


@pytest.mark.parametrize(
    "wallets",
    [None, 5, [A1, 7], [None]],
)
def test_configure_rejects_bad_wallets(wallets, strategy_wire) -> None:
    payload = {"type": "configure", "strategy": strategy_wire}
    if wallets is not None:
        payload["wallet_pubkeys"] = wallets
    with pytest.raises(DecodeError):
        decode_client_message(json.dumps(payload))


def test_configure_requires_strategy() -> None:
    with pytest.raises(DecodeError) as e:
        decode_client_message(json.dumps({"type": "configure", "wallet_pubkey": A1}))
    assert any(err["path"] == "strategy" for err in e.value.errors)


def test_sell_now_alias_decodes_to_request_exit_signal() -> None:
    msg = decode_client_message('{"type":"sell_now","position_id":123,"slippage_bps":42}')
    assert msg == RequestExitSignal(position_id=123, token_account=None, slippage_bps=42)

    encoded = json.loads(encode_message(msg))
    assert encoded == {"type": "request_exit_signal", "position_id": 123, "slippage_bps": 42}


def test_resolve_client_tag_uses_current_then_alias() -> None:
    assert resolve_client_tag("request_exit_signal") is RequestExitSignal
    assert resolve_client_tag("sell_now") is RequestExitSignal
    assert resolve_client_tag("ping") is Ping
    with pytest.raises(DecodeError):
        resolve_client_tag("hello_ok")


def test_close_position_omits_absent_fields() -> None:
    msg = ClosePosition(position_id=None, token_account=None)
    assert encode_message(msg) == '{"type":"close_position"}'
    assert decode_client_message('{"type":"close_position"}') == msg


def test_close_position_explicit_nulls_are_absent() -> None:
    msg = decode_client_message('{"type":"close_position","position_id":null,"token_account":null}')
    assert msg == ClosePosition()


def test_slippage_bps_is_u16() -> None:
    assert decode_client_message('{"type":"request_exit_signal","slippage_bps":65535}').slippage_bps == 65535
    with pytest.raises(DecodeError):
        decode_client_message('{"type":"request_exit_signal","slippage_bps":65536}')
    with pytest.raises(DecodeError):
        decode_client_message('{"type":"request_exit_signal","slippage_bps":-1}')


def test_update_strategy_accepts_integer_percentages() -> None:
    msg = decode_client_message(
        '{"type":"update_strategy","strategy":{"target_profit_pct":5,"stop_loss_pct":2,"deadline_timeout_sec":30}}'
    )
    assert isinstance(msg, UpdateStrategy)
    assert msg.strategy.target_profit_pct == 5.0
    assert msg.strategy.stop_loss_pct == 2.0


def test_update_strategy_rejects_string_percentages() -> None:
    with pytest.raises(DecodeError):
        decode_client_message(
            '{"type":"update_strategy","strategy":{"target_profit_pct":"5","stop_loss_pct":2,"deadline_timeout_sec":30}}'
        )


def test_field_order_does_not_matter(strategy_wire) -> None:
    a = decode_client_message(json.dumps({"strategy": strategy_wire, "wallet_pubkeys": [A1], "type": "configure"}))
    b = decode_client_message(json.dumps({"type": "configure", "wallet_pubkeys": [A1], "strategy": strategy_wire}))
    assert a == b


def test_server_tag_is_not_a_client_message() -> None:
    with pytest.raises(DecodeError):
        decode_client_message('{"type":"pong","server_time_ms":1}')


def test_decoded_values_are_immutable(strategy_wire) -> None:
    msg = decode_client_message(json.dumps({"type": "configure", "wallet_pubkeys": [A1], "strategy": strategy_wire}))
    with pytest.raises(Exception):
        msg.wallet_pubkeys = (A2,)  # type: ignore[misc]
    assert isinstance(msg.wallet_pubkeys, tuple)
