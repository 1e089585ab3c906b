"""
Per-market context attached to position lifecycle events.

Wire shape (kept for compatibility with deployed peers):

    {"market_type": "pump_swap", "pumpswap": {"pool": "...", "global_config": "..."}}

i.e. a `market_type` discriminator plus one optional sibling key per market. In memory
the context is a proper sum type (`market_type` + a single `payload`), so the
"zero or several siblings" states the wire allows are never observable after decode.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple, Type, Union

from pydantic import (
    Field,
    SerializerFunctionWrapHandler,
    ValidationError,
    ValidationInfo,
    model_serializer,
    model_validator,
)
from pydantic_core import PydanticCustomError

from lasersell.contracts.stream.base import WireFragment
from lasersell.contracts.stream.types import MarketType, Pubkey


class PumpFunContext(WireFragment):
    """
    pump.fun bonding curve. Carries no accounts; acts as an explicit marker.
    """


class PumpSwapContext(WireFragment):
    pool: Pubkey = Field(..., description="PumpSwap pool account.")
    global_config: Optional[Pubkey] = Field(default=None, description="Optional PumpSwap global config account.")


class MeteoraDbcContext(WireFragment):
    pool: Pubkey = Field(..., description="Meteora Dynamic Bonding Curve pool account.")
    config: Pubkey = Field(..., description="Meteora DBC config account.")
    quote_mint: Pubkey = Field(..., description="Quote mint used by the pool.")


class MeteoraDammV2Context(WireFragment):
    pool: Pubkey = Field(..., description="Meteora DAMM v2 pool account.")


class RaydiumLaunchpadContext(WireFragment):
    pool: Pubkey = Field(..., description="Raydium Launchpad pool account.")
    config: Pubkey = Field(..., description="Raydium Launchpad config account.")
    platform: Pubkey = Field(..., description="Raydium Launchpad platform account.")
    quote_mint: Pubkey = Field(..., description="Quote mint used by the pool.")
    user_quote_account: Pubkey = Field(..., description="User quote token account for the position.")


class RaydiumCpmmContext(WireFragment):
    pool: Pubkey = Field(..., description="Raydium CPMM pool account.")
    config: Pubkey = Field(..., description="Raydium CPMM config account.")
    quote_mint: Pubkey = Field(..., description="Quote mint used by the pool.")
    user_quote_account: Pubkey = Field(..., description="User quote token account for the position.")


MarketPayload = Union[
    PumpFunContext,
    PumpSwapContext,
    MeteoraDbcContext,
    MeteoraDammV2Context,
    RaydiumLaunchpadContext,
    RaydiumCpmmContext,
]

# market_type -> (sibling key on the wire, payload model).
# Sibling keys are frozen by deployed peers; note `pumpfun`/`pumpswap` have no underscore.
MARKET_CONTEXT_FIELDS: Dict[MarketType, Tuple[str, Type[WireFragment]]] = {
    MarketType.pump_fun: ("pumpfun", PumpFunContext),
    MarketType.pump_swap: ("pumpswap", PumpSwapContext),
    MarketType.meteora_dbc: ("meteora_dbc", MeteoraDbcContext),
    MarketType.meteora_damm_v2: ("meteora_damm_v2", MeteoraDammV2Context),
    MarketType.raydium_launchpad: ("raydium_launchpad", RaydiumLaunchpadContext),
    MarketType.raydium_cpmm: ("raydium_cpmm", RaydiumCpmmContext),
}

# Validation context flag: reject foreign siblings and missing payloads.
STRICT_MARKET_CONTEXT = "strict_market_context"


def _market_type_or_none(value: Any) -> Optional[MarketType]:
    try:
        return MarketType(value)
    except (TypeError, ValueError):
        return None


def _validate_payload(market_type: MarketType, value: Any) -> WireFragment:
    key, model = MARKET_CONTEXT_FIELDS[market_type]
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as e:
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in e.errors(include_url=False)
        )
        raise PydanticCustomError(
            "market_context_payload",
            "invalid {key} payload: {detail}",
            {"key": key, "detail": detail},
        ) from e


class MarketContext(WireFragment):
    """
    Market-specific context carried with position events.

    `payload` always matches `market_type`; use `MarketContext.of(payload)` to derive the
    discriminator from the payload.

    Decoding collapses the six-sibling wire shape:
    - every present sibling must have a valid shape;
    - the sibling named for `market_type` becomes the payload;
    - `pump_fun` without a `pumpfun` sibling collapses to the empty marker;
    - any other market type without its sibling is rejected.
    With `STRICT_MARKET_CONTEXT` set in the validation context, foreign siblings and a
    missing `pumpfun` marker are rejected too.
    """

    market_type: MarketType = Field(..., description="Market discriminator for the payload.")
    payload: MarketPayload = Field(..., description="Context for the market named by market_type.")

    @classmethod
    def of(cls, payload: WireFragment) -> "MarketContext":
        for market_type, (_, model) in MARKET_CONTEXT_FIELDS.items():
            if type(payload) is model:
                return cls(market_type=market_type, payload=payload)
        raise TypeError(f"not a market context payload: {type(payload).__name__}")

    @property
    def wire_key(self) -> str:
        return MARKET_CONTEXT_FIELDS[self.market_type][0]

    @model_validator(mode="before")
    @classmethod
    def _collapse_wire_shape(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, Mapping):
            return data
        market_type = _market_type_or_none(data.get("market_type"))
        if market_type is None:
            # Let field validation report the bad/missing discriminator.
            return data

        # In-memory construction only; a wire `payload` key is an unknown field and ignored.
        if isinstance(data.get("payload"), WireFragment):
            return {"market_type": market_type, "payload": _validate_payload(market_type, data["payload"])}

        strict = bool((info.context or {}).get(STRICT_MARKET_CONTEXT))
        present: Dict[MarketType, WireFragment] = {}
        for candidate, (key, _) in MARKET_CONTEXT_FIELDS.items():
            value = data.get(key)
            if value is None:
                continue
            present[candidate] = _validate_payload(candidate, value)

        if strict:
            foreign = sorted(MARKET_CONTEXT_FIELDS[m][0] for m in present if m is not market_type)
            if foreign:
                raise PydanticCustomError(
                    "market_context_extra_payload",
                    "market_type={market_type} carries foreign context fields: {keys}",
                    {"market_type": market_type.value, "keys": ", ".join(foreign)},
                )

        payload = present.get(market_type)
        if payload is None:
            if market_type is MarketType.pump_fun and not strict:
                payload = PumpFunContext()
            else:
                raise PydanticCustomError(
                    "market_context_missing_payload",
                    "market_type={market_type} requires a {key} context field",
                    {"market_type": market_type.value, "key": MARKET_CONTEXT_FIELDS[market_type][0]},
                )
        return {"market_type": market_type, "payload": payload}

    @model_validator(mode="after")
    def _payload_matches_market_type(self) -> "MarketContext":
        expected = MARKET_CONTEXT_FIELDS[self.market_type][1]
        if type(self.payload) is not expected:
            raise ValueError(
                f"payload {type(self.payload).__name__} does not match market_type={self.market_type.value}"
            )
        return self

    @model_serializer(mode="wrap")
    def _emit_wire_shape(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        data = handler(self)
        data[self.wire_key] = data.pop("payload")
        return data

    @classmethod
    def __get_pydantic_json_schema__(cls, core_schema: Any, handler: Any) -> Dict[str, Any]:
        # Describe the wire shape (discriminator + optional siblings), not the in-memory sum type.
        properties: Dict[str, Any] = {
            "market_type": {"type": "string", "enum": [m.value for m in MarketType]},
        }
        for key, model in MARKET_CONTEXT_FIELDS.values():
            properties[key] = model.model_json_schema()
        return {
            "title": cls.__name__,
            "type": "object",
            "description": "Exactly one context field should be present and match market_type.",
            "properties": properties,
            "required": ["market_type"],
        }
