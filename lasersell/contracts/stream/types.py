from __future__ import annotations

import math
from enum import Enum
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer, Strict

# ---------------------------------------------------------------------------
# Versioning
# ---------------------------------------------------------------------------

# Wire protocol revision shared by stream clients and servers.
# - MAJOR: breaking changes (removed fields/variants, changed cardinality without alias)
# - MINOR: additive optional/defaulted fields, new decode-only aliases
# - PATCH: documentation / clarifications (no schema shape changes)
PROTOCOL_VERSION: str = "1.2.0"


# ---------------------------------------------------------------------------
# Integer domains
# ---------------------------------------------------------------------------

U16_MAX: int = 2**16 - 1
U32_MAX: int = 2**32 - 1
U64_MAX: int = 2**64 - 1
I64_MIN: int = -(2**63)
I64_MAX: int = 2**63 - 1

# Integers are strict: JSON floats, booleans and numeric strings are rejected.
# Python ints are unbounded, so the full u64 range survives the stdlib json module.
U16 = Annotated[int, Strict(), Field(ge=0, le=U16_MAX)]
U32 = Annotated[int, Strict(), Field(ge=0, le=U32_MAX)]
U64 = Annotated[int, Strict(), Field(ge=0, le=U64_MAX)]
I64 = Annotated[int, Strict(), Field(ge=I64_MIN, le=I64_MAX)]


def _number_only(v: Any) -> Any:
    # bool is an int subclass; neither it nor numeric strings are JSON numbers.
    if isinstance(v, (bool, str, bytes)):
        raise ValueError("expected a JSON number")
    return v


def _finite_only(v: float) -> float:
    if not math.isfinite(v):
        raise ValueError(f"non-finite float {v!r} has no JSON form")
    return v


# Percentages: JSON numbers (ints accepted), strings/booleans rejected. Values pass through
# unvalidated; non-finite values fail at serialization time.
Percent = Annotated[float, BeforeValidator(_number_only), PlainSerializer(_finite_only, return_type=float)]

# Base58 account addresses and other opaque text. No length/charset checks here.
WireStr = Annotated[str, Strict()]
Pubkey = Annotated[str, Strict(), Field(examples=["11111111111111111111111111111111"])]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class MarketType(str, Enum):
    pump_fun = "pump_fun"
    pump_swap = "pump_swap"
    meteora_dbc = "meteora_dbc"
    meteora_damm_v2 = "meteora_damm_v2"
    raydium_launchpad = "raydium_launchpad"
    raydium_cpmm = "raydium_cpmm"
