from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from pydantic import TypeAdapter

from lasersell.contracts.stream.client import ClientMessage
from lasersell.contracts.stream.market import MarketContext
from lasersell.contracts.stream.server import ServerMessage
from lasersell.contracts.stream.session import Limits, StrategyConfig
from lasersell.contracts.stream.types import PROTOCOL_VERSION


def _repo_root() -> Path:
    # lasersell/contracts/stream/generate_json_schemas.py -> stream -> contracts -> lasersell -> repo root
    return Path(__file__).resolve().parents[3]


ADAPTERS: Dict[str, TypeAdapter[Any]] = {
    "client_message": TypeAdapter(ClientMessage),
    "server_message": TypeAdapter(ServerMessage),
    "market_context": TypeAdapter(MarketContext),
    "strategy_config": TypeAdapter(StrategyConfig),
    "limits": TypeAdapter(Limits),
}


def build_schemas() -> Dict[str, Dict[str, Any]]:
    out: Dict[str, Dict[str, Any]] = {}
    for name, adapter in ADAPTERS.items():
        schema = adapter.json_schema(mode="serialization", by_alias=True)
        schema.setdefault("$schema", "https://json-schema.org/draft/2020-12/schema")
        schema["$id"] = f"lasersell.stream/{name}.v{PROTOCOL_VERSION}.schema.json"
        schema["title"] = f"LaserSell stream - {name}"
        out[name] = schema
    return out


def write_schemas(out_dir: Path) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name, schema in build_schemas().items():
        path = out_dir / f"{name}.v{PROTOCOL_VERSION}.schema.json"
        path.write_text(json.dumps(schema, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        written.append(path)
    return written


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Write JSON Schema documents for the stream protocol.")
    parser.add_argument(
        "--out",
        default=str(_repo_root() / "schemas" / "stream"),
        help="Output directory (default: <repo>/schemas/stream).",
    )
    args = parser.parse_args(argv)
    for path in write_schemas(Path(args.out)):
        print(path)


if __name__ == "__main__":
    main()
