#!/usr/bin/env python3
"""
Validate captured stream traffic against the protocol contract.

Inputs:
- One or more NDJSON capture files (plain text, or .gz)
- Or stdin (e.g., `tail -n 1000 session.ndjson | python -m lasersell.tools.check_capture`)

Each non-blank line must be one JSON message. Lines are decoded as client messages,
server messages, or either (`--direction auto`, the default).

Output:
- A JSON summary on stdout (counts per message type, first N failures).
- JSON log lines on stderr for every failure.
- Exit status 1 when any line failed to decode.
"""

from __future__ import annotations

import argparse
import gzip
import io
import json
import logging
import sys
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from lasersell.common.config import ToolConfig
from lasersell.common.logging import init_structured_logging, log_event
from lasersell.common.schemas.codec import (
    DecodeError,
    client_message_from_wire,
    parse_wire_text,
    resolve_server_tag,
    server_message_from_wire,
)
from lasersell.contracts.stream.base import WireMessage

logger = logging.getLogger(__name__)

DIRECTIONS = ("auto", "client", "server")


def _open_text_stream(path: Path) -> io.TextIOBase:
    if str(path).endswith(".gz"):
        return io.TextIOWrapper(gzip.open(path, "rb"), encoding="utf-8", errors="replace")
    return path.open("r", encoding="utf-8", errors="replace")


def _iter_input_lines(paths: Sequence[str]) -> Iterator[Tuple[str, int, str]]:
    """
    Yields (source_label, line_no, line).
    """
    if not paths:
        for i, ln in enumerate(sys.stdin, start=1):
            yield ("stdin", i, ln)
        return

    for p in paths:
        path = Path(p)
        with _open_text_stream(path) as f:
            for i, ln in enumerate(f, start=1):
                yield (str(path), i, ln)


def decode_any(raw: str | bytes, *, direction: str = "auto", strict_market_context: bool = False) -> WireMessage:
    """
    Decode one captured line. `auto` tries the server tag table, then the client one.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"unsupported direction: {direction!r}")
    obj = parse_wire_text(raw)
    if direction == "server":
        return server_message_from_wire(obj, strict_market_context=strict_market_context)
    if direction == "client":
        return client_message_from_wire(obj, strict_market_context=strict_market_context)

    if isinstance(obj, dict):
        try:
            resolve_server_tag(obj.get("type"))
        except DecodeError:
            return client_message_from_wire(obj, strict_market_context=strict_market_context)
    return server_message_from_wire(obj, strict_market_context=strict_market_context)


@dataclass
class CaptureReport:
    lines: int = 0
    decoded: int = 0
    failed: int = 0
    by_type: Counter = field(default_factory=Counter)
    failures: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": self.lines,
            "decoded": self.decoded,
            "failed": self.failed,
            "by_type": dict(sorted(self.by_type.items())),
            "failures": list(self.failures),
        }


def check_lines(
    lines: Iterable[Tuple[str, int, str]],
    *,
    direction: str = "auto",
    strict_market_context: bool = False,
    max_reported_failures: int = 50,
) -> CaptureReport:
    report = CaptureReport()
    for source, line_no, line in lines:
        text = line.strip()
        if not text:
            continue
        report.lines += 1
        try:
            msg = decode_any(text, direction=direction, strict_market_context=strict_market_context)
        except DecodeError as e:
            report.failed += 1
            log_event(
                logger,
                "capture.decode_failed",
                severity="WARNING",
                message=str(e),
                source=source,
                line_no=line_no,
                errors=e.errors,
            )
            if len(report.failures) < max_reported_failures:
                report.failures.append({"source": source, "line_no": line_no, "error": str(e), "errors": e.errors})
            continue
        report.decoded += 1
        report.by_type[msg.message_type] += 1  # type: ignore[attr-defined]
    return report


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Validate NDJSON captures of LaserSell stream traffic.")
    p.add_argument("paths", nargs="*", help="Capture files (.ndjson or .gz). Reads stdin when omitted.")
    p.add_argument("--direction", choices=DIRECTIONS, default="auto", help="Which side produced the lines.")
    p.add_argument(
        "--strict-market-context",
        action="store_true",
        default=None,
        help="Reject market contexts carrying foreign or missing payload fields.",
    )
    p.add_argument("--max-failures", type=int, default=None, help="Max failures listed in the summary.")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    missing = [p for p in args.paths if not Path(p).is_file()]
    if missing:
        parser.error(f"capture file not found: {', '.join(missing)}")
    cfg = ToolConfig.from_env()
    init_structured_logging(service=cfg.service_name, env=cfg.env, level=cfg.log_level, stream=sys.stderr)

    strict = cfg.strict_market_context if args.strict_market_context is None else bool(args.strict_market_context)
    max_failures = cfg.max_reported_failures if args.max_failures is None else max(0, int(args.max_failures))

    report = check_lines(
        _iter_input_lines(args.paths),
        direction=args.direction,
        strict_market_context=strict,
        max_reported_failures=max_failures,
    )
    log_event(
        logger,
        "capture.summary",
        severity="INFO" if report.ok else "WARNING",
        lines=report.lines,
        decoded=report.decoded,
        failed=report.failed,
    )
    sys.stdout.write(json.dumps(report.to_dict(), separators=(",", ":"), ensure_ascii=False) + "\n")
    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
