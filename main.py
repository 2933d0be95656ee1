"""Component metrics entrypoint -- feeds JSON-lines events through the tracker.

Each input line is either a bare event object or
{"event": {...}, "options": {"finalization_mode": "..."}}.
Finalized batches are written to stdout, one JSON event per line.

Usage:
    python main.py < events.jsonl
    python main.py --config /path/to/config.yaml --input events.jsonl
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import IO

from core.config import load_config
from core.errors import ConfigurationError, ValidationError
from core.models.events import UIEvent
from engine.metrics import ComponentMetrics

logger = logging.getLogger("component_metrics")

_ENVELOPE_KEYS = frozenset({"event", "options"})


def setup_logging(level: str) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="UI component metrics tracker")
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to config.yaml (default: ~/.component-metrics/config.yaml)",
    )
    parser.add_argument(
        "--env",
        type=str,
        default=None,
        help="Path to .env file (default: ~/.component-metrics/.env)",
    )
    parser.add_argument(
        "--input", "-i",
        type=str,
        default=None,
        help="JSON-lines file of events (default: stdin)",
    )
    return parser.parse_args(argv)


def parse_line(line: str) -> tuple[dict, dict | None]:
    """Split an input line into (event, options).

    A line is the wrapped shape only when it holds nothing but an "event"
    object and optional "options"; anything else is a bare event.
    """
    record = json.loads(line)
    if not isinstance(record, dict):
        raise ValueError("each line must be a JSON object")
    if isinstance(record.get("event"), dict) and set(record) <= _ENVELOPE_KEYS:
        return record["event"], record.get("options")
    return record, None


def write_batch(events: list[UIEvent], out: IO[str] | None = None) -> None:
    if out is None:
        out = sys.stdout
    for event in events:
        out.write(event.model_dump_json(exclude_none=True) + "\n")
    out.flush()


async def feed(metrics: ComponentMetrics, stream: IO[str]) -> int:
    """Register every event in `stream`; returns how many were accepted."""
    accepted = 0
    lineno = 0
    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            break
        lineno += 1
        if not line.strip():
            continue
        try:
            event, options = parse_line(line)
            metrics.register_event(event, options)
            accepted += 1
        except (ValueError, ValidationError) as exc:
            logger.warning("Skipping line %d: %s", lineno, exc)
    return accepted


async def run(args: argparse.Namespace) -> int:
    config = load_config(config_path=args.config, env_path=args.env)
    setup_logging(config.logging.level)

    metrics = ComponentMetrics(config.metrics)
    metrics.register_finalized_events_callback(write_batch)

    stream = open(args.input) if args.input else sys.stdin
    try:
        await metrics.run()
        try:
            accepted = await feed(metrics, stream)
        finally:
            await metrics.stop()
    finally:
        if stream is not sys.stdin:
            stream.close()

    logger.info(
        "Registered %d event(s), %d still open at exit",
        accepted, len(metrics.get_unfinalized_events()),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        return asyncio.run(run(args))
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"Input error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
