#!/usr/bin/env python3
"""Dump the curation reward window analysed for a voter.

Prints the rows the efficiency pipeline would consume for a voter on a
post created at ``--created``, so gaps and odd rows can be spotted
before running a full analysis.

Usage
-----
::

    python scripts/dump_rewards.py someuser --created 2025-03-04T12:00:00

Options::

    --days N             Window length in days (default: CURATION_DAYS or 7)
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
    --verbose            Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiohttp

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pycuration import CurationConfig, HttpRewardSource, SourceFetchError, reward_window  # noqa: E402
from pycuration._transport import HttpTransport  # noqa: E402
from pycuration.models import RewardEvent  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_event(event: RewardEvent) -> str:
    when = datetime.fromtimestamp(event.time_sec, tz=UTC).isoformat() if event.time_sec else "<missing>"
    return f"  {when}  {event.vests:>14.6f} VESTS  @{event.author}/{event.permlink}"


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Dump the curation reward window pycuration analyses for a voter.",
    )
    parser.add_argument("voter", help="Voter account name")
    parser.add_argument("--created", required=True, help="Creation time of the target post (ISO 8601 or epoch)")
    parser.add_argument("--days", type=int, help="Window length in days")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.days is not None:
        overrides["days"] = args.days
    config = CurationConfig.from_env(**overrides)

    start_sec, end_sec = reward_window(args.created, config.days)

    async with aiohttp.ClientSession() as http_session:
        source = HttpRewardSource(HttpTransport(config, http_session))
        try:
            table = await source.fetch_rewards(args.voter, start_sec, end_sec)
        except SourceFetchError as exc:
            print(f"!! reward history unavailable: {exc}", file=sys.stderr)
            return 1

    events = list(table.events())

    if args.json_mode:
        payload = json.dumps(
            {
                "voter": args.voter,
                "window": [start_sec, end_sec],
                "cols": table.cols,
                "events": [event.model_dump() for event in events],
            },
            indent=2,
            ensure_ascii=False,
        )
    else:
        out: list[str] = [_section(f"CURATION REWARDS  voter={args.voter}")]
        out.append(f"  window    : {start_sec}-{end_sec}")
        out.append(f"  rows      : {len(events)}")
        out.append(f"  columns   : {', '.join(sorted(table.cols, key=table.cols.__getitem__))}")
        out.append("")
        out.extend(_format_event(event) for event in events)
        payload = "\n".join(out)

    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
