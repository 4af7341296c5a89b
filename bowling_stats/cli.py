from __future__ import annotations

import argparse
import json
import logging
from datetime import date
from typing import Any, List

from dotenv import load_dotenv

from .config import StatsConfig, store_config_from_env, stats_config_from_env
from .ingest import RawGameResult, fetch_raw_results, raw_results_from_json, raw_results_to_json
from .render import render_text
from .report import build_dashboard
from .store_client import ScoreStoreClient


def _write_json(path: str, obj: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bowling league dashboard builder")
    parser.add_argument("--from-raw", default=None, help="Load raw game rows from JSON instead of the store")
    parser.add_argument("--date-from", default=None, help="Earliest session date (YYYY-MM-DD)")
    parser.add_argument("--date-to", default=None, help="Latest session date (YYYY-MM-DD)")
    parser.add_argument("--as-of", default=None, help="Reference date for the records window")
    parser.add_argument("--member", default=None, help="Member id for the synergy panel")
    parser.add_argument("--window", type=int, default=None, help="Recent games window size")
    parser.add_argument("--save-raw", default=None, help="Path to save raw rows JSON")
    parser.add_argument("--output", default=None, help="Path to output report JSON/text")
    parser.add_argument(
        "--output-format", choices=["json", "text"], default="json", help="Output format"
    )
    parser.add_argument("--debug", action="store_true", help="Print debug logs")
    return parser.parse_args()


def main() -> None:
    load_dotenv()
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    results: List[RawGameResult]
    if args.from_raw:
        with open(args.from_raw, "r", encoding="utf-8") as f:
            raw = json.load(f)
        results = raw_results_from_json(raw.get("records") if isinstance(raw, dict) else raw)
    else:
        store = store_config_from_env()
        if store is None:
            raise SystemExit(
                "BOWLING_STORE_URL / BOWLING_STORE_KEY not set. Set them or pass --from-raw."
            )
        results = fetch_raw_results(ScoreStoreClient(store), args.date_from, args.date_to)

    if args.save_raw:
        _write_json(args.save_raw, {"records": raw_results_to_json(results)})

    config = stats_config_from_env()
    if args.window:
        config = StatsConfig(recent_window=args.window, history=config.history)
    as_of = date.fromisoformat(args.as_of) if args.as_of else None

    report = build_dashboard(results, config, as_of=as_of, member_id=args.member)

    if args.output_format == "json":
        output_text = json.dumps(report, indent=2, ensure_ascii=False)
    else:
        output_text = render_text(report)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output_text)
    else:
        print(output_text)


if __name__ == "__main__":
    main()
