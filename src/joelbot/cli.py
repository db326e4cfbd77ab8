from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime
from typing import List, Optional

from . import __version__
from .contracts.v1 import ConfigError
from .kernel.config import load_config
from .kernel.window import is_within_window, window_bounds
from .util.conv import coerce_bool
from .util.obslog import setup_root_json_logging
from .util.time import ensure_aware, utc_now


def _env_flag(name: str, default: bool = False) -> bool:
    return coerce_bool(os.environ.get(name), default=default)


def _cmd_run(args: argparse.Namespace) -> int:
    if args.profile:
        os.environ["JOELBOT_PROFILE"] = args.profile
    if args.dry_run or _env_flag("JOELBOT_DRY_RUN"):
        os.environ["JOELBOT_TRANSPORT"] = "dry_run"
    cfg = load_config(args.config)
    setup_root_json_logging(component="bot", level=cfg.log_level, force=True)

    from .daemon.server import serve_forever

    return serve_forever(cfg)


def _cmd_config(args: argparse.Namespace) -> int:
    try:
        cfg = load_config(args.config, strict=bool(args.strict))
    except ConfigError as e:
        print(f"invalid config: {e}", file=sys.stderr)
        return 2
    doc = cfg.model_dump(mode="json")
    doc["credentials"] = cfg.credentials.redacted()
    print(json.dumps(doc, indent=2, ensure_ascii=False))
    return 0


def _cmd_window(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    if args.at:
        try:
            now = ensure_aware(datetime.fromisoformat(args.at))
        except ValueError:
            print(f"invalid --at timestamp: {args.at}", file=sys.stderr)
            return 2
    else:
        now = utc_now()
    start, end = window_bounds(now, cfg.window)
    inside = is_within_window(now, cfg.window)
    print(
        json.dumps(
            {
                "at": now.isoformat(),
                "window_start": start.isoformat(),
                "window_end": end.isoformat(),
                "weekdays": cfg.window.weekdays,
                "within_window": inside,
            },
            indent=2,
        )
    )
    return 0 if inside else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="joelbot", description="Activity-gated chat reminder bot")
    parser.add_argument("--version", action="version", version=f"joelbot {__version__}")
    sub = parser.add_subparsers(dest="command")

    p_run = sub.add_parser("run", help="Connect to chat and start posting")
    p_run.add_argument("--config", help="YAML config file (default: $JOELBOT_CONFIG or ./joelbot.yaml)")
    p_run.add_argument("--dry-run", action="store_true", help="Log messages instead of sending them")
    p_run.add_argument("--profile", choices=["standard", "patient"], help="Deployment profile")
    p_run.set_defaults(func=_cmd_run)

    p_cfg = sub.add_parser("config", help="Print the effective configuration")
    p_cfg.add_argument("--config", help="YAML config file")
    p_cfg.add_argument("--strict", action="store_true", help="Fail on invalid fields instead of using defaults")
    p_cfg.set_defaults(func=_cmd_config)

    p_win = sub.add_parser("window", help="Show whether a moment falls inside the posting window")
    p_win.add_argument("--config", help="YAML config file")
    p_win.add_argument("--at", help="ISO timestamp to check (default: now)")
    p_win.set_defaults(func=_cmd_window)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 0
    return int(args.func(args))
