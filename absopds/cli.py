#!/usr/bin/env python3
"""
cli.py - Entry point for absopds
Serve Audiobookshelf libraries as an OPDS catalog.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console

import absopds as pkg
from . import logger
from .config import AbsOpdsConfig, load_config
from .server import run_server
from .verification import verify_upstream

console = Console()


def _ui_info(message: str) -> None:
    console.print(f"[cyan][INFO][/cyan] {message}")


def _ui_error(message: str) -> None:
    console.print(f"[red][ERROR][/red] {message}")


def resolve_config_path(args_config: Optional[str]) -> Path:
    if args_config:
        p = Path(args_config).expanduser()
        if p.is_dir():
            p = p / "config.toml"
        return p

    cwd_candidate = Path.cwd() / "config.toml"
    if cwd_candidate.exists():
        return cwd_candidate

    repo_root = Path(__file__).resolve().parent.parent
    root_candidate = repo_root / "config.toml"
    if root_candidate.exists() and (repo_root / "pyproject.toml").exists():
        return root_candidate
    return cwd_candidate


def apply_overrides(config: AbsOpdsConfig, args: argparse.Namespace) -> AbsOpdsConfig:
    if args.host:
        config.server.host = args.host
    if args.port is not None:
        config.server.port = args.port
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=False)
    for args, kwargs in (
        (("-h", "--help"), {"action": "store_true", "help": "Show help"}),
        (("--verify",), {"action": "store_true", "help": "Check the Audiobookshelf connection and exit"}),
        (("-c", "--config"), {"metavar": "PATH", "help": "Path to config.toml (file or directory)"}),
        (("-d", "--debug"), {"action": "store_true", "help": "Debug mode with API calls and request timings"}),
        (("--log-file",), {"metavar": "PATH", "help": "Also write log output to this file"}),
        (("--host",), {"metavar": "HOST", "help": "Override [server] host"}),
        (("--port",), {"metavar": "PORT", "type": int, "help": "Override [server] port"}),
    ):
        parser.add_argument(*args, **kwargs)
    return parser


def show_help(parser: argparse.ArgumentParser) -> None:
    print(f"absopds v{getattr(pkg, '__version__', '0.0.0')} - OPDS catalog for Audiobookshelf")
    print()
    parser.print_help()


def main():
    """Entry point"""
    parser = build_parser()
    try:
        args = parser.parse_args()
        if args.help:
            show_help(parser)
            sys.exit(0)

        config = apply_overrides(load_config(resolve_config_path(args.config)), args)
        log_file = Path(args.log_file).expanduser() if args.log_file else None
        with logger.AbsOpdsLogger(log_file=log_file, debug=args.debug) as log:
            logger.set_logger(log)
            if args.verify:
                result = asyncio.run(verify_upstream(config))
                sys.exit(0 if result else 1)

            run_server(config)
            sys.exit(0)
    except KeyboardInterrupt:
        _ui_info("Goodbye!")
        sys.exit(0)
    except Exception as e:
        _ui_error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
