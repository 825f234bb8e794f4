from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from careerclips.infrastructure.config import AppConfig, load_config
from careerclips.infrastructure.logging.setup import configure_logging
from careerclips.interfaces.app_state import AppState
from careerclips.interfaces.composition import open_services
from careerclips.interfaces.main import build_app

log = structlog.get_logger(__name__)


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="careerclips")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the HTTP API (default).")
    serve.add_argument(
        "--host",
        default=None,
        help="Bind host (overrides HOST env).",
    )
    serve.add_argument(
        "--port",
        default=None,
        type=int,
        help="Bind port (overrides PORT env).",
    )
    _add_common_args(serve)

    pending = sub.add_parser(
        "validate-pending", help="Validate all NOT_CHECKED clips and exit."
    )
    _add_common_args(pending)

    single = sub.add_parser("validate", help="Validate one clip by id and exit.")
    single.add_argument("clip_id", help="Clip identifier.")
    _add_common_args(single)

    seed = sub.add_parser("seed", help="Seed the default clips and exit.")
    _add_common_args(seed)

    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.command is None:
        # Bare invocation behaves like `serve` with defaults.
        args = parser.parse_args(["serve"])
    return args


def _load(args: argparse.Namespace) -> AppConfig:
    config_path = Path(args.config) if args.config else None
    dotenv_path = Path(args.dotenv) if args.dotenv else None

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    return load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        cli_overrides=cli_overrides,
    )


async def _run_command(config: AppConfig, args: argparse.Namespace) -> dict[str, Any]:
    state = AppState()
    state.config = config

    async with open_services(state):
        if args.command == "validate-pending":
            summary = await state.clip_validation_uc.validate_all_pending()
            return {
                "validated": summary.validated,
                "valid": summary.valid,
                "invalid": summary.invalid,
            }
        if args.command == "validate":
            outcome = await state.clip_validation_uc.validate_and_update(args.clip_id)
            return {
                "success": outcome.success,
                "is_valid": outcome.is_valid,
                "reason": outcome.reason,
            }
        if args.command == "seed":
            result = await state.clip_seed_uc.seed()
            # A non-empty store validates leftovers in the background.
            await state.clip_seed_uc.wait_background()
            return {"created": result.created, "validated": result.validated}
    raise ValueError(f"Unknown command: {args.command!r}")


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, then either serves the API or runs a
    one-shot maintenance command.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    config = _load(args)
    log_config = configure_logging(config)

    if args.command == "serve":
        host = args.host or os.getenv("HOST", "0.0.0.0")
        port = int(args.port or os.getenv("PORT", "7979"))
        uvicorn.run(
            build_app(config),
            host=host,
            port=port,
            log_config=log_config,
        )
        return 0

    result = asyncio.run(_run_command(config, args))
    print(json.dumps(result))
    if args.command == "validate" and not result["success"]:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(start())
