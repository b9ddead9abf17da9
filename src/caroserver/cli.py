"""Caro server CLI — serve and check entry points.

Usage:
    caroserver serve                    # Load ./config.yaml (or $CARO_CONFIG) and serve
    caroserver serve -c prod.yaml       # Use a specific config file
    caroserver check -c prod.yaml       # Load and validate, print resolved values

Exit codes:
    0  success
    1  config file could not be loaded, or config is invalid
    2  config declaration is broken (a tagged field of unsupported type)
"""

import argparse
import logging
import sys
from typing import Any, Optional

from .config import (
    ConfigLoadError,
    ConfigShapeError,
    FieldKind,
    ServiceConfig,
    describe,
)
from .config.settings import SECRET_TAGS

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_SHAPE_ERROR = 2

logger = logging.getLogger("caroserver")


def load_service_config(config_path: Optional[str]) -> ServiceConfig:
    """Load config from ``config_path``, or from $CARO_CONFIG when None."""
    if config_path:
        return ServiceConfig.load(config_path)
    return ServiceConfig.from_env()


def _load_or_exit_code(config_path: Optional[str]) -> "ServiceConfig | int":
    try:
        return load_service_config(config_path)
    except ConfigLoadError as e:
        logger.error(str(e))
        return EXIT_LOAD_ERROR
    except ConfigShapeError as e:
        logger.critical("config declaration error: %s", e)
        return EXIT_SHAPE_ERROR


def format_config(config: Any, indent: str = "") -> list[str]:
    """Render ``config`` as ``TAG=value`` lines, masking secrets."""
    lines = []
    for f in describe(config):
        value = f.get(config)
        if f.kind is FieldKind.GROUP:
            lines.append(f"{indent}{f.tag}:")
            lines.extend(format_config(value, indent + "  "))
            continue
        if f.tag in SECRET_TAGS and value:
            value = "********"
        lines.append(f"{indent}{f.tag}={value}")
    return lines


def cmd_check(args: argparse.Namespace) -> int:
    """Load and validate config, print the resolved values."""
    result = _load_or_exit_code(args.config)
    if isinstance(result, int):
        return result
    config = result

    print("\n".join(format_config(config)))

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"❌ {error}")
        return EXIT_LOAD_ERROR

    print("✅ Configuration is valid")
    return EXIT_OK


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the HTTP server."""
    result = _load_or_exit_code(args.config)
    if isinstance(result, int):
        return result
    config = result

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error("invalid config: %s", error)
        return EXIT_LOAD_ERROR

    from .server.app import run_server

    run_server(
        config=config,
        host=args.host,
        port=args.port,
        log_level=args.log_level or "info",
    )
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="caroserver",
        description="Caro game API server",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP server")
    serve_parser.add_argument("--host", type=str, default=None)
    serve_parser.add_argument("--port", "-p", type=int, default=None)
    serve_parser.add_argument("--config", "-c", type=str, default=None,
                              help="Path to config file (default: $CARO_CONFIG or ./config.yaml)")
    serve_parser.add_argument("--log-level", type=str, default=None,
                              choices=["debug", "info", "warning", "error"])

    # check
    check_parser = subparsers.add_parser(
        "check", help="Load and validate the config without serving"
    )
    check_parser.add_argument("--config", "-c", type=str, default=None,
                              help="Path to config file (default: $CARO_CONFIG or ./config.yaml)")

    args = parser.parse_args(argv)

    level = getattr(args, "log_level", None) or "info"
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        sys.exit(cmd_serve(args))
    elif args.command == "check":
        sys.exit(cmd_check(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
