"""CLI entrypoint for serve-api."""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from serve_api.config.loader import ServeConfig, load_config, resolve_config
from serve_api.server.app import create_app
from serve_api.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Flags default to None so only explicitly passed values override env and file."""
    parser = argparse.ArgumentParser(
        prog="serve-api",
        description="Serve a directory over HTTP with a read-only /api query endpoint on a SQLite store",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Config file (default is $HOME/.serve.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Every request will be printed.",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=str,
        help="Bind to specific port (default: 3000)",
    )
    parser.add_argument(
        "-i",
        "--ip-address",
        type=str,
        help="Bind to specific ip-address (default: 0.0.0.0)",
    )
    parser.add_argument(
        "-d",
        "--directory",
        type=str,
        help="Serve another directory (default: ./)",
    )
    parser.add_argument(
        "--database",
        type=str,
        help="SQLite file queried by /api (default: sqlite.db)",
    )
    return parser


def _cli_values(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "verbose": args.verbose,
        "port": args.port,
        "ip-address": args.ip_address,
        "directory": args.directory,
        "database": args.database,
    }


def load_serve_config(args: argparse.Namespace) -> ServeConfig:
    """Resolve flags, SERVE_* env vars and the config file into a ServeConfig."""
    file_config = load_config(Path(args.config) if args.config else None)
    used_path = file_config.pop("__path__", None)
    if used_path:
        print(f"Using config file: {used_path}", file=sys.stderr)
    return resolve_config(_cli_values(args), file_config)


def log_startup(config: ServeConfig) -> None:
    if config.verbose:
        logger.info("verbose=true")
        logger.info(f"port={config.port}")
        logger.info(f"ipaddress={config.bind_address}")
        logger.info(f"directory={config.directory}")
        logger.info(f"database={config.database}")
    if not Path(config.database).is_file():
        logger.warning(f"Database file {config.database} not found; /api will answer 500 until it exists")


def cmd_serve(config: ServeConfig) -> None:
    """Run the HTTP server until interrupted."""
    app = create_app(config)
    print(f"Listening on {config.listen_address} ...")
    try:
        app.run(host=config.bind_address, port=config.port, threaded=True)
    except OSError as e:
        logger.error(f"Could not listen on {config.listen_address}: {e}")
        sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_serve_config(args)
    except (FileNotFoundError, ValueError, ValidationError, yaml.YAMLError, OSError) as e:
        configure_logging(False)
        logger.error(f"Invalid configuration: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    configure_logging(config.verbose)
    log_startup(config)
    cmd_serve(config)


if __name__ == "__main__":
    main()
