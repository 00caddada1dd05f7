#!/usr/bin/env python3
"""
Startup script for the PiliPili frontend.

Usage:
  python frontend.py                         # Discover config via CONFIG_PATH or config/config.yaml
  python frontend.py -c config.yaml -l DEBUG # Explicit config file and log level
  python frontend.py --print-config          # Dump the resolved configuration and exit
"""

import argparse
import os
import sys
from dataclasses import asdict
from typing import Any

import yaml
from dotenv import load_dotenv

from config.settings import Config, initialize
from utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

MASK = "******"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PiliPili frontend service.")
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "-l",
        "--log-level",
        default=os.environ.get("LOG_LEVEL", ""),
        help="Log level override (DEBUG, INFO, WARN, ERROR). Wins over the file.",
    )
    parser.add_argument(
        "--log-file",
        default="logs/frontend.log",
        help="Log file path (default: logs/frontend.log).",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print the resolved configuration as YAML and exit.",
    )
    return parser


def config_to_dict(config: Config) -> dict[str, Any]:
    """Render the configuration for display, masking secrets."""
    data = asdict(config)
    data["stream_source_type"] = config.get_stream_source_type().value
    data["special_medias"] = [
        media.model_dump(by_alias=True) for media in config.special_medias
    ]
    for secret in ("encipher", "emby_api_key"):
        if data[secret]:
            data[secret] = MASK
    return data


def main(argv: list[str] | None = None) -> int:
    """Main entry point for frontend startup."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    config = initialize(args.config, args.log_level)

    if args.print_config:
        yaml.safe_dump(config_to_dict(config), sys.stdout, sort_keys=False, allow_unicode=True)
        return 0

    setup_logging(config.log_level, args.log_file)

    logger.info(
        "Frontend configured: stream source=%s, emby=%s, backend=%s, port=%d",
        config.get_stream_source_type().value,
        config.get_full_emby_url(),
        config.get_full_backend_url() or "<unset>",
        config.server_port,
    )
    invalid = [media.key or "<no key>" for media in config.special_medias if not media.is_valid()]
    if invalid:
        logger.warning("Special media entries with empty fields: %s", ", ".join(invalid))
    return 0


if __name__ == "__main__":
    sys.exit(main())
