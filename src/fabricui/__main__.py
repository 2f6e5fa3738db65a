"""Command-line entry point: ``python -m fabricui``."""

import argparse
import logging
import sys
from typing import List, Optional

from . import FabricUI
from .config import load_settings
from .exceptions import ConfigValidationError
from .logging_utils import configure_logging

LOGGER = logging.getLogger("fabricui")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fabricui", description="Browser front end for the fabric CLI."
    )
    parser.add_argument("--config", help="Path to a TOML config file.")
    parser.add_argument("--host", help="Interface to bind.")
    parser.add_argument("--port", type=int, help="Port to listen on.")
    parser.add_argument("--debug", action="store_true", help="Run Dash in debug mode.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(args.config)
    except ConfigValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    overrides = {
        key: value
        for key, value in (("host", args.host), ("port", args.port))
        if value is not None
    }
    if args.debug:
        overrides["debug"] = True
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(settings)
    app = FabricUI(settings=settings)
    LOGGER.info("Serving on http://%s:%s", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port, debug=settings.debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
