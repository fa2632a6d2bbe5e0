"""Command that starts the user API server."""

from __future__ import annotations

import argparse
import sys

from .config import DEFAULT_CONFIG_PATH, ConfigError, load_config
from .logger import new_logger
from .repository import PostgreSQL, RepositoryError
from .server import Server
from .service import UserService


def main(argv: list[str] | None = None) -> int:
    """Load configuration, connect to the database and serve until interrupted."""
    parser = argparse.ArgumentParser(prog="userhub", description="Run the user HTTP API.")
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"path to the YAML configuration (default: {DEFAULT_CONFIG_PATH})",
    )
    args = parser.parse_args(argv)

    log = new_logger()

    try:
        cfg = load_config(args.config)
    except ConfigError as exc:
        log.critical("failed to load config", extra={"fields": {"error": str(exc)}})
        return 1

    try:
        db = PostgreSQL.connect(cfg, log)
    except RepositoryError as exc:
        log.critical("error connecting to database", extra={"fields": {"error": str(exc)}})
        return 1

    service = UserService(db, log)
    try:
        Server(service, log).run(cfg)
    except (OSError, ValueError):
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())