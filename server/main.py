"""
Command-line entry point.

Usage:
    python -m server.main -addr :8001
    python -m server.main -proto unix -addr /run/rogueserver.sock -debug
    python -m server.main -addr :443 -tlscert cert.pem -tlskey key.pem
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn, Optional

from src.data import Database, build_database_url, get_settings
from src.settings import ConfigError, FileConfig, get_server_settings, load_config_file

from .app import create_app
from .listener import create_listener, serve

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def fatal(message: str) -> NoReturn:
    """Abort startup with a diagnostic and a non-zero exit code."""
    logger.critical(message)
    sys.exit(1)


def build_parser(cfg: FileConfig, parents: Optional[List[argparse.ArgumentParser]] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Save-data API server",
        parents=parents or [],
    )
    parser.add_argument("-debug", "--debug", action="store_true", help="use debug mode")

    parser.add_argument("-proto", "--proto", default="tcp", help="protocol for api to use (tcp, unix)")
    parser.add_argument("-addr", "--addr", default=cfg.server.host, help="network address for api to listen on")
    parser.add_argument("-tlscert", "--tlscert", default="", help="tls certificate path")
    parser.add_argument("-tlskey", "--tlskey", default="", help="tls key path")

    parser.add_argument("-dbuser", "--dbuser", default=cfg.database.user, help="database username")
    parser.add_argument("-dbpass", "--dbpass", default=cfg.database.password, help="database password")
    parser.add_argument("-dbproto", "--dbproto", default="tcp", help="protocol for database connection")
    parser.add_argument("-dbaddr", "--dbaddr", default=cfg.database.host, help="database address")
    parser.add_argument("-dbname", "--dbname", default=cfg.database.database, help="database name")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT)


def main(argv: Optional[List[str]] = None) -> None:
    argv = sys.argv[1:] if argv is None else argv

    # config.yml provides the defaults for the remaining flags, so it is read first
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("-config", "--config", default="config.yml", help="path to config.yml")
    known, _ = pre.parse_known_args(argv)

    try:
        cfg = load_config_file(known.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    args = build_parser(cfg, parents=[pre]).parse_args(argv)

    settings = get_server_settings()
    configure_logging("DEBUG" if args.debug else settings.log_level)

    db_settings = get_settings()
    try:
        url = build_database_url(
            args.dbuser,
            args.dbpass,
            args.dbproto,
            args.dbaddr,
            args.dbname,
            driver=db_settings.db_driver,
        )
    except ValueError as e:
        fatal(f"failed to initialize database: {e}")
    db = Database(url, **db_settings.get_engine_kwargs())

    try:
        listener = create_listener(args.proto, args.addr)
    except (OSError, ValueError) as e:
        fatal(f"failed to create net listener: {e}")

    app = create_app(db, debug=args.debug, cors_origin=settings.cors_origin)

    try:
        serve(app, listener, args.tlscert, args.tlskey, log_level="debug" if args.debug else settings.log_level)
    except Exception as e:
        fatal(f"failed to create http server or server errored: {e}")


if __name__ == "__main__":
    main()
