"""Application assembly and the command that runs the HTTP server."""

import argparse
import sys
from typing import Optional

from flask import Flask

from mms import config, logger, persistence
from mms.config import Config, ConfigError
from mms.middleware import install_request_logger
from mms.persistence import DatabaseError
from mms.router import setup_routes

_MODES = ("debug", "release", "test")


def create_app(cfg: Optional[Config] = None) -> Flask:
    """Build the Flask application with logging middleware and routes."""
    cfg = cfg if cfg is not None else config.get()
    if cfg is None:
        raise RuntimeError("config is not loaded")
    mode = cfg.server.mode or "debug"
    if mode not in _MODES:
        raise ValueError(f"server mode unknown: {mode} (available mode: {' '.join(_MODES)})")
    app = Flask(__name__)
    app.debug = mode == "debug"
    app.testing = mode == "test"
    install_request_logger(app)
    setup_routes(app)
    return app


def main(argv=None) -> int:
    """Load configuration, connect to the database and serve HTTP."""
    parser = argparse.ArgumentParser(prog="mms", description="Run the money management server.")
    parser.add_argument("--config", default="", help="path of the YAML configuration file")
    args = parser.parse_args(argv)

    try:
        cfg = config.load(args.config or None)
    except ConfigError as exc:
        print(f"failed to load config: {exc}", file=sys.stderr)
        return 1

    log = logger.init(cfg.log.level)
    log.info("Logger initialized")
    try:
        persistence.connect()
    except DatabaseError as exc:
        log.critical("Failed to connect to database", extra={"fields": {"error": str(exc)}})
        return 1
    log.info("Database connected")

    try:
        app = create_app(cfg)
        addr = cfg.server.address or ":8080"
        log.info("Server starting on %s", addr)
        host, sep, port_text = addr.rpartition(":")
        if not sep or not port_text.isdigit():
            raise ValueError(f"invalid listen address: {addr!r}")
        app.run(host=host.strip("[]") or "0.0.0.0", port=int(port_text), use_reloader=False)
    except (OSError, ValueError) as exc:
        log.critical("Server failed", extra={"fields": {"error": str(exc)}})
        return 1
    finally:
        persistence.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())