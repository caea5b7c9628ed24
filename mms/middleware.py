"""Request middleware: bearer-token authentication and access logging."""

import functools
import ipaddress
import time

from flask import Flask, g, jsonify, request

from mms import logger
from mms.paseto import PasetoService, TokenError


def auth_required(paseto: PasetoService):
    """Return a view decorator that admits only requests with a valid bearer token.

    The user id carried by the token is stored in ``flask.g.user_id``.
    """

    def decorator(view):
        @functools.wraps(view)
        def wrapper(*args, **kwargs):
            header = request.headers.get("Authorization", "")
            if not header:
                return jsonify(error="missing authorization header"), 401
            parts = header.split(" ", 1)
            if len(parts) != 2 or parts[0].lower() != "bearer":
                return jsonify(error="invalid authorization header"), 401
            try:
                g.user_id = paseto.verify_token(parts[1])
            except (TokenError, ValueError):
                return jsonify(error="invalid token"), 401
            return view(*args, **kwargs)

        return wrapper

    return decorator


def _client_ip() -> str:
    for name in ("X-Forwarded-For", "X-Real-IP"):
        items = [item.strip() for item in request.headers.get(name, "").split(",")]
        try:
            for item in items:
                ipaddress.ip_address(item)
        except ValueError:
            continue
        return items[0]
    return request.remote_addr or ""


def install_request_logger(app: Flask) -> None:
    """Log method, path, status, client address and latency of every request."""

    @app.before_request
    def _start_timer():
        g._request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.get("_request_started")
        elapsed = 0.0 if started is None else time.perf_counter() - started
        fields = {
            "method": request.method,
            "path": request.path,
            "status": response.status_code,
            "ip": _client_ip(),
            "latency": elapsed * 1000.0,
        }
        logger.get().info("HTTP request", extra={"fields": fields})
        return response