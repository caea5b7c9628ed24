"""HTTP routes of the service."""

from flask import Blueprint, Flask, jsonify

_STUB_ROUTES = (
    ("create_user", "/users", "POST"),
    ("list_users", "/users", "GET"),
    ("get_user", "/users/<id>", "GET"),
    ("update_user", "/users/<id>", "PUT"),
    ("delete_user", "/users/<id>", "DELETE"),
    ("create_transaction", "/transactions", "POST"),
    ("list_transactions", "/transactions", "GET"),
    ("get_transaction", "/transactions/<id>", "GET"),
)


def _health():
    return jsonify(status="ok"), 200


def _not_implemented(**_params):
    return jsonify(error="not implemented"), 501


def setup_routes(app: Flask) -> None:
    """Register the health check and the versioned API routes on the app."""
    app.add_url_rule("/health", "health", _health, methods=["GET"])

    api = Blueprint("api_v1", __name__, url_prefix="/api/v1")
    for endpoint, rule, method in _STUB_ROUTES:
        api.add_url_rule(rule, endpoint, _not_implemented, methods=[method])
    app.register_blueprint(api)