"""Money management service: configuration, users, transactions, MySQL storage, PASETO tokens and a Flask server."""

__version__ = "0.1.0"