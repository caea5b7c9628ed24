"""PASETO v2.local tokens that carry a user id and an expiry time."""

import base64
import binascii
import hashlib
import json
import os
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from nacl.bindings import (
    crypto_aead_xchacha20poly1305_ietf_decrypt,
    crypto_aead_xchacha20poly1305_ietf_encrypt,
)
from nacl.exceptions import CryptoError

from mms import config

_HEADER = b"v2.local."
_NONCE_SIZE = 24
_TAG_SIZE = 16
_KEY_SIZE = 32

_RFC3339 = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d{1,9}))?([Zz]|[+-]\d{2}:\d{2})$"
)


class TokenError(Exception):
    """Raised when a token cannot be decrypted, parsed or has expired."""


def _pae(*pieces: bytes) -> bytes:
    out = len(pieces).to_bytes(8, "little")
    for piece in pieces:
        out += len(piece).to_bytes(8, "little") + piece
    return out


def _b64url_decode(text: str) -> bytes:
    try:
        if "=" in text:
            raise ValueError("padding")
        return base64.b64decode(text + "=" * (-len(text) % 4), altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as exc:
        raise TokenError("invalid token encoding") from exc


def _parse_time(value) -> datetime:
    match = _RFC3339.match(value) if isinstance(value, str) else None
    if match:
        day, clock, fraction, offset = match.groups()
        offset = "+00:00" if offset in ("Z", "z") else offset
        micros = (fraction or "")[:6].ljust(6, "0")
        try:
            return datetime.fromisoformat(f"{day}T{clock}.{micros}{offset}")
        except ValueError:
            pass
    raise TokenError("invalid token payload")


class PasetoService:
    """Creates and verifies symmetric PASETO v2 tokens."""

    def __init__(self, symmetric_key: str):
        try:
            key = base64.b64decode(symmetric_key, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"failed to decode PASETO key: {exc}") from exc
        if len(key) != _KEY_SIZE:
            raise ValueError(
                f"invalid PASETO key length: got {len(key)} bytes, expected {_KEY_SIZE} bytes"
            )
        self._key = key

    def create_token(self, user_id: int, exp: timedelta) -> str:
        """Return a token for the user that expires after the given duration."""
        expires = (datetime.now(timezone.utc) + exp).isoformat().replace("+00:00", "Z")
        message = json.dumps({"id": user_id, "exp": expires}, separators=(",", ":")).encode()
        nonce = hashlib.blake2b(
            message, digest_size=_NONCE_SIZE, key=os.urandom(_NONCE_SIZE)
        ).digest()
        sealed = crypto_aead_xchacha20poly1305_ietf_encrypt(
            message, _pae(_HEADER, nonce, b""), nonce, self._key
        )
        return (_HEADER + base64.urlsafe_b64encode(nonce + sealed).rstrip(b"=")).decode("ascii")

    def verify_token(self, token: str) -> int:
        """Return the user id carried by a valid, unexpired token."""
        try:
            payload = json.loads(self._decrypt(token))
        except ValueError as exc:
            raise TokenError("invalid token payload") from exc
        if not isinstance(payload, dict):
            raise TokenError("invalid token payload")
        user_id = payload.get("id") or 0
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise TokenError("invalid token payload")
        raw_exp = payload.get("exp")
        if raw_exp is None or datetime.now(timezone.utc) > _parse_time(raw_exp):
            raise TokenError("token expired")
        return user_id

    def _decrypt(self, token: str) -> bytes:
        parts = token.split(".")
        if len(parts) not in (3, 4):
            raise TokenError("incorrect token format")
        if f"{parts[0]}.{parts[1]}.".encode() != _HEADER:
            raise TokenError("incorrect token header")
        body = _b64url_decode(parts[2])
        footer = _b64url_decode(parts[3]) if len(parts) == 4 else b""
        if len(body) < _NONCE_SIZE + _TAG_SIZE:
            raise TokenError("incorrect token size")
        nonce, sealed = body[:_NONCE_SIZE], body[_NONCE_SIZE:]
        try:
            return crypto_aead_xchacha20poly1305_ietf_decrypt(
                sealed, _pae(_HEADER, nonce, footer), nonce, self._key
            )
        except CryptoError as exc:
            raise TokenError("invalid token authentication") from exc


def from_config(cfg: Optional[config.Config] = None) -> PasetoService:
    """Build a service from the given or the loaded configuration."""
    cfg = cfg if cfg is not None else config.get()
    if cfg is None:
        raise RuntimeError("config is not loaded")
    return PasetoService(cfg.paseto.symmetric_key)