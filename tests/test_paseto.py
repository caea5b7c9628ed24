import base64
from datetime import timedelta

import pytest

from mms import config
from mms.config import Config, PasetoConfig
from mms.paseto import PasetoService, TokenError, from_config

SYMMETRIC_KEY = base64.b64encode(bytes(32)).decode("ascii")
OTHER_KEY = base64.b64encode(bytes(range(32))).decode("ascii")


@pytest.fixture(autouse=True)
def _restore_config():
    previous = config.get()
    yield
    config.set_config(previous)


@pytest.fixture
def service():
    return PasetoService(SYMMETRIC_KEY)


def test_round_trip(service):
    token = service.create_token(42, timedelta(hours=1))
    assert service.verify_token(token) == 42


def test_token_format(service):
    token = service.create_token(1, timedelta(minutes=5))
    assert token.startswith("v2.local.")
    assert len(token.split(".")) == 3


def test_tokens_use_fresh_nonces(service):
    first = service.create_token(7, timedelta(minutes=5))
    second = service.create_token(7, timedelta(minutes=5))
    assert first != second
    assert service.verify_token(first) == service.verify_token(second) == 7


def test_expired_token(service):
    token = service.create_token(5, timedelta(seconds=-1))
    with pytest.raises(TokenError) as info:
        service.verify_token(token)
    assert str(info.value) == "token expired"


def test_wrong_key_rejected(service):
    token = service.create_token(5, timedelta(hours=1))
    with pytest.raises(TokenError):
        PasetoService(OTHER_KEY).verify_token(token)


def test_tampered_token_rejected(service):
    token = service.create_token(5, timedelta(hours=1))
    prefix = len("v2.local.")
    original = token[prefix + 10]
    replacement = "A" if original != "A" else "B"
    tampered = token[: prefix + 10] + replacement + token[prefix + 11 :]
    with pytest.raises(TokenError):
        service.verify_token(tampered)


def test_added_footer_rejected(service):
    token = service.create_token(5, timedelta(hours=1))
    footer = base64.urlsafe_b64encode(b"kid").rstrip(b"=").decode("ascii")
    with pytest.raises(TokenError):
        service.verify_token(token + "." + footer)


@pytest.mark.parametrize("bad", ["", "v2.local", "v1.local.abc", "a.b.c.d.e"])
def test_malformed_tokens_rejected(service, bad):
    with pytest.raises(TokenError):
        service.verify_token(bad)


def test_short_key_rejected():
    short_key = base64.b64encode(bytes(16)).decode("ascii")
    with pytest.raises(ValueError) as info:
        PasetoService(short_key)
    assert str(info.value) == "invalid PASETO key length: got 16 bytes, expected 32 bytes"


def test_undecodable_key_rejected():
    with pytest.raises(ValueError, match="^failed to decode PASETO key"):
        PasetoService("placeholder!")


def test_from_config_uses_given_config():
    cfg = Config(paseto=PasetoConfig(symmetric_key=SYMMETRIC_KEY))
    token = from_config(cfg).create_token(9, timedelta(minutes=1))
    assert PasetoService(SYMMETRIC_KEY).verify_token(token) == 9


def test_from_config_uses_loaded_config():
    config.set_config(Config(paseto=PasetoConfig(symmetric_key=SYMMETRIC_KEY)))
    token = from_config(None).create_token(11, timedelta(minutes=1))
    assert PasetoService(SYMMETRIC_KEY).verify_token(token) == 11


def test_from_config_without_config():
    config.set_config(None)
    with pytest.raises(RuntimeError, match="config is not loaded"):
        from_config(None)