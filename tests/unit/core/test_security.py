import pytest
import app.core.security as security
import time_machine
from jose import jwt
from datetime import datetime, timezone, timedelta
from app.domain.exceptions import Unauthorized


def test_hash_password_returns_non_plaintext():
    password = "secret123"
    h = security.hash_password(password)
    assert isinstance(h, str)
    assert h != password


def test_verify_password_true_for_correct():
    password = "secret123"
    h = security.hash_password(password)
    assert security.verify_password(password, h) is True


def test_verify_password_false_for_incorrect():
    h = security.hash_password("secret123")
    assert security.verify_password("secret124", h) is False


def test_verify_password_false_for_garbage_hash():
    assert security.verify_password("secret123", "not-a-hash") is False


@time_machine.travel("2030-01-01 12:00:00", tick=False)
def test_create_access_token_contains_expected_claims(monkeypatch):
    monkeypatch.setattr(security, "SECRET_KEY", "fake-key")

    token = security.create_access_token(7, "alice", "admin")
    payload = jwt.decode(token, "fake-key", algorithms=[security.ALGORITHM])

    now = datetime.now(timezone.utc)
    assert payload["iat"] == int(now.timestamp())
    assert payload["exp"] == int((now + timedelta(minutes=1440)).timestamp())
    assert payload["sub"] == "7"
    assert payload["user_id"] == 7
    assert payload["username"] == "alice"
    assert payload["role"] == "admin"


def test_decode_access_token_round_trip():
    token = security.create_access_token(3, "bob", "user")

    payload = security.decode_access_token(token)

    assert payload.user_id == 3
    assert payload.username == "bob"
    assert payload.role == "user"


def test_decode_access_token_expired_raises_unauthorized():
    with time_machine.travel("2030-01-01 12:00:00", tick=False):
        token = security.create_access_token(3, "bob", "user")

    with time_machine.travel("2030-01-03 12:00:00", tick=False):
        with pytest.raises(Unauthorized) as e:
            security.decode_access_token(token)

    assert e.value.ctx["reason"] == "invalid_token"


def test_decode_access_token_wrong_signature_raises_unauthorized():
    token = jwt.encode(
        {"user_id": 1, "username": "x", "role": "admin", "exp": 4102444800},
        "other-key",
        algorithm=security.ALGORITHM
    )

    with pytest.raises(Unauthorized) as e:
        security.decode_access_token(token)

    assert str(e.value) == "Invalid authentication credentials"


def test_decode_access_token_unknown_role_raises_unauthorized():
    token = jwt.encode(
        {"user_id": 1, "username": "x", "role": "superuser", "exp": 4102444800},
        security.SECRET_KEY,
        algorithm=security.ALGORITHM
    )

    with pytest.raises(Unauthorized):
        security.decode_access_token(token)
