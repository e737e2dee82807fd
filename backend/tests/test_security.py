from datetime import datetime, timedelta, timezone

import jwt

from app.core import security
from app.core.config import settings


def test_hash_and_verify_password():
    hashed = security.hash_password("19801605")
    assert hashed != "19801605"
    assert security.verify_password("19801605", hashed)
    assert not security.verify_password("wrong", hashed)


def test_verify_password_rejects_non_bcrypt_value():
    assert not security.verify_password("secret", "secret")


def test_token_round_trip_carries_claims():
    token, expires_at = security.create_access_token(7, True, "Administrador")
    claims = security.decode_access_token(token)

    assert claims["sub"] == "7"
    assert claims["is_admin"] is True
    assert claims["name"] == "Administrador"
    assert expires_at.tzinfo is None
    assert expires_at > security.utcnow()


def test_tokens_are_unique_per_issue():
    first, _ = security.create_access_token(1, False, "a")
    second, _ = security.create_access_token(1, False, "a")
    assert first != second


def test_tampered_token_is_rejected():
    token, _ = security.create_access_token(1, False, "a")
    header, payload, signature = token.split(".")
    assert security.decode_access_token(f"{header}.{payload}.{'A' * len(signature)}") is None


def test_token_signed_with_other_key_is_rejected():
    forged = jwt.encode(
        {"sub": "1", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        "some-other-key-that-is-long-enough-for-hs256",
        algorithm=settings.ALGORITHM,
    )
    assert security.decode_access_token(forged) is None


def test_expired_token_is_rejected():
    expired = jwt.encode(
        {"sub": "1", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    assert security.decode_access_token(expired) is None
