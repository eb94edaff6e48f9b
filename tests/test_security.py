from datetime import timedelta

import jwt
import pytest

from userapi.config import settings
from userapi.errors import TokenError
from userapi.security import (
    Identity,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hash_password_is_one_way_and_verifiable():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert hashed.startswith("$2")
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_verify_password_treats_unknown_hash_as_mismatch():
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_token_round_trip_carries_identity():
    token = create_access_token(Identity(id=7, email="bob@example.com", role="user"))
    identity = decode_access_token(token)
    assert identity == Identity(id=7, email="bob@example.com", role="user")
    assert not identity.is_admin


def test_expired_token_is_rejected():
    token = create_access_token(
        Identity(id=1, email="a@example.com", role="admin"), expires=timedelta(seconds=-5)
    )
    with pytest.raises(TokenError, match="expired"):
        decode_access_token(token)


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode(
        {"id": 1, "email": "a@example.com", "role": "admin"},
        "a-completely-different-signing-secret",
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(TokenError):
        decode_access_token(token)


def test_token_without_identity_fields_is_rejected():
    token = jwt.encode({"sub": "someone"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    with pytest.raises(TokenError, match="payload"):
        decode_access_token(token)
