import time

import jwt
import pytest

from legalease.api.exceptions import AuthenticationError
from legalease.core.security import create_access_token, decode_token, owner_id_from_claims


def test_round_trip_owner_from_sub():
    claims = decode_token(create_access_token("owner-42"))
    assert owner_id_from_claims(claims) == "owner-42"


def test_id_claim_takes_precedence():
    assert owner_id_from_claims({"sub": "someone@example.com", "id": 7}) == "7"


def test_expired_token_rejected():
    token = create_access_token("owner-1", expires_in_seconds=-10)
    with pytest.raises(AuthenticationError, match="JWT token is expired"):
        decode_token(token)


def test_wrong_signature_rejected():
    claims = {"sub": "owner-1", "exp": int(time.time()) + 60}
    token = jwt.encode(claims, "another-secret-that-is-also-long-enough-000", algorithm="HS256")
    with pytest.raises(AuthenticationError, match="Invalid JWT"):
        decode_token(token)


def test_garbage_token_rejected():
    with pytest.raises(AuthenticationError, match="Invalid JWT"):
        decode_token("not-a-token")


def test_token_without_subject_rejected():
    with pytest.raises(AuthenticationError):
        owner_id_from_claims({"exp": 1})
