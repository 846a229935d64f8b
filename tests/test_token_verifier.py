from __future__ import annotations

import time

import jwt
import pytest

from core.auth import make_access_token, verify_access_token
from core.errors import Unauthenticated
from core.services.auth import authenticate, extract_bearer


def test_roundtrip_claims():
    tok = make_access_token("s3cret", "u1", "u1@college.edu")
    payload = verify_access_token("s3cret", tok)
    assert payload is not None
    assert payload["sub"] == "u1"
    assert payload["email"] == "u1@college.edu"


def test_wrong_secret_rejected():
    tok = make_access_token("s3cret", "u1", "u1@college.edu")
    assert verify_access_token("other", tok) is None


def test_expired_token_rejected():
    tok = make_access_token("s3cret", "u1", "u1@college.edu", ttl_seconds=-10)
    assert verify_access_token("s3cret", tok) is None


def test_garbage_token_rejected():
    assert verify_access_token("s3cret", "not-a-jwt") is None
    assert verify_access_token("s3cret", "a.b.c") is None


def test_missing_subject_rejected():
    tok = jwt.encode({"email": "x@college.edu", "exp": int(time.time()) + 60}, "s3cret", algorithm="HS256")
    assert verify_access_token("s3cret", tok) is None


def test_audience_checked_only_when_configured():
    tok = make_access_token("s3cret", "u1", "u1@college.edu", audience="authenticated")
    assert verify_access_token("s3cret", tok) is not None
    assert verify_access_token("s3cret", tok, audience="authenticated") is not None
    assert verify_access_token("s3cret", tok, audience="service_role") is None


@pytest.mark.parametrize(
    "header,expected",
    [
        (None, None),
        ("", None),
        ("Basic abc", None),
        ("Bearer ", None),
        ("Bearer abc.def", "abc.def"),
        ("bearer   tok", "tok"),
    ],
)
def test_extract_bearer(header, expected):
    assert extract_bearer(header) == expected


def test_authenticate_messages():
    with pytest.raises(Unauthenticated) as missing:
        authenticate(None)
    assert missing.value.message == "No token provided"
    with pytest.raises(Unauthenticated) as bad:
        authenticate("Bearer nope")
    assert bad.value.message == "Invalid token"


def test_authenticate_lowercases_email():
    from conftest import make_token

    identity = authenticate(f"Bearer {make_token('u9', 'U9@College.EDU')}")
    assert identity.user_id == "u9"
    assert identity.email == "u9@college.edu"
    assert identity.role is None
