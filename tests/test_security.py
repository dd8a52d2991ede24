from datetime import datetime, timedelta, timezone

import jwt

from talent_site.auth.security import (
    create_access_token,
    credentials_match,
    decode_access_token,
    verify_access_token,
)

SECRET = "unit-secret-0123456789abcdef0123456789"


def test_token_round_trip_carries_subject_role_and_24h_expiry():
    token = create_access_token(secret=SECRET, subject="admin", role="admin")
    claims = decode_access_token(token=token, secret=SECRET)

    assert claims["sub"] == "admin"
    assert claims["role"] == "admin"
    assert claims["exp"] - claims["iat"] == 24 * 60 * 60


def test_verify_rejects_wrong_signature():
    token = create_access_token(secret=SECRET, subject="admin", role="admin")
    assert verify_access_token(token=token, secret="other-secret-0123456789abcdef012345678") is None


def test_verify_rejects_expired_token():
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = jwt.encode(
        {"sub": "admin", "role": "admin", "iat": int(past.timestamp()) - 60, "exp": int(past.timestamp())},
        SECRET,
        algorithm="HS256",
    )
    assert verify_access_token(token=token, secret=SECRET) is None


def test_verify_rejects_malformed_and_missing_tokens():
    assert verify_access_token(token="not-a-jwt", secret=SECRET) is None
    assert verify_access_token(token="", secret=SECRET) is None
    assert verify_access_token(token=None, secret=SECRET) is None


def test_verify_rejects_token_without_subject():
    token = jwt.encode({"role": "admin"}, SECRET, algorithm="HS256")
    assert verify_access_token(token=token, secret=SECRET) is None


def test_credentials_match_is_exact():
    kw = dict(expected_username="admin", expected_password="pw")
    assert credentials_match("admin", "pw", **kw)
    assert not credentials_match("admin", "PW", **kw)
    assert not credentials_match("admin ", "pw", **kw)
    assert not credentials_match(None, None, **kw)


def test_credentials_match_disabled_without_configured_password():
    assert not credentials_match("admin", "", expected_username="admin", expected_password="")
