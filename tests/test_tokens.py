"""Tests for access/refresh token signing and verification."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from jokes_api.jwt.tokens import (
    ACCESS_TOKEN_TYPE, InvalidTokenError, TokenCodec, TokenIssuer
)

from conftest import ACCESS_SECRET, ISSUER, REFRESH_SECRET


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(ACCESS_SECRET, REFRESH_SECRET, ISSUER)


def test_access_token_claims(issuer):
    token = issuer.issue_access_token("user-1")
    claims = issuer.verify_access_token(token)
    assert claims.sub == "user-1"
    assert claims.aud == "user-1"
    assert claims.iss == ISSUER
    assert claims.token_type == "access"

    raw = jwt.get_unverified_claims(token)
    lifetime = raw["exp"] - raw["iat"]
    assert lifetime == 30 * 60


def test_refresh_token_lifetime_is_one_year(issuer):
    token = issuer.issue_refresh_token("user-1")
    raw = jwt.get_unverified_claims(token)
    assert raw["exp"] - raw["iat"] == 365 * 24 * 60 * 60
    assert issuer.verify_refresh_token(token).user_id == "user-1"


def test_each_issuance_is_unique(issuer):
    assert issuer.issue_access_token("user-1") != issuer.issue_access_token("user-1")
    assert issuer.issue_refresh_token("user-1") != issuer.issue_refresh_token("user-1")


def test_secrets_are_not_interchangeable(issuer):
    access = issuer.issue_access_token("user-1")
    refresh = issuer.issue_refresh_token("user-1")
    with pytest.raises(InvalidTokenError):
        issuer.verify_refresh_token(access)
    with pytest.raises(InvalidTokenError):
        issuer.verify_access_token(refresh)


def test_same_secret_still_checks_token_type():
    issuer = TokenIssuer("shared", "shared", ISSUER)
    refresh = issuer.issue_refresh_token("user-1")
    with pytest.raises(InvalidTokenError):
        issuer.verify_access_token(refresh)


def test_expired_token_is_flagged():
    codec = TokenCodec(ACCESS_SECRET, ISSUER, timedelta(seconds=-5), ACCESS_TOKEN_TYPE)
    with pytest.raises(InvalidTokenError) as exc_info:
        codec.decode(codec.encode("user-1"))
    assert exc_info.value.expired is True


def test_wrong_issuer_rejected(issuer):
    other = TokenIssuer(ACCESS_SECRET, REFRESH_SECRET, "someone-else")
    with pytest.raises(InvalidTokenError):
        issuer.verify_access_token(other.issue_access_token("user-1"))


def test_audience_must_match_subject(issuer):
    now = datetime.now(timezone.utc)
    forged = jwt.encode(
        {
            "sub": "user-1",
            "aud": "user-2",
            "iss": ISSUER,
            "exp": now + timedelta(minutes=5),
            "type": "access",
        },
        ACCESS_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        issuer.verify_access_token(forged)


def test_garbage_token_rejected(issuer):
    with pytest.raises(InvalidTokenError) as exc_info:
        issuer.verify_refresh_token("not-a-jwt")
    assert exc_info.value.expired is False


@pytest.mark.parametrize("access, refresh", [("", "r"), ("a", "")])
def test_missing_secret_fails_at_construction(access, refresh):
    with pytest.raises(ValueError):
        TokenIssuer(access, refresh, ISSUER)
