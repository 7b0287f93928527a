import time

from jose import jwt

from context_service.api.utils.monday_jwt import session_identity_from_claims, verify_monday_jwt

SECRET = "client-secret"


def encode(claims, secret=SECRET):
    return jwt.encode(claims, secret, algorithm="HS256")


def test_valid_token_is_decoded():
    token = encode({"dat": {"account_id": 12345, "user_id": 7}, "exp": int(time.time()) + 60})

    payload = verify_monday_jwt(token, SECRET)

    assert payload["dat"]["account_id"] == 12345


def test_wrong_secret_expired_or_malformed_tokens_are_rejected():
    assert verify_monday_jwt(encode({"dat": {}}, "other"), SECRET) is None
    assert verify_monday_jwt(encode({"exp": int(time.time()) - 10}), SECRET) is None
    assert verify_monday_jwt("not-a-jwt", SECRET) is None
    assert verify_monday_jwt("", SECRET) is None


def test_issuer_and_audience_checked_only_when_configured():
    token = encode({"iss": "monday", "aud": "app-1"})

    assert verify_monday_jwt(token, SECRET) is not None
    assert verify_monday_jwt(token, SECRET, issuer="monday", audience="app-1") is not None
    assert verify_monday_jwt(token, SECRET, issuer="someone-else") is None
    assert verify_monday_jwt(token, SECRET, audience="app-2") is None


def test_identity_prefers_nested_claims():
    identity = session_identity_from_claims(
        {"dat": {"account_id": "12345", "user_id": 7, "boardId": 500}, "account_id": 999}
    )

    assert identity.account_id == "12345"
    assert identity.user_id == "7"
    assert identity.board_id == "500"


def test_identity_from_top_level_claims():
    identity = session_identity_from_claims({"accountId": 12345.0, "userId": "8"})

    assert identity.account_id == "12345"
    assert identity.user_id == "8"
    assert identity.board_id is None


def test_identity_requires_account():
    assert session_identity_from_claims({"dat": {"user_id": 1}}) is None
