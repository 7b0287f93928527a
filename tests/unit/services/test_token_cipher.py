import base64

import pytest

from context_service.app.services.token_cipher import PREFIX, TokenCipher, parse_key

KEY = bytes(range(32))


def test_encrypt_round_trips_and_is_prefixed():
    cipher = TokenCipher(KEY)
    stored = cipher.encrypt("monday-access-token")
    assert stored.startswith(PREFIX)
    assert "monday-access-token" not in stored
    assert cipher.decrypt(stored) == "monday-access-token"


def test_encrypt_is_idempotent_on_encrypted_values():
    cipher = TokenCipher(KEY)
    stored = cipher.encrypt("token")
    assert cipher.encrypt(stored) == stored


def test_plaintext_passes_through_decrypt():
    """Legacy rows stored before encryption still work"""
    assert TokenCipher(KEY).decrypt("legacy-plain-token") == "legacy-plain-token"


def test_corrupt_or_foreign_values_decrypt_to_none():
    stored = TokenCipher(KEY).encrypt("token")
    assert TokenCipher(bytes(32)).decrypt(stored) is None
    assert TokenCipher(KEY).decrypt(PREFIX + "not base64!") is None
    assert TokenCipher(KEY).decrypt(PREFIX + base64.b64encode(b"short").decode()) is None


def test_parse_key_formats():
    assert parse_key(KEY.hex()) == KEY
    assert parse_key(base64.b64encode(KEY).decode()) == KEY
    assert parse_key("a" * 32) == b"a" * 32
    with pytest.raises(ValueError):
        parse_key("too-short")


def test_from_config_falls_back_to_secret():
    derived = TokenCipher.from_config("", "client-secret")
    assert derived.decrypt(derived.encrypt("x")) == "x"
    with pytest.raises(ValueError):
        TokenCipher.from_config("", "")
