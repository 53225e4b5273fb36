"""Tests for password hashing and bearer tokens."""

import pytest

from storecheck.store.security import (
    TokenError,
    decode_token,
    hash_password,
    issue_token,
    verify_password,
)


@pytest.mark.unit
class TestPasswords:
    def test_hash_format(self):
        hashed = hash_password("P@ssw0rd!", iterations=1000)
        algorithm, iterations, salt, digest = hashed.split("$")
        assert algorithm == "pbkdf2_sha256"
        assert iterations == "1000"
        assert salt and digest
        assert "P@ssw0rd!" not in hashed

    def test_salted(self):
        assert hash_password("same", iterations=1000) != hash_password(
            "same", iterations=1000
        )

    def test_verify(self):
        hashed = hash_password("P@ssw0rd!", iterations=1000)
        assert verify_password("P@ssw0rd!", hashed)
        assert not verify_password("wrong", hashed)

    @pytest.mark.parametrize("stored", [None, "", "plain", "md5$1$a$b", "x$y$z"])
    def test_verify_rejects_unusable_hashes(self, stored):
        assert not verify_password("anything", stored)


@pytest.mark.unit
class TestTokens:
    def test_round_trip(self):
        token = issue_token(7, "secret", 60, now=1000.0)
        claims = decode_token(token, "secret", now=1030.0)
        assert claims == {"id": 7, "exp": 1060}

    def test_bearer_prefix_accepted(self):
        token = issue_token(7, "secret", 60)
        assert decode_token(f"Bearer {token}", "secret")["id"] == 7

    def test_wrong_secret(self):
        token = issue_token(7, "secret", 60)
        with pytest.raises(TokenError, match="signature"):
            decode_token(token, "other")

    def test_expired(self):
        token = issue_token(7, "secret", 60, now=1000.0)
        with pytest.raises(TokenError, match="expired"):
            decode_token(token, "secret", now=1060.0)

    @pytest.mark.parametrize("token", ["", "abc", "abc.", ".sig"])
    def test_malformed(self, token):
        with pytest.raises(TokenError, match="malformed"):
            decode_token(token, "secret")

    def test_tampered_payload(self):
        token = issue_token(7, "secret", 60)
        other = issue_token(8, "secret", 60)
        forged = other.split(".")[0] + "." + token.split(".")[1]
        with pytest.raises(TokenError):
            decode_token(forged, "secret")
