"""
Password hashing and signed bearer tokens for the reference storefront.

Passwords are stored as ``pbkdf2_sha256$<iterations>$<salt>$<hash>``.
Tokens are ``<payload>.<signature>`` where the payload is base64url JSON
``{"id": ..., "exp": ...}`` and the signature is HMAC-SHA256 over it.
"""

import base64
import hashlib
import hmac
import json
import secrets
import time
from typing import Any

from ..exceptions import HarnessError

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 100_000
SALT_BYTES = 16


class TokenError(HarnessError):
    """A bearer token is malformed, forged or expired."""

    pass


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def hash_password(password: str, iterations: int = ITERATIONS) -> str:
    """Hash a password with a fresh random salt."""
    salt = secrets.token_bytes(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations)
    return f"{ALGORITHM}${iterations}${_b64encode(salt)}${_b64encode(digest)}"


def verify_password(password: str, hashed: str | None) -> bool:
    """Check a password against a stored hash; False for malformed hashes."""
    if not hashed:
        return False
    try:
        algorithm, iterations, salt, digest = hashed.split("$")
        rounds = int(iterations)
        expected = _b64decode(digest)
        actual = hashlib.pbkdf2_hmac(
            "sha256", password.encode(), _b64decode(salt), rounds
        )
    except ValueError:
        return False
    return algorithm == ALGORITHM and hmac.compare_digest(actual, expected)


def _sign(payload: str, secret: str) -> str:
    mac = hmac.new(secret.encode(), payload.encode(), hashlib.sha256)
    return _b64encode(mac.digest())


def issue_token(user_id: int, secret: str, ttl: int, now: float | None = None) -> str:
    """
    Issue a signed token for a user, valid for ttl seconds.

    Example:
        >>> token = issue_token(1, "secret", 3600)
        >>> decode_token(token, "secret")["id"]
        1
    """
    issued = time.time() if now is None else now
    claims = {"id": user_id, "exp": int(issued + ttl)}
    body = json.dumps(claims, separators=(",", ":"))
    payload = _b64encode(body.encode())
    return f"{payload}.{_sign(payload, secret)}"


def decode_token(token: str, secret: str, now: float | None = None) -> dict[str, Any]:
    """
    Verify a token and return its payload.

    Accepts the bare token or the ``Bearer <token>`` form.

    Raises:
        TokenError: If the token is malformed, the signature does not match
            or the token has expired
    """
    if token.startswith("Bearer "):
        token = token[len("Bearer ") :]

    payload, sep, signature = token.partition(".")
    if not sep or not payload or not signature:
        raise TokenError("malformed token")

    if not hmac.compare_digest(signature.encode(), _sign(payload, secret).encode()):
        raise TokenError("invalid token signature")

    try:
        claims = json.loads(_b64decode(payload))
    except ValueError as e:
        raise TokenError("malformed token payload") from e

    current = time.time() if now is None else now
    if claims.get("exp", 0) <= current:
        raise TokenError("token expired", exp=claims.get("exp"))
    return claims
