"""
Social API Backend — Password and Token Primitives
====================================================

What:  bcrypt password hashing and opaque bearer-token generation.
Who:   AuthService (users, tokens) and ProfileService (profile passwords).

Token format:
    "<token_id>|<secret>". The id lets the lookup hit the primary key; the
    secret is compared by SHA-256 digest in constant time. Only the digest
    is persisted.
"""

import hashlib
import hmac
import secrets
from typing import Optional, Tuple

import bcrypt

from social_api.config import settings

# 40 random bytes → 54 url-safe characters
TOKEN_BYTES = 40

# Largest value a 32-bit INTEGER primary key can hold
MAX_TOKEN_ID = 2**31 - 1


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt at the configured work factor."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def generate_token_secret() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def hash_token(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def format_token(token_id: int, secret: str) -> str:
    return f"{token_id}|{secret}"


def parse_token(raw: str) -> Tuple[Optional[int], str]:
    """
    Split a presented bearer token into (token_id, secret).

    Tokens without the "<id>|" prefix are accepted and looked up by digest
    alone; a non-numeric or out-of-range prefix is treated as part of the
    secret, so it can only ever miss.
    """
    token_id_part, sep, secret = raw.partition("|")
    # ASCII only: isdigit() alone lets through characters int() rejects
    if not sep or not (token_id_part.isascii() and token_id_part.isdigit()):
        return None, raw
    if len(token_id_part) > len(str(MAX_TOKEN_ID)):
        return None, raw
    token_id = int(token_id_part)
    if token_id > MAX_TOKEN_ID:
        return None, raw
    return token_id, secret


def token_matches(secret: str, token_hash: str) -> bool:
    return hmac.compare_digest(hash_token(secret), token_hash)
