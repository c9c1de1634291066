"""Per-request authentication token for the Météo-France web service."""
from __future__ import annotations

import time
import uuid

import jwt

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="mf_token")

JWT_ALGORITHM = "HS256"
# HMAC-SHA256 keys shorter than the digest are rejected, as the service does.
MIN_JWT_KEY_BYTES = 32


def sign_mobile_token(jwt_key: str, *, issued_at: int | None = None) -> str:
    """Signed short-lived token: class "mobile", issue time and a unique id."""
    key = jwt_key.encode("utf-8")
    if len(key) < MIN_JWT_KEY_BYTES:
        raise ValueError("JWT signing key is too short for HS256")
    claims = {
        "class": "mobile",
        "iat": int(time.time()) if issued_at is None else issued_at,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(claims, key, algorithm=JWT_ALGORITHM, headers={"typ": "JWT"})


def resolve_token(stored_key: str, default_key: str, jwt_key: str) -> str:
    """Pick the token for one aggregation.

    A stored key that differs from the build-time default wins. Otherwise a
    fresh JWT is signed; if that fails for any reason the unsigned default
    key is used. Never touches the network.
    """
    key_or_default = stored_key or default_key
    if key_or_default != default_key:
        return key_or_default
    try:
        return sign_mobile_token(jwt_key)
    except Exception as exc:
        logger.warning("Could not sign Météo-France token; using default key", extra={"error": str(exc)})
        return default_key
