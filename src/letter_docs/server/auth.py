"""Session tokens and bearer header parsing for the HTTP service."""

from __future__ import annotations

import time
from typing import Any

from joserfc import jwt
from joserfc.errors import JoseError
from joserfc.jwk import OctKey

from letter_docs.config import JWT_EXPIRES_IN
from letter_docs.google.exceptions import TokenError

ALGORITHM = "HS256"


def issue_session_token(
    uid: str, email: str, secret: str, expires_in: int = JWT_EXPIRES_IN
) -> str:
    """Sign an HS256 session token for a signed-in user."""
    now = int(time.time())
    claims = {"uid": uid, "email": email, "iat": now, "exp": now + expires_in}
    return jwt.encode({"alg": ALGORITHM}, claims, OctKey.import_key(secret))


def verify_session_token(token: str, secret: str) -> dict[str, Any]:
    """Decode and validate a session token.

    Raises:
        TokenError: If the signature is bad, the token is malformed or expired.
    """
    try:
        decoded = jwt.decode(token, OctKey.import_key(secret), algorithms=[ALGORITHM])
        jwt.JWTClaimsRegistry().validate(decoded.claims)
    except (JoseError, ValueError) as e:
        raise TokenError(f"Invalid session token: {e}") from e
    return dict(decoded.claims)


def bearer_token(header: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None
