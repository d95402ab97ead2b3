"""Session token utilities."""

import base64
import hashlib
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from pydantic import BaseModel, Field


class TokenPayload(BaseModel):
    """Decoded session token data."""

    sub: str  # user_id
    exp: datetime | None = None
    iat: datetime | None = None
    email: Optional[str] = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)


def hash_session_token(token: str) -> str:
    """Hash a session cookie value for use as a lookup key."""
    return hashlib.sha256(token.encode()).hexdigest()


def extract_access_token(cookie_value: str) -> str | None:
    """
    Pull the access token out of a session cookie value.

    Accepts a raw JWT, a JSON object with ``access_token``, a JSON array whose
    first element is the token, or any of those encoded as ``base64-<data>``.
    """
    value = cookie_value.strip()
    if not value:
        return None

    if value.startswith("base64-"):
        try:
            value = base64.urlsafe_b64decode(
                value[7:] + "=" * (-len(value[7:]) % 4)
            ).decode()
        except (ValueError, UnicodeDecodeError):
            return None

    if value[:1] in ("{", "["):
        try:
            data = json.loads(value)
        except ValueError:
            return None
        if isinstance(data, dict):
            token = data.get("access_token")
        elif isinstance(data, list) and data:
            token = data[0]
        else:
            token = None
        return token if isinstance(token, str) and token else None

    return value


def create_session_token(
    user_id: str,
    jwt_secret: str,
    email: Optional[str] = None,
    metadata: Optional[dict[str, Any]] = None,
    expires_hours: int = 24,
) -> str:
    """
    Create a signed session token.

    Mirrors the access tokens issued by the session provider so the console
    can run locally without one.

    Args:
        user_id: The user's ID
        jwt_secret: HS256 signing secret
        email: Optional user email
        metadata: User metadata (``apiKey``, ``chatbotId``)
        expires_hours: Token expiration in hours

    Returns:
        Signed JWT token string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "user_metadata": metadata or {},
        "iat": now,
        "exp": now + timedelta(hours=expires_hours),
    }
    return jwt.encode(payload, jwt_secret, algorithm="HS256")


def decode_session_token(
    token: str,
    jwt_secret: str | None,
    verify: bool = True,
) -> TokenPayload:
    """
    Decode a session token.

    Args:
        token: The JWT token to decode
        jwt_secret: HS256 secret used to verify the signature
        verify: Skip signature and expiry checks when False

    Returns:
        Decoded token payload

    Raises:
        jwt.InvalidTokenError: If token is invalid or expired
    """
    if verify:
        payload = jwt.decode(
            token,
            jwt_secret,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )
    else:
        payload = jwt.decode(token, options={"verify_signature": False})

    if not payload.get("sub"):
        raise jwt.InvalidTokenError("Token has no subject")

    exp, iat = payload.get("exp"), payload.get("iat")
    return TokenPayload(
        sub=payload["sub"],
        exp=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
        iat=datetime.fromtimestamp(iat, tz=timezone.utc) if iat else None,
        email=payload.get("email"),
        user_metadata=payload.get("user_metadata") or {},
    )
