from typing import Any, Dict

from jose import jwt

from faceyoga.core.config import settings


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify a token issued by the auth provider and return its claims.

    Raises ``jose.JWTError`` when the signature, expiry or audience is invalid.
    """
    options = {"verify_aud": settings.AUTH_JWT_AUDIENCE is not None}
    return jwt.decode(
        token,
        settings.AUTH_JWT_SECRET,
        algorithms=[settings.AUTH_JWT_ALGORITHM],
        audience=settings.AUTH_JWT_AUDIENCE,
        options=options,
    )

