from typing import Optional
from pydantic import BaseModel


class AuthSession(BaseModel):
    """The caller's authenticated session, passed explicitly into services."""
    user_id: str
    access_token: str
    email: Optional[str] = None


class TokenPayload(BaseModel):
    sub: str
    email: Optional[str] = None
    exp: Optional[int] = None
    jti: Optional[str] = None
