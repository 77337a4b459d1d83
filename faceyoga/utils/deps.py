from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from faceyoga.core.constants import RoleEnum
from faceyoga.core.database import SessionLocal
from faceyoga.core.security import decode_access_token
from faceyoga.models.profile import Profile
from faceyoga.schemas.auth import AuthSession, TokenPayload

http_bearer = HTTPBearer(auto_error=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_transactional_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def get_optional_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
) -> Optional[AuthSession]:
    """Resolve the bearer token into a session, or ``None`` when no token was sent.

    A token that is present but invalid is always rejected.
    """
    if credentials is None:
        return None
    try:
        payload = decode_access_token(credentials.credentials)
        token_data = TokenPayload(**payload)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )
    return AuthSession(
        user_id=token_data.sub,
        access_token=credentials.credentials,
        email=token_data.email,
    )

def require_session(session: Optional[AuthSession] = Depends(get_optional_session)) -> AuthSession:
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return session

def require_admin(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_session),
) -> AuthSession:
    profile = db.query(Profile).filter(Profile.user_id == session.user_id).first()
    if not profile or profile.role != RoleEnum.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return session
