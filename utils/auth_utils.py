import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext

from config import Settings, get_settings
from models import CurrentUser

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches get_current_user as None
security = HTTPBearer(auto_error=False)


def sign_token(claims: dict, settings: Settings) -> str:
    to_encode = claims.copy()
    now = datetime.now(timezone.utc)
    to_encode.update({
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
    })
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: Settings) -> CurrentUser:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")

    email = payload.get("email")
    if not isinstance(email, str):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")
    return CurrentUser(email=email, id=str(payload.get("id", "")))


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided")
    user = verify_token(credentials.credentials, settings)
    logger.info("Authenticated user: %s (%s)", user.email, user.id)
    return user


# ---------------------------
# Passwords
# ---------------------------

@lru_cache
def _crypt_context(scheme: str) -> CryptContext:
    return CryptContext(schemes=[scheme], deprecated="auto")


def hash_password(password: str, settings: Settings) -> str:
    return _crypt_context(settings.password_scheme).hash(password)


def verify_password(plain_password: str, stored_password: str, settings: Settings) -> bool:
    try:
        return _crypt_context(settings.password_scheme).verify(plain_password, stored_password)
    except ValueError:
        # stored value was not produced by the configured scheme
        return False
