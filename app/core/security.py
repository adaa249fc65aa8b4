"""
Security utilities: password hashing, JWT tokens and role dependencies
"""
import uuid
from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.timezone import now_utc
from app.db.session import get_db
from app.models.user import User, UserRole

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"
RESET_TOKEN = "reset"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def _encode(claims: dict, expires_delta: timedelta) -> str:
    to_encode = dict(claims)
    to_encode["exp"] = now_utc() + expires_delta
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(user_id: uuid.UUID, role: str) -> str:
    return _encode(
        {"sub": str(user_id), "role": str(role), "type": ACCESS_TOKEN},
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: uuid.UUID) -> str:
    return _encode(
        {"sub": str(user_id), "type": REFRESH_TOKEN},
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def password_fingerprint(password_hash: str) -> str:
    """Tail of the stored hash; changes whenever the password changes"""
    return password_hash[-12:]


def create_reset_token(user: User) -> str:
    """Single-use in practice: the token dies as soon as the password is changed"""
    return _encode(
        {"sub": str(user.id), "type": RESET_TOKEN, "fp": password_fingerprint(user.password_hash)},
        timedelta(hours=settings.RESET_TOKEN_EXPIRE_HOURS),
    )


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def parse_user_id(payload: dict) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(payload.get("sub", ""))
    except (TypeError, ValueError):
        return None


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = decode_token(token)
    if payload.get("type") != ACCESS_TOKEN:
        raise credentials_exception

    user_id = parse_user_id(payload)
    if user_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled"
        )
    return user


def require_roles(*roles: UserRole):
    """Dependency factory: allow only the given roles"""
    allowed = {role.value for role in roles}

    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions"
            )
        return current_user

    return checker


require_admin = require_roles(UserRole.ADMIN)
require_student = require_roles(UserRole.STUDENT)
require_teacher_or_admin = require_roles(UserRole.TEACHER, UserRole.ADMIN)


def get_user_from_reset_token(token: str, db: Session) -> User:
    invalid = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Invalid or expired reset token"
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise invalid
    if payload.get("type") != RESET_TOKEN:
        raise invalid

    user_id = parse_user_id(payload)
    user = db.query(User).filter(User.id == user_id).first() if user_id else None
    if user is None or payload.get("fp") != password_fingerprint(user.password_hash):
        raise invalid
    return user
