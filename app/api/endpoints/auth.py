"""
Authentication Endpoints
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.models.user import User
from app.schemas.auth import (
    Token, LoginRequest, RefreshTokenRequest, ChangePasswordRequest, UserInfo,
    ForgotPasswordRequest, ForgotUsernameRequest, ResetPasswordRequest
)
from app.schemas.user import UserRegister, UserResponse
from app.services.email import (
    EmailDeliveryError, send_email, forgot_password_email_html, forgot_username_email_html
)
from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    create_refresh_token,
    create_reset_token,
    decode_token,
    get_current_user,
    get_user_from_reset_token,
    parse_user_id,
    REFRESH_TOKEN,
)

logger = logging.getLogger(__name__)
router = APIRouter()

# Same answer whether or not the account exists
RECOVERY_MESSAGE = "If an account exists for that email, a message has been sent"


def _authenticate(db: Session, username: str, password: str) -> User:
    user = db.query(User).filter(User.username == username).first()

    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled"
        )
    return user


def _issue_tokens(user: User) -> Token:
    return Token(
        access_token=create_access_token(user.id, user.role),
        refresh_token=create_refresh_token(user.id),
        token_type="bearer",
        user=UserInfo.model_validate(user),
    )


def _find_by_email(db: Session, email: str) -> User:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """Login and get access token"""
    user = _authenticate(db, form_data.username, form_data.password)
    logger.info(f"User {user.username} logged in")
    return _issue_tokens(user)


@router.post("/login/json", response_model=Token)
async def login_json(
    request: LoginRequest,
    db: Session = Depends(get_db)
):
    """Login with JSON body"""
    user = _authenticate(db, request.username, request.password)
    logger.info(f"User {user.username} logged in")
    return _issue_tokens(user)


@router.post("/refresh", response_model=Token)
async def refresh_token(
    request: RefreshTokenRequest,
    db: Session = Depends(get_db)
):
    """Refresh access token using refresh token"""
    payload = decode_token(request.refresh_token)

    if payload.get("type") != REFRESH_TOKEN:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token"
        )

    user_id = parse_user_id(payload)
    user = db.query(User).filter(User.id == user_id).first() if user_id else None

    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )

    return _issue_tokens(user)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """Register a new student or teacher account"""
    if db.query(User).filter(User.username == user_data.username).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already exists"
        )

    if _find_by_email(db, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists"
        )

    try:
        user = User(
            username=user_data.username,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            role=user_data.role.value,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            is_active=True
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    except Exception as e:
        logger.error(f"Error during registration: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Registration failed")

    logger.info(f"Registered {user.role} account {user.username}")
    return user


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return current_user


@router.post("/change-password")
async def change_password(
    request: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change user password"""
    if not verify_password(request.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Incorrect current password"
        )

    try:
        current_user.password_hash = get_password_hash(request.new_password)
        db.commit()
    except Exception as e:
        logger.error(f"Error changing password: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Could not change password")

    return {"message": "Password changed successfully"}


@router.post("/forgot-password")
async def forgot_password(
    request: ForgotPasswordRequest,
    db: Session = Depends(get_db)
):
    """Email a password reset link"""
    user = _find_by_email(db, request.email)
    if user and user.is_active:
        reset_link = f"{settings.FRONTEND_URL}/reset-password?token={create_reset_token(user)}"
        try:
            send_email(user.email, "Reset your password", forgot_password_email_html(user.username, reset_link))
        except EmailDeliveryError as e:
            logger.error(f"Could not send reset email to user {user.id}: {e}")
    return {"message": RECOVERY_MESSAGE}


@router.post("/forgot-username")
async def forgot_username(
    request: ForgotUsernameRequest,
    db: Session = Depends(get_db)
):
    """Email the username registered for an address"""
    user = _find_by_email(db, request.email)
    if user and user.is_active:
        try:
            send_email(user.email, "Your username", forgot_username_email_html(user.username))
        except EmailDeliveryError as e:
            logger.error(f"Could not send username reminder to user {user.id}: {e}")
    return {"message": RECOVERY_MESSAGE}


@router.post("/reset-password")
async def reset_password(
    request: ResetPasswordRequest,
    db: Session = Depends(get_db)
):
    """Set a new password from an emailed reset token"""
    user = get_user_from_reset_token(request.token, db)

    try:
        user.password_hash = get_password_hash(request.new_password)
        db.commit()
    except Exception as e:
        logger.error(f"Error resetting password: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Could not reset password")

    logger.info(f"Password reset for {user.username}")
    return {"message": "Password has been reset"}
