"""
Authentication Routes

POST /auth/register - Register a job seeker or employer account
POST /auth/login - Login and receive the auth_token cookie
POST /auth/logout - Clear the auth_token cookie
GET /auth/me - Get current user info
GET /auth/verify-email?token= - Confirm an email address
POST /auth/forgot-password - Mail a temporary password
POST /auth/reset-password - Set a new password with a reset token
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Query, Response
from pymongo.errors import DuplicateKeyError

from jobportal.core.auth import (
    hash_password, verify_password, create_session_token, set_auth_cookie,
    clear_auth_cookie, get_current_user
)
from jobportal.core.config import get_settings
from jobportal.core.tokens import (
    generate_secure_token, generate_temporary_password, generate_token_expiry,
    is_token_expired
)
from jobportal.schemas.schemas import (
    RegisterRequest, LoginRequest, ForgotPasswordRequest, ResetPasswordRequest,
    AuthResponse, MessageResponse
)
from jobportal.services import user_service
from jobportal.services.email_service import send_new_password_email, send_verification_email
from jobportal.services.mongo_service import parse_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

FORGOT_PASSWORD_MESSAGE = (
    "If an account with that username exists, a new password has been emailed to the registered address."
)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new account in the collection matching its role.

    No auto-login: the user verifies the email, then logs in.
    """
    settings = get_settings()
    username = request.username.strip().lower()
    email = str(request.email).strip().lower()
    if not username or not request.first_name.strip() or not request.last_name.strip():
        raise HTTPException(status_code=400, detail="Missing required fields.")

    if user_service.username_or_email_taken(username, email):
        raise HTTPException(status_code=409, detail="User with this username or email already exists.")

    doc = user_service.new_user_document(
        role=request.role.value,
        username=username,
        password_hash=hash_password(request.password),
        first_name=request.first_name.strip(),
        last_name=request.last_name.strip(),
        email=email,
        verification_token=generate_secure_token(),
        verification_expiry=generate_token_expiry(settings.email_token_minutes),
    )
    try:
        doc["_id"] = user_service.collection_for_role(request.role.value).insert_one(doc).inserted_id
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="User with this username or email already exists.")

    logger.info("Registered %s account %s", doc["role"], username)
    send_verification_email(email, doc["email_verification_token"], doc["first_name"])

    return AuthResponse(
        message="Registration successful! Please check your email to verify your account.",
        user=user_service.user_summary(doc, email=email, is_email_verified=False),
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, response: Response):
    """
    Login and receive the auth_token cookie (HttpOnly, 7 days).

    Without a role both account collections are searched.
    """
    role = request.role.value if request.role else None
    user = user_service.find_by_username(request.username, role)

    if not user or not verify_password(request.password, user.get("password_hash")):
        raise HTTPException(status_code=401, detail="Invalid credentials.")

    if get_settings().require_email_verification and not user.get("is_email_verified"):
        raise HTTPException(status_code=403, detail="Please verify your email first.")

    set_auth_cookie(response, create_session_token(user))
    logger.info("Login for %s (%s)", user["username"], user["role"])

    return AuthResponse(message="Login successful!", user=user_service.user_summary(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Drop the session cookie."""
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out successfully.")


@router.get("/me")
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's profile, without secrets."""
    profile = user_service.find_user_safe_by_id(parse_object_id(user["user_id"], "user ID"), user["role"])
    if not profile:
        raise HTTPException(status_code=404, detail="User not found.")
    return profile


@router.get("/verify-email", response_model=MessageResponse)
async def verify_email(token: str = Query("")):
    """Confirm the address behind a verification link."""
    if not token:
        raise HTTPException(status_code=400, detail="Verification token is required.")

    user = user_service.find_by_field("email_verification_token", token)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid or expired verification token.")

    if user.get("is_email_verified"):
        return MessageResponse(message="Email is already verified.")

    if is_token_expired(user.get("email_verification_token_expiry")):
        raise HTTPException(status_code=400, detail="Verification token has expired. Please request a new one.")

    user_service.update_user(user["role"], user["_id"], {
        "is_email_verified": True,
        "email_verification_token": "",
        "email_verification_token_expiry": None,
    })
    return MessageResponse(message="Email verified successfully! You can now log in.")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(request: ForgotPasswordRequest):
    """
    Mail a temporary password to the account's email.

    Always answers with the same message so usernames cannot be probed.
    The password only changes once the mail went out.
    """
    username = (request.username or "").strip().lower()
    user = user_service.find_by_username(username) if username else None

    if user and user.get("email"):
        settings = get_settings()
        new_password = generate_temporary_password(12)
        reset_token = generate_secure_token()
        try:
            sent = send_new_password_email(user["email"], new_password, user.get("first_name"), reset_token)
        except Exception as e:
            logger.error("Failed to send new password email to %s: %s", user["email"], e)
            sent = False

        if sent:
            user_service.update_user(user["role"], user["_id"], {
                "password_hash": hash_password(new_password),
                "password_reset_token": reset_token,
                "password_reset_token_expiry": generate_token_expiry(settings.email_token_minutes),
            })
            logger.info("Temporary password issued for %s", user["username"])
        else:
            logger.warning("Skipping password update for %s because email could not be sent", user["username"])
    else:
        logger.warning("Forgot password: username not found or email missing: %s", username)

    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest):
    """Set a new password using the token from the password mail."""
    user = user_service.find_by_field("password_reset_token", request.token)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token.")

    if is_token_expired(user.get("password_reset_token_expiry")):
        raise HTTPException(status_code=400, detail="Reset token has expired. Please request a new one.")

    if not user.get("is_email_verified"):
        raise HTTPException(status_code=403, detail="Please verify your email first.")

    user_service.update_user(user["role"], user["_id"], {
        "password_hash": hash_password(request.new_password),
        "password_reset_token": "",
        "password_reset_token_expiry": None,
    })
    logger.info("Password reset for %s", user["username"])
    return MessageResponse(message="Password reset successfully! You can now log in with your new password.")
