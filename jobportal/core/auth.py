"""
Authentication Utility - JWT cookie sessions and password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- auth_token cookie helpers
- FastAPI dependencies for protected routes
"""

import logging
from datetime import timedelta
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, Request, Response, status

from jobportal.core.config import get_settings
from jobportal.core.tokens import utcnow

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)

JOB_SEEKER = "job-seeker"
EMPLOYER = "employer"


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT session token. `data` carries user_id, role and username."""
    settings = get_settings()
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(days=settings.jwt_expire_days))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token. Returns None when invalid or expired."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        logger.info("Session token has expired")
        return None
    except JWTError as e:
        logger.warning("Session token verification failed: %s", e)
        return None


def create_session_token(user: dict) -> str:
    return create_access_token({
        "user_id": str(user["_id"]),
        "role": user["role"],
        "username": user["username"],
    })


def set_auth_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=60 * 60 * 24 * settings.jwt_expire_days,
        path="/",
    )


def clear_auth_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


async def get_current_user(request: Request) -> dict:
    """
    FastAPI dependency - Get the session payload from the auth_token cookie.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    token = request.cookies.get(get_settings().auth_cookie_name)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required.")

    payload = decode_token(token)
    if not payload or not payload.get("user_id") or payload.get("role") not in (JOB_SEEKER, EMPLOYER):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token.")

    return {
        "user_id": payload["user_id"],
        "role": payload["role"],
        "username": payload.get("username"),
    }


async def require_job_seeker(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require job-seeker role."""
    if user["role"] != JOB_SEEKER:
        raise HTTPException(status_code=403, detail="Access denied. Job seeker access only.")
    return user


async def require_employer(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require employer role."""
    if user["role"] != EMPLOYER:
        raise HTTPException(status_code=403, detail="Access denied. Employer access only.")
    return user
