"""
User Routes (either role)

GET /user/profile - Name, email and role of the signed-in account
PATCH /user/profile - Update first/last name
PATCH /user/settings - Change username and/or password
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Response
from pymongo.errors import DuplicateKeyError

from jobportal.core.auth import (
    get_current_user, hash_password, verify_password, create_session_token, set_auth_cookie
)
from jobportal.core.retry import retry_operation
from jobportal.schemas.schemas import SettingsUpdate, UserNameUpdate, UserSummary, MessageResponse
from jobportal.services import user_service
from jobportal.services.mongo_service import parse_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["User"])


def _load_user(user: dict) -> dict:
    user_id = parse_object_id(user["user_id"], "user ID")
    doc = retry_operation(lambda: user_service.find_user_by_id(user_id, user["role"]))
    if not doc:
        raise HTTPException(status_code=404, detail="User not found.")
    return doc


@router.get("/profile", response_model=UserSummary)
def get_profile(user: dict = Depends(get_current_user)):
    doc = _load_user(user)
    return user_service.user_summary(
        doc, email=doc.get("email"), is_email_verified=bool(doc.get("is_email_verified"))
    )


@router.patch("/profile", response_model=UserSummary)
def update_profile(data: UserNameUpdate, user: dict = Depends(get_current_user)):
    """Update first and/or last name."""
    doc = _load_user(user)

    fields = {}
    if data.first_name is not None:
        fields["first_name"] = data.first_name.strip()
    if data.last_name is not None:
        fields["last_name"] = data.last_name.strip()
    if not fields:
        raise HTTPException(status_code=400, detail="Nothing to update.")
    if any(not value for value in fields.values()):
        raise HTTPException(status_code=400, detail="First and last name cannot be empty.")

    found, updated = retry_operation(lambda: user_service.update_user(user["role"], doc["_id"], fields))
    if not found:
        raise HTTPException(status_code=404, detail="User not found.")
    return user_service.user_summary(
        updated, email=updated.get("email"), is_email_verified=bool(updated.get("is_email_verified"))
    )


@router.patch("/settings", response_model=MessageResponse)
def update_settings(data: SettingsUpdate, response: Response, user: dict = Depends(get_current_user)):
    """
    Change username and/or password.

    A password change needs the current password. A new username gets a
    fresh session cookie since the token carries the username.
    """
    if data.username is None and not data.new_password:
        raise HTTPException(status_code=400, detail="Nothing to update.")

    doc = _load_user(user)
    fields = {}

    if data.username is not None:
        username = data.username.strip().lower()
        if not username:
            raise HTTPException(status_code=400, detail="Username cannot be empty.")
        if username != doc["username"]:
            if user_service.username_taken_by_other(username, doc["_id"]):
                raise HTTPException(status_code=409, detail="Username is already taken.")
            fields["username"] = username

    if data.new_password:
        if not data.current_password:
            raise HTTPException(status_code=400, detail="Current password is required to set a new password.")
        if len(data.new_password) < 6:
            raise HTTPException(status_code=400, detail="Password must be at least 6 characters long.")
        if data.new_password != data.confirm_password:
            raise HTTPException(status_code=400, detail="Passwords do not match.")
        if not verify_password(data.current_password, doc.get("password_hash")):
            raise HTTPException(status_code=403, detail="Current password is incorrect.")
        fields["password_hash"] = hash_password(data.new_password)

    if not fields:
        raise HTTPException(status_code=400, detail="No changes to update.")

    try:
        found, updated = retry_operation(lambda: user_service.update_user(user["role"], doc["_id"], fields))
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="Username is already taken.")
    if not found:
        raise HTTPException(status_code=404, detail="User not found.")

    if "username" in fields:
        set_auth_cookie(response, create_session_token(updated))
        logger.info("User %s renamed to %s", doc["username"], fields["username"])
    if "password_hash" in fields:
        logger.info("Password changed for %s", updated["username"])

    return MessageResponse(message="Settings updated successfully!")
