"""
User Service - role-based dispatch to the two account collections.

Job seekers and employers live in separate collections but share the same
identity fields (username, password_hash, role, verification and reset
tokens). Lookups that do not know the role search job seekers first, then
employers.
"""

import logging
from typing import Optional, Tuple
from bson import ObjectId
from pymongo.collection import Collection

from jobportal.core.auth import EMPLOYER, JOB_SEEKER
from jobportal.core.tokens import utcnow
from jobportal.db.mongodb import COLLECTIONS, get_collection

logger = logging.getLogger(__name__)

# Never sent back to a client
PRIVATE_FIELDS = (
    "password_hash",
    "email_verification_token",
    "email_verification_token_expiry",
    "password_reset_token",
    "password_reset_token_expiry",
)


def collection_for_role(role: str) -> Collection:
    if role == JOB_SEEKER:
        return get_collection(COLLECTIONS["job_seekers"])
    if role == EMPLOYER:
        return get_collection(COLLECTIONS["employers"])
    raise ValueError(f"Unknown role: {role}")


def user_collections():
    return [collection_for_role(JOB_SEEKER), collection_for_role(EMPLOYER)]


def new_user_document(
    role: str,
    username: str,
    password_hash: str,
    first_name: str,
    last_name: str,
    email: str,
    verification_token: str,
    verification_expiry,
) -> dict:
    """Fresh account document with every profile field defaulted."""
    now = utcnow()
    doc = {
        "username": username,
        "password_hash": password_hash,
        "role": role,
        "is_email_verified": False,
        "email_verification_token": verification_token,
        "email_verification_token_expiry": verification_expiry,
        "password_reset_token": "",
        "password_reset_token_expiry": None,
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "phone": "",
        "location": "",
        "website": "",
        "linkedin": "",
        "photo": "",
        "is_profile_complete": False,
        "created_at": now,
        "updated_at": now,
    }
    if role == JOB_SEEKER:
        doc.update({
            "title": "",
            "bio": "",
            "skills": [],
            "github": "",
            "availability": "",
            "salary_expectation": "",
            "resume_url": "",
            "applied_jobs": [],
        })
    else:
        doc.update({
            "name": "",
            "industry": "",
            "size": "",
            "founded": "",
            "description": "",
            "mission": "",
            "specialties": [],
        })
    return doc


def find_by_username(username: str, role: Optional[str] = None) -> Optional[dict]:
    username = username.strip().lower()
    if role:
        return collection_for_role(role).find_one({"username": username})
    return find_by_field("username", username)


def find_by_field(field: str, value) -> Optional[dict]:
    """First match across job seekers, then employers."""
    for collection in user_collections():
        doc = collection.find_one({field: value})
        if doc:
            return doc
    return None


def username_or_email_taken(username: str, email: str) -> bool:
    query = {"$or": [{"username": username}, {"email": email}]}
    return any(collection.find_one(query) for collection in user_collections())


def username_taken_by_other(username: str, user_id: ObjectId) -> bool:
    query = {"username": username, "_id": {"$ne": user_id}}
    return any(collection.find_one(query) for collection in user_collections())


def find_user_by_id(user_id: ObjectId, role: Optional[str] = None) -> Optional[dict]:
    if role:
        return collection_for_role(role).find_one({"_id": user_id})
    return find_by_field("_id", user_id)


def serialize_user(doc: dict) -> dict:
    """Safe view of an account: ids as strings, no secrets."""
    safe = {k: v for k, v in doc.items() if k not in PRIVATE_FIELDS}
    safe["id"] = str(safe.pop("_id"))
    for entry in safe.get("applied_jobs", []):
        for key in ("job_id", "application_id"):
            if isinstance(entry.get(key), ObjectId):
                entry[key] = str(entry[key])
    return safe


def find_user_safe_by_id(user_id: ObjectId, role: Optional[str] = None) -> Optional[dict]:
    doc = find_user_by_id(user_id, role)
    return serialize_user(doc) if doc else None


def update_user(role: str, user_id: ObjectId, fields: dict) -> Tuple[bool, Optional[dict]]:
    """Apply $set and return (found, updated document)."""
    fields = dict(fields, updated_at=utcnow())
    collection = collection_for_role(role)
    result = collection.update_one({"_id": user_id}, {"$set": fields})
    if result.matched_count == 0:
        return False, None
    return True, collection.find_one({"_id": user_id})


def user_summary(doc: dict, **extra) -> dict:
    summary = {
        "id": str(doc["_id"]),
        "username": doc["username"],
        "first_name": doc.get("first_name"),
        "last_name": doc.get("last_name"),
        "role": doc["role"],
    }
    summary.update(extra)
    return summary
