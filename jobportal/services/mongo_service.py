"""
MongoDB helpers shared by the services.

Documents leave the database with ObjectIds and datetimes; the API speaks
plain strings. These helpers do the conversion in one place.
"""

from datetime import datetime
from typing import Optional
from bson import ObjectId
from fastapi import HTTPException

from jobportal.core.tokens import utcnow


def parse_object_id(value, label: str = "ID") -> ObjectId:
    """Turn a request id into an ObjectId, or fail with 400."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value) or len(value) != 24:
        raise HTTPException(status_code=400, detail=f"Invalid {label} format.")
    return ObjectId(value)


def format_date(value: Optional[datetime]) -> str:
    """YYYY-MM-DD, falling back to today like the listings expect."""
    return (value or utcnow()).strftime("%Y-%m-%d")


def clean(value) -> str:
    """Trimmed string, '' for None."""
    if value is None:
        return ""
    return str(value).strip()
