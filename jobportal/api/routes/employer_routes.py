"""
Employer Routes

GET /employer/profile - Get own company profile
PATCH /employer/profile - Update company profile (partial)
"""

import logging
from fastapi import APIRouter, HTTPException, Depends

from jobportal.core.auth import EMPLOYER, require_employer
from jobportal.core.retry import retry_operation
from jobportal.schemas.schemas import EmployerProfileUpdate, EmployerProfileResponse
from jobportal.services import user_service
from jobportal.services.mongo_service import parse_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employer", tags=["Employers"])


def is_employer_profile_complete(doc: dict) -> bool:
    return bool(doc.get("name") and doc.get("industry"))


@router.get("/profile", response_model=EmployerProfileResponse)
def get_profile(user: dict = Depends(require_employer)):
    """Get current employer's company profile."""
    user_id = parse_object_id(user["user_id"], "user ID")
    profile = retry_operation(lambda: user_service.find_user_safe_by_id(user_id, EMPLOYER))
    if not profile:
        raise HTTPException(status_code=404, detail="Employer profile not found.")
    return profile


@router.patch("/profile", response_model=EmployerProfileResponse)
def update_profile(data: EmployerProfileUpdate, user: dict = Depends(require_employer)):
    """Update company profile. Only provided fields are updated."""
    user_id = parse_object_id(user["user_id"], "user ID")
    current = retry_operation(lambda: user_service.find_user_by_id(user_id, EMPLOYER))
    if not current:
        raise HTTPException(status_code=404, detail="Employer profile not found.")

    fields = {key: value for key, value in data.model_dump(exclude_unset=True).items() if value is not None}
    for key, value in fields.items():
        if isinstance(value, str):
            fields[key] = value.strip()

    fields["is_profile_complete"] = is_employer_profile_complete(dict(current, **fields))

    found, updated = retry_operation(lambda: user_service.update_user(EMPLOYER, user_id, fields))
    if not found:
        raise HTTPException(status_code=404, detail="Employer profile not found.")

    logger.info("Employer %s updated profile fields %s", user_id, sorted(fields))
    return user_service.serialize_user(updated)
