"""
Job Seeker Routes

GET /job-seeker/profile - Own profile, or ?id= for employers viewing an applicant
PATCH /job-seeker/profile - Update own profile (partial)
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from jobportal.core.auth import EMPLOYER, JOB_SEEKER, get_current_user, require_job_seeker
from jobportal.core.retry import retry_operation
from jobportal.schemas.schemas import JobSeekerProfileUpdate, JobSeekerProfileResponse
from jobportal.services import user_service
from jobportal.services.mongo_service import parse_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job-seeker", tags=["Job Seekers"])


def is_job_seeker_profile_complete(doc: dict) -> bool:
    return bool(doc.get("first_name") and doc.get("last_name") and doc.get("title"))


@router.get("/profile", response_model=JobSeekerProfileResponse)
def get_profile(id: Optional[str] = Query(None), user: dict = Depends(get_current_user)):
    """
    Job seekers get their own profile.
    Employers pass ?id= to look at an applicant.
    """
    if id:
        if user["role"] != EMPLOYER:
            raise HTTPException(status_code=403, detail="Access denied. Employer access only.")
        target_id = parse_object_id(id, "job seeker ID")
    else:
        if user["role"] != JOB_SEEKER:
            raise HTTPException(status_code=403, detail="Access denied. Job seeker access only.")
        target_id = parse_object_id(user["user_id"], "user ID")

    profile = retry_operation(lambda: user_service.find_user_safe_by_id(target_id, JOB_SEEKER))
    if not profile:
        raise HTTPException(status_code=404, detail="Job seeker profile not found.")
    return profile


@router.patch("/profile", response_model=JobSeekerProfileResponse)
def update_profile(data: JobSeekerProfileUpdate, user: dict = Depends(require_job_seeker)):
    """Update profile. Only provided fields are updated."""
    user_id = parse_object_id(user["user_id"], "user ID")
    current = retry_operation(lambda: user_service.find_user_by_id(user_id, JOB_SEEKER))
    if not current:
        raise HTTPException(status_code=404, detail="Job seeker profile not found.")

    fields = {key: value for key, value in data.model_dump(exclude_unset=True).items() if value is not None}
    for key, value in fields.items():
        if isinstance(value, str):
            fields[key] = value.strip()
    if "email" in fields:
        fields["email"] = fields["email"].lower()

    fields["is_profile_complete"] = is_job_seeker_profile_complete(dict(current, **fields))

    found, updated = retry_operation(lambda: user_service.update_user(JOB_SEEKER, user_id, fields))
    if not found:
        raise HTTPException(status_code=404, detail="Job seeker profile not found.")

    logger.info("Job seeker %s updated profile fields %s", user_id, sorted(fields))
    return user_service.serialize_user(updated)
