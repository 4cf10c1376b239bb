"""
Application Routes

POST /applications - Apply to a job (job seekers)
GET /applications?job_id= - Applicants of an own job (employers)
PATCH /applications/{application_id} - Set status/rating (employers)
GET /my-applications - Own applications (job seekers)
DELETE /my-applications/{application_id} - Withdraw an application (job seekers)
"""

import logging
from typing import List
from fastapi import APIRouter, HTTPException, Depends, Query
from pymongo.errors import DuplicateKeyError

from jobportal.core.auth import JOB_SEEKER, require_employer, require_job_seeker
from jobportal.schemas.schemas import (
    ApplicationCreate, ApplicationUpdate, ApplicantResponse, MyApplicationResponse, JobStatus
)
from jobportal.services import user_service
from jobportal.services.application_service import ApplicationService, format_application
from jobportal.services.job_service import JobService, deadline_passed
from jobportal.services.mongo_service import parse_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])
my_router = APIRouter(prefix="/my-applications", tags=["Applications"])

ALREADY_APPLIED = "You have already applied for this job."


def _owned_job(job_id, user: dict, action: str) -> dict:
    job = JobService().get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found.")
    if str(job.get("employer_id")) != user["user_id"]:
        raise HTTPException(status_code=403, detail=f"You can only {action} applications for your own jobs.")
    return job


@router.post("", status_code=201)
async def apply(data: ApplicationCreate, user: dict = Depends(require_job_seeker)):
    """
    Apply to an Active job.

    The application is written to the shared collection and mirrored into
    the job seeker's applied_jobs.
    """
    job_id = parse_object_id(data.job_id, "job ID")
    jobs = JobService()
    job = jobs.get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found.")
    if job.get("status") != JobStatus.active.value:
        raise HTTPException(status_code=400, detail="This job is no longer accepting applications.")
    if deadline_passed(job):
        jobs.close(job_id)
        raise HTTPException(status_code=400, detail="The application deadline for this job has passed.")

    job_seeker = user_service.find_user_by_id(parse_object_id(user["user_id"], "user ID"), JOB_SEEKER)
    if not job_seeker:
        raise HTTPException(status_code=404, detail="Job seeker not found.")

    service = ApplicationService()
    if service.has_applied(job_id, job_seeker):
        raise HTTPException(status_code=400, detail=ALREADY_APPLIED)
    if not job_seeker.get("first_name") or not job_seeker.get("last_name"):
        raise HTTPException(
            status_code=400,
            detail="Please complete your profile with your first and last name before applying."
        )

    try:
        application = service.create(job, job_seeker, data.cover_letter, data.resume)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail=ALREADY_APPLIED)

    return {
        "message": "Application submitted successfully!",
        "success": True,
        "application": format_application(application),
    }


@router.get("", response_model=List[ApplicantResponse])
async def list_applications(job_id: str = Query(...), user: dict = Depends(require_employer)):
    """Applicants of one of the employer's jobs, newest first."""
    job = _owned_job(parse_object_id(job_id, "job ID"), user, "view")
    return ApplicationService().list_for_job(job["_id"])


@router.patch("/{application_id}")
async def update_application(
    application_id: str, data: ApplicationUpdate, user: dict = Depends(require_employer)
):
    """Set status and/or rating. Only the job's owner may do this."""
    service = ApplicationService()
    application = service.get(parse_object_id(application_id, "application ID"))
    if not application:
        raise HTTPException(status_code=404, detail="Application not found.")
    _owned_job(application["job_id"], user, "update")

    if data.status is None and data.rating is None:
        raise HTTPException(status_code=400, detail="Nothing to update.")

    status = data.status.value if data.status else None
    updated = service.update(application, status, data.rating)
    return {
        "message": "Application updated successfully!",
        "success": True,
        "application": format_application(updated),
    }


@my_router.get("", response_model=List[MyApplicationResponse])
async def my_applications(user: dict = Depends(require_job_seeker)):
    job_seeker = user_service.find_user_by_id(parse_object_id(user["user_id"], "user ID"), JOB_SEEKER)
    if not job_seeker:
        raise HTTPException(status_code=404, detail="Job seeker not found.")
    return ApplicationService().list_for_job_seeker(job_seeker)


@my_router.delete("/{application_id}")
async def withdraw_application(application_id: str, user: dict = Depends(require_job_seeker)):
    """Withdraw an own application from both copies."""
    service = ApplicationService()
    application = service.get(parse_object_id(application_id, "application ID"))
    if not application:
        raise HTTPException(status_code=404, detail="Application not found.")
    if str(application["job_seeker_id"]) != user["user_id"]:
        raise HTTPException(status_code=403, detail="You can only withdraw your own applications.")

    service.delete(application)
    return {"message": "Application withdrawn successfully.", "success": True}
