"""
Job Routes

GET /jobs - List active jobs (filters: search, location, type, remote)
POST /jobs - Post a job (employers)
GET /jobs/employer - Own jobs with applicant counts (employers)
GET /jobs/{job_id} - Get job details
DELETE /jobs/{job_id} - Delete own job with its applications (employers)
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from jobportal.core.auth import EMPLOYER, require_employer
from jobportal.schemas.schemas import JobCreate, JobResponse, EmployerJobResponse
from jobportal.services import user_service
from jobportal.services.job_service import JobService, format_job, parse_deadline
from jobportal.services.mongo_service import parse_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=List[JobResponse])
async def list_jobs(
    search: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[str] = Query(None, alias="type"),
    remote: Optional[bool] = None,
):
    """List Active jobs, newest first. Jobs past their deadline are closed first."""
    jobs = JobService().list_active(search=search, location=location, job_type=job_type, remote=remote)
    return [format_job(job) for job in jobs]


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(data: JobCreate, user: dict = Depends(require_employer)):
    """
    Post a new job.
    Company, size, industry and category fall back to the employer profile.
    """
    employer = user_service.find_user_by_id(parse_object_id(user["user_id"], "user ID"), EMPLOYER)
    if not employer:
        raise HTTPException(status_code=404, detail="Employer not found.")

    if not (data.title or "").strip() or not (data.description or "").strip():
        raise HTTPException(status_code=400, detail="Title and description are required.")
    if data.deadline and data.deadline.strip() and parse_deadline(data.deadline) is None:
        raise HTTPException(status_code=400, detail="Invalid deadline format.")

    service = JobService()
    job = service.create(service.build_document(data, employer))
    return format_job(job)


@router.get("/employer", response_model=List[EmployerJobResponse])
async def list_employer_jobs(user: dict = Depends(require_employer)):
    """All of the employer's jobs with real applicant and pending counts."""
    return JobService().list_for_employer(parse_object_id(user["user_id"], "user ID"))


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str):
    service = JobService()
    job = service.get(parse_object_id(job_id, "job ID"))
    if not job:
        raise HTTPException(status_code=404, detail="Job not found.")
    return format_job(service.refresh_status(job))


@router.delete("/{job_id}")
async def delete_job(job_id: str, user: dict = Depends(require_employer)):
    """Delete a job, its applications and every applicant's applied_jobs entry for it."""
    service = JobService()
    job = service.get(parse_object_id(job_id, "job ID"))
    if not job:
        raise HTTPException(status_code=404, detail="Job not found.")
    if str(job.get("employer_id")) != user["user_id"]:
        raise HTTPException(status_code=403, detail="You can only delete your own jobs.")

    result = service.delete_job(job["_id"])
    return {"message": "Job deleted successfully.", "success": True, **result}
