"""
Job Service - job postings, deadline handling and cascade delete.

Deadlines are stored as the ISO string the employer submitted
("2025-06-30" or a full timestamp). A date-only deadline counts from
midnight UTC of that day. Active jobs whose deadline has passed are
flipped to Closed whenever jobs are read.
"""

import logging
import re
from datetime import datetime, timezone
from typing import List, Optional
from bson import ObjectId
from pymongo import DESCENDING
from pymongo.collection import Collection

from jobportal.core.tokens import utcnow
from jobportal.db.mongodb import COLLECTIONS, get_collection
from jobportal.schemas.schemas import ApplicationStatus, JobCreate, JobStatus
from jobportal.services.mongo_service import clean, format_date

logger = logging.getLogger(__name__)


def parse_deadline(deadline: Optional[str]) -> Optional[datetime]:
    """Parse a stored deadline. Returns None when absent or unreadable."""
    if not deadline:
        return None
    try:
        parsed = datetime.fromisoformat(deadline.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def deadline_passed(job: dict, now: Optional[datetime] = None) -> bool:
    deadline = parse_deadline(job.get("deadline"))
    if deadline is None:
        return False
    return (now or utcnow()) > deadline


def format_job(job: dict) -> dict:
    """Shape a job document for the API."""
    return {
        "id": str(job["_id"]),
        "title": job.get("title", ""),
        "company": job.get("company", ""),
        "location": job.get("location", ""),
        "salary": job.get("salary") or "",
        "type": job.get("type", ""),
        "remote": bool(job.get("remote")),
        "description": job.get("description", ""),
        "requirements": job.get("requirements") or [],
        "posted_date": format_date(job.get("posted_date")),
        "deadline": job.get("deadline") or None,
        "applicants": job.get("applicants") or 0,
        "status": job.get("status") or JobStatus.active.value,
        "employer_id": str(job["employer_id"]) if job.get("employer_id") else "",
        "category": job.get("category") or "",
        "experience": job.get("experience") or "",
        "benefits": job.get("benefits") or [],
        "company_size": job.get("company_size") or "",
        "industry": job.get("industry") or "",
    }


class JobService:
    """
    Handles the jobs collection.
    Applications of a job are touched only by delete_job's cascade.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["jobs"])

    def build_document(self, data: JobCreate, employer: dict) -> dict:
        """Fill gaps in the posted job from the employer's company profile."""
        now = utcnow()
        job_type = clean(data.type) or "Full-time"
        return {
            "employer_id": employer["_id"],
            "title": clean(data.title),
            "company": clean(data.company) or employer.get("name") or "Company Name",
            "location": clean(data.location),
            "salary": clean(data.salary),
            "type": job_type,
            "remote": data.remote,
            "description": clean(data.description),
            "requirements": data.requirements or [],
            "deadline": clean(data.deadline) or None,
            "status": data.status.value,
            "category": clean(data.category) or job_type,
            "experience": clean(data.experience),
            "benefits": data.benefits or [],
            "company_size": clean(data.company_size) or employer.get("size") or "",
            "industry": clean(data.industry) or employer.get("industry") or "",
            "applicants": 0,
            "posted_date": now,
            "created_at": now,
            "updated_at": now,
        }

    def create(self, doc: dict) -> dict:
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Created job %s (%s) for employer %s", result.inserted_id, doc["title"], doc["employer_id"])
        return doc

    def get(self, job_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": job_id})

    def close(self, job_id: ObjectId) -> None:
        self.collection.update_one(
            {"_id": job_id},
            {"$set": {"status": JobStatus.closed.value, "updated_at": utcnow()}}
        )

    def close_expired_jobs(self, query: Optional[dict] = None) -> int:
        """Flip Active jobs with a passed deadline to Closed. Returns how many."""
        now = utcnow()
        query = dict(query or {}, status=JobStatus.active.value, deadline={"$nin": [None, ""]})
        expired = [
            job["_id"] for job in self.collection.find(query, {"deadline": 1})
            if deadline_passed(job, now)
        ]
        if not expired:
            return 0
        result = self.collection.update_many(
            {"_id": {"$in": expired}},
            {"$set": {"status": JobStatus.closed.value, "updated_at": now}}
        )
        logger.info("Closed %d job(s) past their deadline", result.modified_count)
        return result.modified_count

    def refresh_status(self, job: dict) -> dict:
        """Close a single Active job on read if its deadline has passed."""
        if job.get("status") == JobStatus.active.value and deadline_passed(job):
            self.close(job["_id"])
            job["status"] = JobStatus.closed.value
        return job

    def list_active(
        self,
        search: Optional[str] = None,
        location: Optional[str] = None,
        job_type: Optional[str] = None,
        remote: Optional[bool] = None,
    ) -> List[dict]:
        """Active jobs, newest first, with optional filters."""
        self.close_expired_jobs()

        query = {"status": JobStatus.active.value}
        if search:
            pattern = {"$regex": _escape(search), "$options": "i"}
            query["$or"] = [{"title": pattern}, {"company": pattern}, {"description": pattern}]
        if location:
            query["location"] = {"$regex": _escape(location), "$options": "i"}
        if job_type:
            query["type"] = {"$regex": f"^{_escape(job_type)}$", "$options": "i"}
        if remote is not None:
            query["remote"] = remote

        return list(self.collection.find(query).sort("posted_date", DESCENDING))

    def list_for_employer(self, employer_id: ObjectId) -> List[dict]:
        """Employer's jobs, newest first, with real applicant and pending counts."""
        self.close_expired_jobs({"employer_id": employer_id})

        applications = get_collection(COLLECTIONS["applications"])
        jobs = []
        for job in self.collection.find({"employer_id": employer_id}).sort("posted_date", DESCENDING):
            formatted = format_job(job)
            formatted["applicants"] = applications.count_documents({"job_id": job["_id"]})
            formatted["pending_applications"] = applications.count_documents(
                {"job_id": job["_id"], "status": ApplicationStatus.pending.value}
            )
            jobs.append(formatted)
        return jobs

    def delete_job(self, job_id: ObjectId) -> dict:
        """
        Delete a job with its applications and every mirrored applied_jobs entry.
        Mirrors go first so a failure never leaves a mirror pointing at nothing.
        """
        applications = get_collection(COLLECTIONS["applications"])
        job_seekers = get_collection(COLLECTIONS["job_seekers"])

        seeker_ids = applications.distinct("job_seeker_id", {"job_id": job_id})
        mirrors = job_seekers.update_many(
            {"applied_jobs.job_id": job_id},
            {"$pull": {"applied_jobs": {"job_id": job_id}}}
        )
        deleted = applications.delete_many({"job_id": job_id})
        self.collection.delete_one({"_id": job_id})

        logger.info(
            "Deleted job %s: %d application(s), %d job seeker(s) updated",
            job_id, deleted.deleted_count, mirrors.modified_count
        )
        return {
            "applications_deleted": deleted.deleted_count,
            "job_seekers_updated": len(seeker_ids),
        }


def _escape(value: str) -> str:
    return re.escape(value.strip())
