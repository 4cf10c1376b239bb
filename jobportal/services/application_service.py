"""
Application Service - the dual-written application record.

Every application lives in two places:
1. the shared `applications` collection (what employers read)
2. an entry in the applicant's `applied_jobs` array (what "my applications" reads)

Both copies are written on create, update and delete. There is no
transaction: create removes the shared record again when the mirror push
fails, delete removes the mirror before the record.
"""

import logging
from typing import List, Optional
from bson import ObjectId
from pymongo import DESCENDING
from pymongo.collection import Collection

from jobportal.core.tokens import utcnow
from jobportal.db.mongodb import COLLECTIONS, get_collection
from jobportal.schemas.schemas import ApplicationStatus
from jobportal.services.mongo_service import clean, format_date

logger = logging.getLogger(__name__)

APPLICANT_FIELDS = ("skills", "bio", "salary_expectation", "title", "location", "photo")


def format_application(app: dict) -> dict:
    return {
        "id": str(app["_id"]),
        "job_id": str(app["job_id"]),
        "applicant_id": str(app["job_seeker_id"]),
        "applicant_name": app.get("applicant_name") or "Unknown Applicant",
        "applicant_email": app.get("applicant_email") or "No email provided",
        "status": app.get("status") or ApplicationStatus.pending.value,
        "applied_date": format_date(app.get("applied_date")),
        "resume": app.get("resume") or None,
        "cover_letter": app.get("cover_letter") or None,
        "rating": app.get("rating") or 0,
    }


def format_mirror(entry: dict, synced: Optional[dict] = None) -> dict:
    """Shape an applied_jobs entry, preferring status/rating from the shared record."""
    synced = synced or {}
    return {
        "id": str(entry["application_id"]),
        "application_id": str(entry["application_id"]),
        "job_id": str(entry["job_id"]),
        "job_title": entry["job_title"],
        "company": entry["company"],
        "location": entry.get("location") or "Unknown Location",
        "status": synced.get("status") or entry.get("status") or ApplicationStatus.pending.value,
        "applied_date": format_date(entry.get("applied_date")),
        "resume": entry.get("resume") or None,
        "cover_letter": entry.get("cover_letter") or None,
        "rating": synced["rating"] if synced.get("rating") is not None else entry.get("rating") or 0,
    }


def is_valid_mirror(entry: dict) -> bool:
    return bool(
        entry
        and isinstance(entry.get("job_id"), ObjectId)
        and isinstance(entry.get("application_id"), ObjectId)
        and entry.get("job_title")
        and entry.get("company")
    )


class ApplicationService:
    """
    Handles the applications collection and the applied_jobs mirror.
    Callers check roles and ownership; this class only keeps both copies in step.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["applications"])
        self.job_seekers: Collection = get_collection(COLLECTIONS["job_seekers"])
        self.jobs: Collection = get_collection(COLLECTIONS["jobs"])

    def get(self, application_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": application_id})

    def has_applied(self, job_id: ObjectId, job_seeker: dict) -> bool:
        """True if either copy already records an application to this job."""
        if self.collection.find_one({"job_id": job_id, "job_seeker_id": job_seeker["_id"]}):
            return True
        return any(entry.get("job_id") == job_id for entry in job_seeker.get("applied_jobs") or [])

    def create(self, job: dict, job_seeker: dict, cover_letter: Optional[str], resume: Optional[str]) -> dict:
        """
        Insert the shared record, push the mirror, bump the job's counter.

        Raises pymongo DuplicateKeyError when the (job, job seeker) pair exists.
        """
        now = utcnow()
        name = f"{job_seeker.get('first_name', '')} {job_seeker.get('last_name', '')}".strip()
        email = clean(job_seeker.get("email")) or f"{job_seeker['username']}@email.com"
        cover_letter = clean(cover_letter)
        resume = clean(resume)

        application = {
            "job_id": job["_id"],
            "job_seeker_id": job_seeker["_id"],
            "applicant_name": name,
            "applicant_email": email,
            "status": ApplicationStatus.pending.value,
            "cover_letter": cover_letter,
            "resume": resume,
            "rating": 0,
            "applied_date": now,
            "created_at": now,
            "updated_at": now,
        }
        application["_id"] = self.collection.insert_one(application).inserted_id

        mirror = {
            "job_id": job["_id"],
            "application_id": application["_id"],
            "job_title": job["title"],
            "company": job["company"],
            "location": job.get("location") or "",
            "status": ApplicationStatus.pending.value,
            "applied_date": now,
            "cover_letter": cover_letter,
            "resume": resume,
            "rating": 0,
        }
        try:
            result = self.job_seekers.update_one(
                {"_id": job_seeker["_id"], "applied_jobs.job_id": {"$ne": job["_id"]}},
                {"$push": {"applied_jobs": mirror}, "$set": {"updated_at": now}}
            )
            if result.matched_count == 0:
                raise RuntimeError("job seeker missing or mirror already present")
        except Exception:
            logger.error(
                "Mirror write failed for application %s, removing shared record",
                application["_id"], exc_info=True
            )
            self.collection.delete_one({"_id": application["_id"]})
            raise

        self.jobs.update_one({"_id": job["_id"]}, {"$inc": {"applicants": 1}})
        logger.info(
            "Application %s created: job %s, job seeker %s",
            application["_id"], job["_id"], job_seeker["_id"]
        )
        return application

    def update(self, application: dict, status: Optional[str], rating: Optional[float]) -> dict:
        """Set status and/or rating on the record and its mirror entry."""
        fields = {}
        if status is not None:
            fields["status"] = status
        if rating is not None:
            fields["rating"] = rating
        if not fields:
            return application

        self.collection.update_one(
            {"_id": application["_id"]},
            {"$set": dict(fields, updated_at=utcnow())}
        )
        self.job_seekers.update_one(
            {"_id": application["job_seeker_id"], "applied_jobs.application_id": application["_id"]},
            {"$set": {f"applied_jobs.$.{key}": value for key, value in fields.items()}}
        )
        logger.info("Application %s updated: %s", application["_id"], fields)
        return self.get(application["_id"])

    def delete(self, application: dict) -> bool:
        """
        Withdraw an application: mirror first, then the record, then the counter.
        Returns whether a mirror entry was removed.
        """
        result = self.job_seekers.update_one(
            {"_id": application["job_seeker_id"]},
            {"$pull": {"applied_jobs": {"application_id": application["_id"]}}}
        )
        removed = result.modified_count > 0
        if not removed:
            logger.warning("Application %s had no applied_jobs entry", application["_id"])

        self.collection.delete_one({"_id": application["_id"]})
        self.jobs.update_one({"_id": application["job_id"]}, {"$inc": {"applicants": -1}})
        logger.info("Application %s withdrawn", application["_id"])
        return removed

    def list_for_job(self, job_id: ObjectId) -> List[dict]:
        """Applications for a job, newest first, with the applicant's profile highlights."""
        applicants = []
        for app in self.collection.find({"job_id": job_id}).sort("applied_date", DESCENDING):
            formatted = format_application(app)
            profile = self.job_seekers.find_one(
                {"_id": app["job_seeker_id"]},
                {field: 1 for field in APPLICANT_FIELDS}
            ) or {}
            formatted["skills"] = profile.get("skills") or []
            for field in APPLICANT_FIELDS[1:]:
                formatted[field] = profile.get(field) or ""
            applicants.append(formatted)
        return applicants

    def list_for_job_seeker(self, job_seeker: dict) -> List[dict]:
        """
        The seeker's mirror entries with status and rating taken from the
        shared records, newest first.
        """
        if "applied_jobs" not in job_seeker:
            self.job_seekers.update_one({"_id": job_seeker["_id"]}, {"$set": {"applied_jobs": []}})

        entries = job_seeker.get("applied_jobs") or []
        valid = [entry for entry in entries if is_valid_mirror(entry)]
        if len(valid) != len(entries):
            logger.warning(
                "Skipped %d malformed applied_jobs entries for %s",
                len(entries) - len(valid), job_seeker["_id"]
            )

        synced = {}
        if valid:
            cursor = self.collection.find({
                "_id": {"$in": [entry["application_id"] for entry in valid]},
                "job_seeker_id": job_seeker["_id"],
            })
            synced = {app["_id"]: {"status": app.get("status"), "rating": app.get("rating")} for app in cursor}

        ordered = sorted(valid, key=lambda entry: entry.get("applied_date") or utcnow(), reverse=True)
        return [format_mirror(entry, synced.get(entry["application_id"])) for entry in ordered]
