"""
Stats Routes

GET /stats - Landing page counters
"""

from fastapi import APIRouter

from jobportal.db.mongodb import COLLECTIONS, get_collection
from jobportal.schemas.schemas import JobStatus, StatsResponse

router = APIRouter(tags=["Stats"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats():
    """Active jobs, job seekers and companies on the portal."""
    return StatsResponse(
        jobs=get_collection(COLLECTIONS["jobs"]).count_documents({"status": JobStatus.active.value}),
        job_seekers=get_collection(COLLECTIONS["job_seekers"]).count_documents({}),
        companies=get_collection(COLLECTIONS["employers"]).count_documents({}),
    )
