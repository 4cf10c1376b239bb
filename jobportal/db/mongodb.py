"""
MongoDB Connection Utility

MongoDB stores everything the portal knows:
- jobseekers: job seeker accounts, profiles and the applied_jobs mirror
- employers: employer accounts and company profiles
- jobs: job postings
- applications: one document per (job, job seeker) pair

The client is created once per process and reused by every request.
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection

from jobportal.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def reset_mongo_client(client: MongoClient = None) -> None:
    """Drop the cached client and database, optionally installing another client."""
    global _client, _db
    _client = client
    _db = None


def get_collection(name: str) -> Collection:
    """Get a specific collection. Use the COLLECTIONS constants for names."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "job_seekers": "jobseekers",
    "employers": "employers",
    "jobs": "jobs",
    "applications": "applications",
}


def init_mongo_indexes():
    """
    Create indexes for uniqueness and query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    for name in (COLLECTIONS["job_seekers"], COLLECTIONS["employers"]):
        db[name].create_index("username", unique=True)
        db[name].create_index("email")

    jobs = db[COLLECTIONS["jobs"]]
    jobs.create_index("employer_id")
    jobs.create_index([("employer_id", ASCENDING), ("status", ASCENDING)])
    jobs.create_index([("status", ASCENDING), ("posted_date", DESCENDING)])

    applications = db[COLLECTIONS["applications"]]
    applications.create_index("job_id")
    applications.create_index("job_seeker_id")
    applications.create_index([("job_id", ASCENDING), ("status", ASCENDING)])
    # One application per (job, job seeker)
    applications.create_index(
        [("job_id", ASCENDING), ("job_seeker_id", ASCENDING)],
        unique=True
    )

    logger.info("MongoDB indexes created successfully")
