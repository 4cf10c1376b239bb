"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from jobportal.api.routes.auth_routes import router as auth_router
from jobportal.api.routes.job_seeker_routes import router as job_seeker_router
from jobportal.api.routes.employer_routes import router as employer_router
from jobportal.api.routes.user_routes import router as user_router
from jobportal.api.routes.job_routes import router as job_router
from jobportal.api.routes.application_routes import router as application_router
from jobportal.api.routes.application_routes import my_router as my_application_router
from jobportal.api.routes.stats_routes import router as stats_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(job_seeker_router)
api_router.include_router(employer_router)
api_router.include_router(user_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(my_application_router)
api_router.include_router(stats_router)
