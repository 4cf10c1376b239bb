"""
Job Portal - Main Application

FastAPI backend with:
- MongoDB for accounts, jobs and applications
- JWT session cookie authentication
- Route guard for the frontend pages
- Frontend served from /frontend

Run: uvicorn jobportal.main:app --reload
"""

import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from jobportal.api.routes import api_router
from jobportal.api.routes.page_routes import FRONTEND_DIR, router as page_router
from jobportal.core.config import get_settings
from jobportal.core.errors import register_error_handlers
from jobportal.core.middleware import RouteGuardMiddleware
from jobportal.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Job Portal",
    description="""
    Job portal connecting job seekers with employers.

    ## Features
    - **Authentication**: cookie sessions, email verification, password reset
    - **Profiles**: job seeker and company profiles
    - **Jobs**: post, search, auto-close past the deadline, cascade delete
    - **Applications**: apply, review, rate and withdraw
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Route guard first so CORS wraps its redirects
app.add_middleware(RouteGuardMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")

# Serve static files (for any additional assets)
if os.path.exists(FRONTEND_DIR):
    app.mount("/static", StaticFiles(directory=FRONTEND_DIR), name="static")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/health", tags=["Health"])
async def health_check():
    """MongoDB connectivity check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }


app.include_router(page_router)
