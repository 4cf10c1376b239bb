"""
Page Routes

Serve the frontend bundle for every client-side page. Without a bundle
the API still answers with a small status document.
"""

import os
from fastapi import APIRouter
from fastapi.responses import FileResponse

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
FRONTEND_DIR = os.path.join(PROJECT_ROOT, "frontend", "public")

PAGES = (
    "/",
    "/auth/login/{role}",
    "/auth/register/{role}",
    "/job-seeker",
    "/job-seeker/profile",
    "/job-seeker/applications",
    "/employer",
    "/employer/profile",
    "/settings",
    "/verify-email/{token}",
    "/reset-password/{token}",
    "/terms",
    "/privacy",
)

router = APIRouter(tags=["Frontend"])


async def serve_frontend():
    """Serve the frontend entry point."""
    index_path = os.path.join(FRONTEND_DIR, "index.html")
    if os.path.exists(index_path):
        return FileResponse(index_path)
    return {"status": "healthy", "app": "Job Portal", "message": "Frontend not found. API is running."}


for page in PAGES:
    router.add_api_route(page, serve_frontend, methods=["GET"], include_in_schema=False)
