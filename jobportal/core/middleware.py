"""
Route guard middleware.

Only checks that the auth_token cookie is present. Signature, expiry and
role are verified by each API route through the auth dependencies.
"""

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from jobportal.core.config import get_settings

PROTECTED_ROUTES = (
    "/job-seeker/profile",
    "/employer/profile",
    "/api/user/profile",
    "/settings",
    "/api/user/settings",
)

PUBLIC_ROUTES = {
    "/auth/login/job-seeker",
    "/auth/login/employer",
    "/auth/register/job-seeker",
    "/auth/register/employer",
    "/",
    "/terms",
    "/privacy",
}


def login_path_for(pathname: str) -> str:
    if pathname.startswith("/job-seeker"):
        return "/auth/login/job-seeker"
    return "/auth/login/employer"


def dashboard_path_for(pathname: str) -> str:
    if "job-seeker" in pathname:
        return "/job-seeker"
    return "/employer"


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Redirects anonymous visitors away from protected routes and signed-in ones away from auth pages."""

    async def dispatch(self, request: Request, call_next):
        pathname = request.url.path
        token = request.cookies.get(get_settings().auth_cookie_name)

        if any(pathname.startswith(route) for route in PROTECTED_ROUTES):
            if not token:
                return RedirectResponse(url=login_path_for(pathname), status_code=307)
            return await call_next(request)

        is_auth_page = pathname.startswith("/auth/login") or pathname.startswith("/auth/register")
        if token and pathname in PUBLIC_ROUTES and is_auth_page:
            return RedirectResponse(url=dashboard_path_for(pathname), status_code=307)

        return await call_next(request)
