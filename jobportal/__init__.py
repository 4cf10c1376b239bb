"""
Job Portal
Job seekers apply to jobs posted by employers.

Architecture:
- MongoDB: accounts (job seekers, employers), jobs and applications
- Applications are dual-written: shared collection + applied_jobs mirror
- JWT session in an HttpOnly auth_token cookie
"""

__version__ = "1.0.0"
