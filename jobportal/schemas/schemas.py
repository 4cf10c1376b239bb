"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from enum import Enum
from urllib.parse import urlparse


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    job_seeker = "job-seeker"
    employer = "employer"


class JobStatus(str, Enum):
    active = "Active"
    closed = "Closed"
    draft = "Draft"


class ApplicationStatus(str, Enum):
    pending = "Pending"
    reviewed = "Reviewed"
    shortlisted = "Shortlisted"
    interviewed = "Interviewed"
    selected = "Selected"
    rejected = "Rejected"


# ============================================================
# VALIDATION HELPERS
# ============================================================

def clean_string_list(values: Optional[List[str]]) -> Optional[List[str]]:
    """Trim every entry and drop the empty ones."""
    if values is None:
        return None
    return [str(v).strip() for v in values if str(v).strip()]


def check_url(value: Optional[str], field_name: str) -> Optional[str]:
    """Empty is allowed; anything else must be an http(s) URL."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Invalid URL format for {field_name}.")
    return value


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    role: UserRole
    email: EmailStr

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long.")
        return v

class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    role: Optional[UserRole] = None

class ForgotPasswordRequest(BaseModel):
    username: Optional[str] = None

class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long.")
        return v

class UserSummary(BaseModel):
    id: str
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    email: Optional[str] = None
    is_email_verified: Optional[bool] = None

class AuthResponse(BaseModel):
    message: str
    user: UserSummary


# ============================================================
# SETTINGS SCHEMAS
# ============================================================

class SettingsUpdate(BaseModel):
    username: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None
    confirm_password: Optional[str] = None

class UserNameUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


# ============================================================
# JOB SEEKER SCHEMAS
# ============================================================

class JobSeekerProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    title: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    availability: Optional[str] = None
    salary_expectation: Optional[str] = None
    photo: Optional[str] = None
    resume_url: Optional[str] = None

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v):
        return clean_string_list(v)

    @field_validator("website", "linkedin", "github")
    @classmethod
    def validate_url(cls, v, info):
        return check_url(v, info.field_name)

class JobSeekerProfileResponse(BaseModel):
    id: str
    username: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    title: str = ""
    bio: str = ""
    skills: List[str] = []
    website: str = ""
    linkedin: str = ""
    github: str = ""
    availability: str = ""
    salary_expectation: str = ""
    photo: str = ""
    resume_url: str = ""
    is_profile_complete: bool = False


# ============================================================
# EMPLOYER SCHEMAS
# ============================================================

class EmployerProfileUpdate(BaseModel):
    name: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    founded: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    mission: Optional[str] = None
    specialties: Optional[List[str]] = None
    photo: Optional[str] = None

    @field_validator("specialties")
    @classmethod
    def clean_specialties(cls, v):
        return clean_string_list(v)

    @field_validator("website", "linkedin")
    @classmethod
    def validate_url(cls, v, info):
        return check_url(v, info.field_name)

class EmployerProfileResponse(BaseModel):
    name: str = ""
    industry: str = ""
    size: str = ""
    founded: str = ""
    location: str = ""
    website: str = ""
    linkedin: str = ""
    email: str = ""
    phone: str = ""
    description: str = ""
    mission: str = ""
    specialties: List[str] = []
    photo: str = ""
    is_profile_complete: bool = False


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    type: Optional[str] = None
    remote: bool = False
    description: Optional[str] = None
    requirements: List[str] = []
    deadline: Optional[str] = None
    status: JobStatus = JobStatus.active
    category: Optional[str] = None
    experience: Optional[str] = None
    benefits: List[str] = []
    company_size: Optional[str] = None
    industry: Optional[str] = None

    @field_validator("requirements", "benefits")
    @classmethod
    def clean_lists(cls, v):
        return clean_string_list(v)

class JobResponse(BaseModel):
    id: str
    title: str
    company: str
    location: str = ""
    salary: str = ""
    type: str = ""
    remote: bool = False
    description: str = ""
    requirements: List[str] = []
    posted_date: str
    deadline: Optional[str] = None
    applicants: int = 0
    status: str
    employer_id: str = ""
    category: str = ""
    experience: str = ""
    benefits: List[str] = []
    company_size: str = ""
    industry: str = ""

class EmployerJobResponse(JobResponse):
    pending_applications: int = 0


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    job_id: str = Field(..., min_length=1)
    cover_letter: Optional[str] = None
    resume: Optional[str] = None

class ApplicationUpdate(BaseModel):
    status: Optional[ApplicationStatus] = None
    rating: Optional[float] = Field(None, ge=0, le=5)

class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    applicant_id: str
    applicant_name: str
    applicant_email: str
    status: str
    applied_date: str
    resume: Optional[str] = None
    cover_letter: Optional[str] = None
    rating: float = 0

class ApplicantResponse(ApplicationResponse):
    skills: List[str] = []
    bio: str = ""
    salary_expectation: str = ""
    title: str = ""
    location: str = ""
    photo: str = ""

class MyApplicationResponse(BaseModel):
    id: str
    application_id: str
    job_id: str
    job_title: str
    company: str
    location: str
    status: str
    applied_date: str
    resume: Optional[str] = None
    cover_letter: Optional[str] = None
    rating: float = 0


# ============================================================
# STATS SCHEMAS
# ============================================================

class StatsResponse(BaseModel):
    jobs: int
    job_seekers: int
    companies: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
