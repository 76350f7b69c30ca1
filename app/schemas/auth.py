"""
Pydantic schemas for authentication and user endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    """Request schema for account registration."""
    name: str = Field(..., min_length=1, max_length=200, description="Full name")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    role: str = Field(..., pattern="^(student|recruiter)$", description="Account role")
    phone: Optional[str] = Field(None, max_length=30, description="Phone number")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate password length in bytes (bcrypt limit is 72 bytes)."""
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password too long (bcrypt limit 72 bytes)")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Asha Rao",
                "email": "asha.rao@college.edu",
                "password": "SecurePass123",
                "role": "student",
                "phone": "9876543210"
            }
        }


class LoginRequest(BaseModel):
    """Request schema for user login."""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")


class StudentProfile(BaseModel):
    roll_number: Optional[str] = None
    department: Optional[str] = None
    year: Optional[int] = Field(None, ge=1, le=6)
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    skills: Optional[List[str]] = None


class RecruiterProfile(BaseModel):
    company_name: Optional[str] = None
    designation: Optional[str] = None
    company_website: Optional[str] = None
    company_description: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Profile patch; only the block matching the caller's role is applied."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)
    student_profile: Optional[StudentProfile] = None
    recruiter_profile: Optional[RecruiterProfile] = None


class UserResponse(BaseModel):
    """Public view of a user (never includes the password hash)."""
    id: int
    name: str
    email: str
    role: str
    phone: Optional[str] = None
    is_approved: bool
    is_active: bool
    student_profile: Optional[dict] = None
    recruiter_profile: Optional[dict] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class UserApprovalUpdate(BaseModel):
    is_approved: bool


class UserStatusUpdate(BaseModel):
    is_active: bool
