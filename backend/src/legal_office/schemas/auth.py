"""
Schemas for authentication and profile management.
"""

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Schema for login requests."""
    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class ProfileResponse(BaseModel):
    """Public view of a profile (never includes the password hash)."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    license_number: Optional[str] = None
    specialization: Optional[str] = None
    is_active: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    # Same value as access_token, the name the legacy web client reads
    token: str
    user: ProfileResponse


class RegisterAdminRequest(BaseModel):
    """Schema for creating an admin account."""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, max_length=128, description="Password")
    full_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = Field(None, max_length=255)


class RegisterLawyerRequest(RegisterAdminRequest):
    """Schema for lawyer sign-up."""
    license_number: Optional[str] = Field(None, max_length=50)
    specialization: Optional[str] = Field(None, max_length=100)


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = Field(None, max_length=255)
    license_number: Optional[str] = Field(None, max_length=50)
    specialization: Optional[str] = Field(None, max_length=100)


class UserAdminUpdate(ProfileUpdate):
    """Fields an admin may change on any profile."""
    email: Optional[EmailStr] = None
    role: Optional[Literal["lawyer", "admin"]] = None
    is_active: Optional[bool] = None


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1, max_length=128)
