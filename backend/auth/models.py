from __future__ import annotations

from pydantic import BaseModel, Field

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
_PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: str = Field(..., pattern=_EMAIL_PATTERN)
    password: str = Field(..., min_length=6)
    phone: str | None = Field(default=None, pattern=_PHONE_PATTERN)


class LoginRequest(BaseModel):
    email: str = Field(..., pattern=_EMAIL_PATTERN)
    password: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=255)
    phone: str | None = Field(default=None, pattern=_PHONE_PATTERN)


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None


class UserResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: UserOut
