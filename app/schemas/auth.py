"""Authentication request and response schemas."""

from typing import Optional

from pydantic import Field, field_validator

from .mixin import CamelModel
from .user import UserSummary


class UserLogin(CamelModel):
    """Username/password login request."""
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=100)

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return v.strip()


class TokenData(CamelModel):
    """Session token payload."""
    user_id: Optional[str] = None
    role: Optional[str] = None


class LoginResponse(CamelModel):
    """Login result; the session itself travels in the cookie."""
    user: UserSummary
    message: str = "Login successful"

    model_config = {
        "json_schema_extra": {
            "example": {
                "user": {"id": "8d1f0c9e-4d0b-4a57-9b7e-5f3f0a1e2c11", "username": "ravi", "role": "worker"},
                "message": "Login successful"
            }
        }
    }


class MessageResponse(CamelModel):
    message: str


class AuthStatus(CamelModel):
    authenticated: bool
    user: Optional[UserSummary] = None
