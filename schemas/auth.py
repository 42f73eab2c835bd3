from typing import Optional

from pydantic import BaseModel, field_validator


class Credentials(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        value = v.strip()
        if not value:
            return None
        if len(value) > 320:
            raise ValueError("email must be at most 320 characters")
        return value


class PasswordResetRequest(BaseModel):
    email: Optional[str] = None


class PasswordResetConfirm(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    token: Optional[str] = None
