from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import datetime

# bcrypt refuses anything longer
BCRYPT_MAX_BYTES = 72

class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, max_length=72, description="Plain password (will be hashed). Minimum 8 characters.")
    display_name: str | None = Field(None, alias="displayName", max_length=100)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes when UTF-8 encoded")
        return value

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    email: EmailStr
    display_name: str = Field(alias="displayName")
    role: str
    created_at: datetime = Field(alias="createdAt")

class RoleUpdate(BaseModel):
    role: Literal["worker", "owner"]
