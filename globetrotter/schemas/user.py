from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import datetime
from typing import List, Optional

from globetrotter.core.validation import normalize_phone, trim_name, validate_place_name
from globetrotter.schemas.base import RequestModel


class RegisterRequest(RequestModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=4, max_length=32)
    password: str = Field(min_length=6, max_length=128)
    city: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=2000)

    @field_validator('first_name', 'last_name')
    @classmethod
    def normalize_name(cls, v):
        v = trim_name(v)
        if not v:
            raise ValueError('Name cannot be blank')
        return v

    @field_validator('email')
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()

    @field_validator('phone')
    @classmethod
    def validate_phone_number(cls, v):
        normalized = normalize_phone(v)
        if normalized is None:
            raise ValueError('Invalid phone number')
        return normalized

    @field_validator('city', 'country')
    @classmethod
    def validate_place(cls, v):
        if v is None or not v.strip():
            return None
        if not validate_place_name(v):
            raise ValueError('Must be at least 2 letters (spaces, hyphens and apostrophes allowed)')
        return trim_name(v)


class LoginRequest(BaseModel):
    identifier: str = Field(
        min_length=1,
        validation_alias=AliasChoices("identifier", "email", "phone"),
        description="Email address or phone number",
    )
    password: str = Field(min_length=1)


class UserRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    city: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime
    roles: List[str] = []

    model_config = ConfigDict(from_attributes=True)


class SessionRead(BaseModel):
    user: UserRead
    roles: List[str]
