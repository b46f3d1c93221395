from datetime import date
from typing import Optional
import re

from pydantic import BaseModel, Field, field_validator

from .Member_model import MembershipStatus

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


def _normalize_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().lower()
    if not re.match(EMAIL_PATTERN, v):
        raise ValueError('Invalid email format')
    return v


class MemberCreate(BaseModel):
    national_id: str = Field(..., description="National ID (unique per person)", min_length=1, max_length=20)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., description="Email address (unique)", max_length=100)
    phone: Optional[str] = Field(None, max_length=15)
    address: Optional[str] = None
    membership_date: date = Field(default_factory=date.today)
    membership_status: MembershipStatus = MembershipStatus.ACTIVE
    max_books_allowed: int = Field(5, ge=0)

    @field_validator('national_id', 'first_name', 'last_name')
    @classmethod
    def strip_required_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Value cannot be empty or whitespace only')
        return v

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        if v:
            v = v.strip().replace(" ", "")
        return v or None


class MemberUpdate(BaseModel):
    """All fields optional; only the ones sent are written."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=15)
    address: Optional[str] = None
    membership_status: Optional[MembershipStatus] = None
    max_books_allowed: Optional[int] = Field(None, ge=0)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)
