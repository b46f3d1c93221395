from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from Member_module.Member_schema import _normalize_email
from .Staff_model import StaffStatus


class StaffCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., max_length=100)
    phone: Optional[str] = Field(None, max_length=15)
    position: str = Field(..., description="Job title, e.g. Librarian", min_length=1, max_length=50)
    hire_date: date = Field(default_factory=date.today)
    salary: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    status: StaffStatus = StaffStatus.ACTIVE

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)
