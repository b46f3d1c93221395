from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .Copy_model import CopyStatus


class AuthorCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    birth_date: Optional[date] = None
    nationality: Optional[str] = Field(None, max_length=50)
    biography: Optional[str] = None

    @field_validator('birth_date')
    @classmethod
    def validate_birth_date(cls, v):
        if v and v > date.today():
            raise ValueError('Birth date cannot be in the future')
        return v


class PublisherCreate(BaseModel):
    publisher_name: str = Field(..., min_length=1, max_length=100)
    address: Optional[str] = None
    contact_email: Optional[str] = Field(None, max_length=100)
    contact_phone: Optional[str] = Field(None, max_length=15)
    established_year: Optional[int] = Field(None, ge=1000, le=9999)

    @field_validator('publisher_name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Publisher name cannot be empty')
        return v


class CategoryCreate(BaseModel):
    category_name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None
    parent_category_id: Optional[int] = Field(None, gt=0)

    @field_validator('category_name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Category name cannot be empty')
        return v


class BookCreate(BaseModel):
    isbn: str = Field(..., min_length=1, max_length=20)
    title: str = Field(..., min_length=1, max_length=200)
    edition: Optional[str] = Field(None, max_length=20)
    publication_year: Optional[int] = Field(None, ge=1000, le=9999)
    publisher_id: int = Field(..., gt=0)
    category_id: int = Field(..., gt=0)
    pages: Optional[int] = Field(None, gt=0)
    language: str = Field("English", max_length=30)
    description: Optional[str] = None
    # Listed in author order (first entry gets author_order=1)
    author_ids: List[int] = Field(..., description="Author IDs in credit order", min_length=1)

    @field_validator('isbn')
    @classmethod
    def strip_isbn(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('ISBN cannot be empty')
        return v

    @field_validator('author_ids')
    @classmethod
    def validate_author_ids(cls, v):
        if len(set(v)) != len(v):
            raise ValueError('An author can only be listed once per book')
        return v


class BookCopyCreate(BaseModel):
    copy_number: Optional[int] = Field(None, description="Defaults to the next free number for the book", gt=0)
    acquisition_date: date = Field(default_factory=date.today)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    status: CopyStatus = CopyStatus.AVAILABLE
    location: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
