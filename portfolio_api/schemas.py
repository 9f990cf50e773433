"""Pydantic schemas for request and response validation."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """Base schema exposing camelCase JSON while accepting snake_case too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _check_slug(v: str) -> str:
    if not SLUG_PATTERN.match(v):
        raise ValueError("Slug must contain only lowercase letters, numbers and single hyphens")
    return v


def _reject_null(v: Any) -> Any:
    # Only runs for values the client actually sent; omitted fields keep their default.
    if v is None:
        raise ValueError("Field cannot be null")
    return v


# Validation result
@dataclass
class ValidationResult(Generic[ModelT]):
    """Outcome of validating a request body: either ``data`` or ``errors``."""

    success: bool
    data: Optional[ModelT] = None
    errors: List[Dict[str, str]] = field(default_factory=list)


def format_errors(exc: ValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors into ``{"field", "message", "type"}`` entries."""
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        details.append({
            "field": ".".join(loc) if loc else "body",
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "value_error"),
        })
    return details


def validate_payload(schema: Type[ModelT], payload: Any) -> ValidationResult[ModelT]:
    """
    Validate a request body against ``schema`` without raising.

    Args:
        schema: Pydantic model class for the entity and verb
        payload: Decoded JSON body (may be None or a non-object)

    Returns:
        ValidationResult: success with the parsed model, or failure with field errors
    """
    try:
        return ValidationResult(success=True, data=schema.model_validate(payload))
    except ValidationError as e:
        return ValidationResult(success=False, errors=format_errors(e))


# User Schemas
class UserCreate(CamelModel):
    """Schema for creating a user record."""

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


# Blog Post Schemas
class BlogPostCreate(CamelModel):
    """Schema for blog post creation request."""

    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    content: str
    excerpt: str
    published: bool = False
    published_at: Optional[datetime] = None

    @field_validator('slug')
    @classmethod
    def slug_format(cls, v: str) -> str:
        """Validate that slug is URL-safe."""
        return _check_slug(v)


class BlogPostUpdate(CamelModel):
    """Schema for blog post partial update request."""

    title: Optional[str] = Field(default=None, min_length=1)
    slug: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    published: Optional[bool] = None
    published_at: Optional[datetime] = None

    @field_validator('title', 'slug', 'content', 'excerpt', 'published', mode='before')
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)

    @field_validator('slug')
    @classmethod
    def slug_format(cls, v: str) -> str:
        return _check_slug(v)


class BlogPostOut(CamelModel):
    """Schema for blog post response."""

    id: str
    title: str
    slug: str
    content: str
    excerpt: str
    published: bool
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


# Project Schemas
class ProjectCreate(CamelModel):
    """Schema for project creation request."""

    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: str
    long_description: Optional[str] = None
    technologies: Optional[List[str]] = None
    image_url: Optional[str] = None
    project_url: Optional[str] = None
    github_url: Optional[str] = None
    featured: bool = False
    order_index: int = Field(default=0, ge=0)

    @field_validator('slug')
    @classmethod
    def slug_format(cls, v: str) -> str:
        """Validate that slug is URL-safe."""
        return _check_slug(v)


class ProjectUpdate(CamelModel):
    """Schema for project partial update request."""

    title: Optional[str] = Field(default=None, min_length=1)
    slug: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    long_description: Optional[str] = None
    technologies: Optional[List[str]] = None
    image_url: Optional[str] = None
    project_url: Optional[str] = None
    github_url: Optional[str] = None
    featured: Optional[bool] = None
    order_index: Optional[int] = Field(default=None, ge=0)

    @field_validator('title', 'slug', 'description', 'featured', 'order_index', mode='before')
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)

    @field_validator('slug')
    @classmethod
    def slug_format(cls, v: str) -> str:
        return _check_slug(v)


class ProjectOut(CamelModel):
    """Schema for project response."""

    id: str
    title: str
    slug: str
    description: str
    long_description: Optional[str] = None
    technologies: Optional[List[str]] = None
    image_url: Optional[str] = None
    project_url: Optional[str] = None
    github_url: Optional[str] = None
    featured: bool
    order_index: int
    created_at: datetime
    updated_at: datetime


# Contact Schemas
class ContactSubmissionCreate(CamelModel):
    """Schema for the public contact form."""

    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    subject: Optional[str] = Field(default=None, max_length=200)
    message: str = Field(min_length=1, max_length=5000)

    @field_validator('email')
    @classmethod
    def email_length(cls, v: str) -> str:
        """Validate that email fits the column."""
        if len(v) > 255:
            raise ValueError('Email must be less than 255 characters')
        return v


class ContactSubmissionOut(CamelModel):
    """Schema for contact submission response."""

    id: str
    name: str
    email: str
    subject: Optional[str] = None
    message: str
    read: bool
    created_at: datetime
