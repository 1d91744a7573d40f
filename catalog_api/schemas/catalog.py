"""Catalog Schemas — request bodies for books, authors and users.

Invariants:
    - Update bodies are partial: omitted fields are left untouched
    - An explicit null on a NOT NULL column (title, username, email) is a
      validation error, never an UPDATE
"""

from uuid import UUID

from pydantic import BaseModel, EmailStr, ValidationInfo, field_validator


class AuthorCreate(BaseModel):
    name: str
    bio: str | None = None


class BookCreate(BaseModel):
    title: str
    description: str | None = None
    genre: str | None = None
    published_year: int | None = None
    author_id: UUID | None = None


class BookUpdate(BaseModel):
    """Partial update — only fields present in the request are applied."""
    title: str | None = None
    description: str | None = None
    genre: str | None = None
    published_year: int | None = None
    author_id: UUID | None = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("title cannot be null")
        return v


class UserCreate(BaseModel):
    username: str
    email: EmailStr
    is_admin: bool = False


class UserUpdate(BaseModel):
    username: str | None = None
    email: EmailStr | None = None

    @field_validator("username", "email")
    @classmethod
    def required_not_null(cls, v: str | None, info: ValidationInfo) -> str:
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v
