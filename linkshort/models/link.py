"""Pydantic request models for the link shortener."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..utils.shortener import is_absolute_url


class LinkCreate(BaseModel):
    """Body of a create link request."""

    url: str = Field(..., description="The absolute URL to shorten")

    @field_validator("url")
    @classmethod
    def check_absolute_url(cls, value: str) -> str:
        if not value:
            raise ValueError("url must not be empty")
        if not is_absolute_url(value):
            raise ValueError("url must be an absolute URI")
        return value


class ErrorResponse(BaseModel):
    """Model for error responses."""

    detail: str
    error_code: Optional[str] = None
