"""Pydantic schemas for the /github REST API."""

from pydantic import BaseModel, field_validator


class IssueCreateRequest(BaseModel):
    title: str
    body: str

    @field_validator("title", "body")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ErrorResponse(BaseModel):
    """Uniform error envelope. Never carries upstream error text."""

    error: str
