"""
Person API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from email_validator import validate_email
from pydantic import BaseModel, Field, field_validator

# Zero value of a timestamp, treated as missing.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


class SavePersonRequest(BaseModel):
    external_id: UUID
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    date_of_birth: datetime

    @field_validator("external_id")
    @classmethod
    def _reject_nil_uuid(cls, value: UUID) -> UUID:
        if value.int == 0:
            raise ValueError("external_id must not be the nil UUID")
        return value

    @field_validator("email")
    @classmethod
    def _check_email_syntax(cls, value: str) -> str:
        # Syntax check only; the address is stored exactly as sent.
        validate_email(value, check_deliverability=False)
        return value

    @field_validator("date_of_birth")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Column is timestamptz; naive input is taken as UTC.
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        if value == ZERO_TIME:
            raise ValueError("date_of_birth is required")
        return value


class PersonResponse(BaseModel):
    external_id: UUID
    name: str
    email: str
    date_of_birth: datetime


class ErrorResponse(BaseModel):
    error: str
