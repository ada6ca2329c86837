"""Pydantic schemas for the company letterhead."""

import datetime as dt

from pydantic import Field, field_validator

from invoicedesk.schemas.common import CamelModel, required_text


class CompanyIn(CamelModel):
    name: str = Field(..., max_length=255)
    address: str
    phone: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=255)

    @field_validator("name", "address")
    @classmethod
    def _required(cls, v: str) -> str:
        return required_text(v)


class CompanyOut(CompanyIn):
    id: str
    created_at: dt.datetime
    updated_at: dt.datetime
