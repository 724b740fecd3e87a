"""
schemas/company.py
------------------
Pydantic request/response models for Company.

Naming convention:
  CompanyRegister  → inbound request body
  CompanyRead      → outbound response body (never exposes internal fields)
"""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from erp_api.schemas.common import CamelModel


class CompanyRegister(CamelModel):
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        examples=["Acme Corp"],
        description="Company name",
    )
    admin_email: EmailStr
    admin_password: str = Field(..., min_length=8, max_length=128)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class CompanyRegistered(CamelModel):
    company_id: int
    company_name: str
    admin_user_id: str
    admin_email: str
    token: str


class CompanyRead(CamelModel):
    id: int
    name: str
    created_at: datetime
