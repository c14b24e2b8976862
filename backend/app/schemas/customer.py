"""Customer schemas for create, update and read operations."""

from datetime import datetime
from typing import Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator

_email = TypeAdapter(EmailStr)
_url = TypeAdapter(AnyHttpUrl)


def blank_to_none(value):
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


class CustomerBase(BaseModel):
    company_name: str = Field(min_length=1)
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    assigned_salesperson_id: Optional[str] = None
    salesforce_opportunity_url: Optional[str] = None

    @field_validator("contact_name", "email", "phone", "assigned_salesperson_id", "salesforce_opportunity_url", mode="before")
    @classmethod
    def empty_strings_are_none(cls, v):
        return blank_to_none(v)

    @field_validator("company_name")
    @classmethod
    def company_name_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Company name is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def valid_email(cls, v):
        if v is not None:
            _email.validate_python(v)
        return v

    @field_validator("salesforce_opportunity_url")
    @classmethod
    def valid_url(cls, v):
        if v is not None:
            _url.validate_python(v)
        return v


class CustomerCreate(CustomerBase):
    """Schema for customer creation requests."""


class CustomerUpdate(CustomerBase):
    """Customers are updated with the full form, like creation."""


class CustomerRead(CustomerBase):
    id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
