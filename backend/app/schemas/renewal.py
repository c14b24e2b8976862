"""Renewal schemas, including the bulk upload request and report."""

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.app.schemas.customer import CustomerRead, _url, blank_to_none
from backend.app.schemas.user import UserRead

ServiceType = Literal[
    "Infrared Thermography Analysis",
    "Arc Flash Hazard Assessment",
    "VUMO",
    "Training",
    "Switchgear Maintenance (EPM)",
]
IntervalType = Literal["annual", "bi-annual", "2-year", "3-year", "5-year", "custom"]
RenewalStatus = Literal["pending", "contacted", "completed", "renewed", "overdue"]


class RenewalBase(BaseModel):
    customer_id: str = Field(min_length=1)
    service_type: ServiceType = "Infrared Thermography Analysis"
    site_code: Optional[str] = Field(default=None, pattern=r"^\d{5}$")
    reference_id: Optional[int] = Field(default=None, gt=0)
    address: Optional[str] = None
    last_service_date: date
    interval_type: IntervalType = "annual"
    custom_interval_months: Optional[int] = None
    status: RenewalStatus = "pending"
    notes: Optional[str] = None
    assigned_salesperson_id: Optional[str] = None
    salesforce_opportunity_url: Optional[str] = None

    @field_validator(
        "site_code", "address", "notes", "assigned_salesperson_id", "salesforce_opportunity_url", mode="before"
    )
    @classmethod
    def empty_strings_are_none(cls, v):
        return blank_to_none(v)

    @field_validator("salesforce_opportunity_url")
    @classmethod
    def valid_url(cls, v):
        if v is not None:
            _url.validate_python(v)
        return v


def _date_part(v):
    # Browsers send midnight timestamps for date pickers ("2024-01-15T00:00:00.000Z").
    if isinstance(v, str) and "T" in v:
        return v.split("T", 1)[0]
    return v


class RenewalCreate(RenewalBase):
    """next_due_date is derived from the interval when omitted."""

    next_due_date: Optional[date] = None

    @field_validator("last_service_date", "next_due_date", mode="before")
    @classmethod
    def strip_time(cls, v):
        return _date_part(v)


class RenewalUpdate(RenewalCreate):
    """Renewals are updated with the full form, like creation."""


class RenewalRead(RenewalBase):
    id: str
    next_due_date: date
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RenewalWithRelations(RenewalRead):
    customer: Optional[CustomerRead] = None
    assigned_salesperson: Optional[UserRead] = None


class BulkUploadRequest(BaseModel):
    file_data: str = Field(alias="fileData", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class ImportRowError(BaseModel):
    row: int
    error: str
    data: Dict[str, Any]


class ImportResultRead(BaseModel):
    success: int
    failed: int
    errors: List[ImportRowError]
