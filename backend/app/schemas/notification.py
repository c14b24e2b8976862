"""Notification and notification preference schemas."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

NotificationType = Literal["2_months", "1_month", "1_week"]
NotificationStatus = Literal["pending", "sent"]


class NotificationRead(BaseModel):
    id: str
    renewal_id: str
    salesperson_id: str
    notification_type: NotificationType
    scheduled_date: date
    sent_at: Optional[datetime] = None
    status: NotificationStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationPreferenceRead(BaseModel):
    id: str
    user_id: str
    enable_2_months: bool
    enable_1_month: bool
    enable_1_week: bool

    model_config = ConfigDict(from_attributes=True)


class NotificationPreferenceUpdate(BaseModel):
    user_id: str = Field(min_length=1)
    enable_2_months: Optional[bool] = None
    enable_1_month: Optional[bool] = None
    enable_1_week: Optional[bool] = None
