"""User schemas used for administration and responses."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

UserRole = Literal["admin", "salesperson"]
UserStatus = Literal["active", "disabled"]


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1)
    role: UserRole = "salesperson"
    status: UserStatus = "active"


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8)
    name: Optional[str] = Field(default=None, min_length=1)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserRead(BaseModel):
    id: str
    email: EmailStr
    name: str
    role: UserRole
    status: UserStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
