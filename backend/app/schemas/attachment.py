"""Attachment schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AttachmentCreate(BaseModel):
    renewal_id: str = Field(min_length=1)
    file_name: str = Field(min_length=1)
    file_path: str = Field(min_length=1)
    file_size: int = Field(ge=0)


class AttachmentRead(BaseModel):
    id: str
    renewal_id: str
    file_name: str
    file_path: str
    file_size: int
    uploaded_by: Optional[str] = None
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UploadUrlResponse(BaseModel):
    upload_url: str


class DownloadUrlResponse(BaseModel):
    download_url: str
