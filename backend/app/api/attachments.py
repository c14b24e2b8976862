"""Attachment metadata endpoints and signed object storage URLs."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.dependencies.services import get_object_storage
from backend.app.models.attachment import Attachment
from backend.app.models.renewal import Renewal
from backend.app.models.user import User
from backend.app.schemas.attachment import AttachmentCreate, AttachmentRead, DownloadUrlResponse, UploadUrlResponse
from backend.app.services.object_storage import ObjectStorageService

router = APIRouter(tags=["attachments"])


def _get_attachment(db: Session, attachment_id: str) -> Attachment:
    attachment = db.query(Attachment).filter(Attachment.id == attachment_id).first()
    if not attachment:
        raise HTTPException(status_code=404, detail="Attachment not found")
    return attachment


@router.get("/renewals/{renewal_id}/attachments", response_model=list[AttachmentRead])
async def list_attachments(renewal_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if not db.query(Renewal).filter(Renewal.id == renewal_id).first():
        raise HTTPException(status_code=404, detail="Renewal not found")
    return (
        db.query(Attachment)
        .filter(Attachment.renewal_id == renewal_id)
        .order_by(Attachment.uploaded_at.desc())
        .all()
    )


@router.post("/attachments", response_model=AttachmentRead, status_code=201)
async def create_attachment(
    attachment_in: AttachmentCreate,
    db: Session = Depends(get_db),
    object_storage: ObjectStorageService = Depends(get_object_storage),
    current_user: User = Depends(get_current_user),
):
    if not db.query(Renewal).filter(Renewal.id == attachment_in.renewal_id).first():
        raise HTTPException(status_code=404, detail="Renewal not found")
    attachment = Attachment(
        renewal_id=attachment_in.renewal_id,
        file_name=attachment_in.file_name,
        file_path=object_storage.normalize_object_path(attachment_in.file_path),
        file_size=attachment_in.file_size,
        uploaded_by=current_user.id,
    )
    db.add(attachment)
    db.commit()
    db.refresh(attachment)
    return attachment


@router.get("/attachments/{attachment_id}/download", response_model=DownloadUrlResponse)
async def get_attachment_download_url(
    attachment_id: str,
    db: Session = Depends(get_db),
    object_storage: ObjectStorageService = Depends(get_object_storage),
    current_user: User = Depends(get_current_user),
):
    attachment = _get_attachment(db, attachment_id)
    return {"download_url": object_storage.get_download_url(attachment.file_path)}


@router.delete("/attachments/{attachment_id}", status_code=204)
async def delete_attachment(attachment_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    attachment = _get_attachment(db, attachment_id)
    db.delete(attachment)
    db.commit()
    return Response(status_code=204)


@router.post("/objects/upload", response_model=UploadUrlResponse)
async def get_upload_url(
    object_storage: ObjectStorageService = Depends(get_object_storage),
    current_user: User = Depends(get_current_user),
):
    return {"upload_url": object_storage.get_upload_url()}
