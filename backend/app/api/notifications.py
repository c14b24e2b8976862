"""Notification listing and delivery bookkeeping."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.time import utc_now
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.notification import Notification
from backend.app.models.user import User
from backend.app.schemas.notification import NotificationRead

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationRead])
async def list_notifications(
    salesperson_id: str | None = None,
    status: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Notification)
    if salesperson_id:
        query = query.filter(Notification.salesperson_id == salesperson_id)
    if status:
        query = query.filter(Notification.status == status)
    return query.order_by(Notification.scheduled_date.desc()).all()


@router.get("/me", response_model=list[NotificationRead])
async def list_my_notifications(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return (
        db.query(Notification)
        .filter(Notification.salesperson_id == current_user.id)
        .order_by(Notification.scheduled_date.desc())
        .all()
    )


@router.patch("/{notification_id}/sent", response_model=NotificationRead)
async def mark_notification_sent(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    if notification.salesperson_id != current_user.id and current_user.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your notification")
    if notification.status != "sent":
        notification.status = "sent"
        notification.sent_at = utc_now()
        db.commit()
        db.refresh(notification)
    return notification
