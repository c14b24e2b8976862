"""Notification preference endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.dependencies.services import get_scheduler, get_store
from backend.app.models.user import User
from backend.app.schemas.notification import NotificationPreferenceRead, NotificationPreferenceUpdate
from backend.app.services.scheduler import RenewalScheduler
from backend.app.services.store import SqlAlchemyStore

router = APIRouter(prefix="/notification-preferences", tags=["notification-preferences"])


def _check_access(db: Session, user_id: str, current_user: User) -> None:
    if user_id != current_user.id and current_user.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot manage another user's preferences")
    if not db.query(User).filter(User.id == user_id).first():
        raise HTTPException(status_code=404, detail="User not found")


@router.get("/{user_id}", response_model=NotificationPreferenceRead)
async def get_notification_preferences(
    user_id: str,
    db: Session = Depends(get_db),
    scheduler: RenewalScheduler = Depends(get_scheduler),
    current_user: User = Depends(get_current_user),
):
    _check_access(db, user_id, current_user)
    return scheduler.resolve_preferences(user_id)


@router.put("", response_model=NotificationPreferenceRead)
async def update_notification_preferences(
    update: NotificationPreferenceUpdate,
    db: Session = Depends(get_db),
    store: SqlAlchemyStore = Depends(get_store),
    scheduler: RenewalScheduler = Depends(get_scheduler),
    current_user: User = Depends(get_current_user),
):
    _check_access(db, update.user_id, current_user)
    scheduler.resolve_preferences(update.user_id)
    return store.create_or_update_notification_preference(update.model_dump())
