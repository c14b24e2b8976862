"""Per-request construction of the store, scheduler and object storage services."""

from fastapi import Depends
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.services.object_storage import ObjectStorageService
from backend.app.services.scheduler import RenewalScheduler
from backend.app.services.store import SqlAlchemyStore


def get_store(db: Session = Depends(get_db)) -> SqlAlchemyStore:
    return SqlAlchemyStore(db)


def get_scheduler(store: SqlAlchemyStore = Depends(get_store)) -> RenewalScheduler:
    return RenewalScheduler(store)


def get_object_storage() -> ObjectStorageService:
    return ObjectStorageService()
