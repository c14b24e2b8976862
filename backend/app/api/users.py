"""User management endpoints. Listing is open to every user; changes are admin only."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.core.security import get_password_hash
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_admin, get_current_user
from backend.app.models.attachment import Attachment
from backend.app.models.customer import Customer
from backend.app.models.renewal import Renewal
from backend.app.models.user import User
from backend.app.schemas.user import UserCreate, UserRead, UserStatusUpdate, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


def _get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _ensure_email_free(db: Session, email: str, user_id: str | None = None) -> None:
    existing = db.query(User).filter(User.email == email).first()
    if existing and existing.id != user_id:
        raise HTTPException(status_code=400, detail="Email already in use")


@router.get("", response_model=list[UserRead])
async def list_users(
    assignable: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(User)
    if assignable:
        query = query.filter(User.status == "active")
    return query.order_by(User.created_at.desc()).all()


@router.post("", response_model=UserRead, status_code=201)
async def create_user(user_in: UserCreate, db: Session = Depends(get_db), current_admin: User = Depends(get_current_admin)):
    _ensure_email_free(db, user_in.email)
    user = User(
        email=user_in.email,
        hashed_password=get_password_hash(user_in.password),
        name=user_in.name,
        role=user_in.role,
        status=user_in.status,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    user_in: UserUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = _get_user(db, user_id)
    if user_in.email is not None:
        _ensure_email_free(db, user_in.email, user_id)
        user.email = user_in.email
    if user_in.password:
        user.hashed_password = get_password_hash(user_in.password)
    for field in ("name", "role", "status"):
        value = getattr(user_in, field)
        if value is not None:
            setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


@router.patch("/{user_id}/status", response_model=UserRead)
async def update_user_status(
    user_id: str,
    update: UserStatusUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = _get_user(db, user_id)
    if user_id == current_admin.id and update.status == "disabled":
        raise HTTPException(status_code=400, detail="Cannot disable your own account")
    user.status = update.status
    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str, db: Session = Depends(get_db), current_admin: User = Depends(get_current_admin)):
    if user_id == current_admin.id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")
    user = _get_user(db, user_id)
    # Owned customers and renewals stay, unassigned.
    db.query(Customer).filter(Customer.assigned_salesperson_id == user_id).update(
        {Customer.assigned_salesperson_id: None}, synchronize_session=False
    )
    db.query(Renewal).filter(Renewal.assigned_salesperson_id == user_id).update(
        {Renewal.assigned_salesperson_id: None}, synchronize_session=False
    )
    db.query(Attachment).filter(Attachment.uploaded_by == user_id).update(
        {Attachment.uploaded_by: None}, synchronize_session=False
    )
    db.delete(user)
    db.commit()
    return Response(status_code=204)
