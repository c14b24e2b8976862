"""Renewal endpoints, including spreadsheet bulk upload."""

import base64
import binascii
import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import or_
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError, ValidationError
from backend.app.core.time import add_months
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.dependencies.services import get_scheduler, get_store
from backend.app.models.customer import Customer
from backend.app.models.renewal import Renewal
from backend.app.models.user import User
from backend.app.schemas.customer import CustomerRead
from backend.app.schemas.renewal import (
    BulkUploadRequest,
    ImportResultRead,
    RenewalCreate,
    RenewalRead,
    RenewalUpdate,
    RenewalWithRelations,
)
from backend.app.schemas.user import UserRead
from backend.app.services.bulk_import import BulkImportReconciler, build_template, read_workbook
from backend.app.services.intervals import interval_months
from backend.app.services.scheduler import RenewalScheduler
from backend.app.services.store import SqlAlchemyStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/renewals", tags=["renewals"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _get_renewal(db: Session, renewal_id: str) -> Renewal:
    renewal = db.query(Renewal).filter(Renewal.id == renewal_id).first()
    if not renewal:
        raise HTTPException(status_code=404, detail="Renewal not found")
    return renewal


def _renewal_fields(db: Session, renewal_in: RenewalCreate) -> dict:
    """Validate references and the interval, and fill in the due date."""
    if not db.query(Customer).filter(Customer.id == renewal_in.customer_id).first():
        raise NotFoundError("Customer not found")
    if renewal_in.assigned_salesperson_id and not db.query(User).filter(User.id == renewal_in.assigned_salesperson_id).first():
        raise NotFoundError("Assigned salesperson not found")

    months = interval_months(renewal_in.interval_type, renewal_in.custom_interval_months)
    data = renewal_in.model_dump()
    if renewal_in.interval_type != "custom":
        data["custom_interval_months"] = None
    else:
        data["custom_interval_months"] = months
    if data["next_due_date"] is None:
        data["next_due_date"] = add_months(renewal_in.last_service_date, months)
    return data


def _with_relations(db: Session, renewals: list[Renewal]) -> list[RenewalWithRelations]:
    customer_ids = {r.customer_id for r in renewals}
    user_ids = {r.assigned_salesperson_id for r in renewals if r.assigned_salesperson_id}
    customers = {}
    if customer_ids:
        customers = {c.id: c for c in db.query(Customer).filter(Customer.id.in_(customer_ids)).all()}
    users = {}
    if user_ids:
        users = {u.id: u for u in db.query(User).filter(User.id.in_(user_ids)).all()}

    results = []
    for renewal in renewals:
        customer = customers.get(renewal.customer_id)
        salesperson = users.get(renewal.assigned_salesperson_id)
        results.append(
            RenewalWithRelations(
                **RenewalRead.model_validate(renewal).model_dump(),
                customer=CustomerRead.model_validate(customer) if customer else None,
                assigned_salesperson=UserRead.model_validate(salesperson) if salesperson else None,
            )
        )
    return results


@router.get("", response_model=list[RenewalWithRelations])
async def list_renewals(
    status: str | None = None,
    salesperson_id: str | None = None,
    customer_id: str | None = None,
    search: str | None = None,
    due_from: date | None = None,
    due_to: date | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Renewal)
    if status:
        query = query.filter(Renewal.status == status)
    if salesperson_id:
        query = query.filter(Renewal.assigned_salesperson_id == salesperson_id)
    if customer_id:
        query = query.filter(Renewal.customer_id == customer_id)
    if due_from:
        query = query.filter(Renewal.next_due_date >= due_from)
    if due_to:
        query = query.filter(Renewal.next_due_date <= due_to)
    if search:
        query = query.join(Customer, Customer.id == Renewal.customer_id)
        for token in search.split():
            pattern = f"%{token}%"
            query = query.filter(or_(Customer.company_name.ilike(pattern), Renewal.service_type.ilike(pattern)))
    renewals = query.order_by(Renewal.next_due_date.desc(), Renewal.id.asc()).all()
    return _with_relations(db, renewals)


@router.get("/bulk-upload/template")
async def download_bulk_upload_template():
    return Response(
        content=build_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="renewals_bulk_upload_template.xlsx"'},
    )


@router.post("/bulk-upload", response_model=ImportResultRead)
async def bulk_upload_renewals(
    upload: BulkUploadRequest,
    store: SqlAlchemyStore = Depends(get_store),
    scheduler: RenewalScheduler = Depends(get_scheduler),
    current_user: User = Depends(get_current_user),
):
    encoded = upload.file_data
    if encoded.startswith("data:") and "," in encoded:
        encoded = encoded.split(",", 1)[1]
    try:
        content = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("File data is not valid base64")

    rows = read_workbook(content)
    logger.info("User %s uploaded %d renewal row(s)", current_user.id, len(rows))
    result = BulkImportReconciler(store, scheduler).import_batch(rows)
    return result.as_dict()


@router.get("/{renewal_id}", response_model=RenewalWithRelations)
async def get_renewal(renewal_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _with_relations(db, [_get_renewal(db, renewal_id)])[0]


@router.post("", response_model=RenewalRead, status_code=201)
async def create_renewal(
    renewal_in: RenewalCreate,
    db: Session = Depends(get_db),
    store: SqlAlchemyStore = Depends(get_store),
    scheduler: RenewalScheduler = Depends(get_scheduler),
    current_user: User = Depends(get_current_user),
):
    renewal = store.create_renewal(_renewal_fields(db, renewal_in))
    scheduler.generate_for_renewal(renewal)
    return renewal


@router.put("/{renewal_id}", response_model=RenewalRead)
async def update_renewal(
    renewal_id: str,
    renewal_in: RenewalUpdate,
    db: Session = Depends(get_db),
    store: SqlAlchemyStore = Depends(get_store),
    scheduler: RenewalScheduler = Depends(get_scheduler),
    current_user: User = Depends(get_current_user),
):
    _get_renewal(db, renewal_id)
    renewal = store.update_renewal(renewal_id, _renewal_fields(db, renewal_in))
    scheduler.reschedule_on_update(renewal_id, renewal)
    return renewal


@router.delete("/{renewal_id}", status_code=204)
async def delete_renewal(renewal_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    renewal = _get_renewal(db, renewal_id)
    db.delete(renewal)
    db.commit()
    return Response(status_code=204)
