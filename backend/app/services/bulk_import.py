"""Spreadsheet import of renewals.

Each row names a company, its service dates and interval, and optionally the
salesperson who owns it. Rows are reconciled against a snapshot of existing
customers and users taken once per batch; a customer created by one row is
reused by every later row naming the same company. A bad row is reported and
skipped, never aborting the rest of the batch.
"""

import io
import logging
import zipfile
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import openpyxl
from openpyxl.utils import get_column_letter
from openpyxl.utils.datetime import from_excel
from openpyxl.utils.exceptions import InvalidFileException

from backend.app.core.errors import ValidationError
from backend.app.models.renewal import DEFAULT_SERVICE_TYPE, RENEWAL_STATUSES, SERVICE_TYPES
from backend.app.services.intervals import normalize_choice, parse_positive_int

logger = logging.getLogger(__name__)

TEMPLATE_HEADERS = [
    "Company Name",
    "Contact Name",
    "Email",
    "Phone",
    "Service Type",
    "Last Service Date",
    "Next Due Date",
    "Interval Type",
    "Custom Interval Months",
    "Status",
    "Notes",
    "Assigned Salesperson Email",
]
TEMPLATE_EXAMPLE_ROW = [
    "Acme Manufacturing",
    "Jane Doe",
    "jane.doe@acme.example",
    "555-0100",
    DEFAULT_SERVICE_TYPE,
    "2024-01-15",
    "2025-01-15",
    "annual",
    "",
    "pending",
    "Main plant, building 2",
    "sales@example.com",
]

# Narrower than INTERVAL_TYPES: multi-year cadences are only accepted by the renewal form.
IMPORT_INTERVAL_TYPES = ("annual", "bi-annual", "custom")

DATE_FORMATS = ("%m/%d/%Y", "%Y/%m/%d")


@dataclass
class ImportResult:
    success: int = 0
    failed: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {"success": self.success, "failed": self.failed, "errors": self.errors}


def _text(row: Dict[str, Any], column: str) -> Optional[str]:
    value = row.get(column)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _is_blank(row: Dict[str, Any]) -> bool:
    return all(value is None or str(value).strip() == "" for value in row.values())


def parse_date(value, label: str) -> date:
    """Read a spreadsheet cell as a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            converted = from_excel(value)
        except (TypeError, ValueError, OverflowError):
            converted = None
        if isinstance(converted, datetime):
            return converted.date()
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
    raise ValidationError(f"Invalid {label}: '{value}'")


def _service_type(value: Optional[str]) -> str:
    if value is None:
        return DEFAULT_SERVICE_TYPE
    for service_type in SERVICE_TYPES:
        if service_type.lower() == value.lower():
            return service_type
    raise ValidationError(f"Invalid service type '{value}'. Must be one of: {', '.join(SERVICE_TYPES)}")


def read_workbook(content: bytes) -> List[Dict[str, Any]]:
    """Return the first sheet's data rows keyed by the header row."""
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise ValidationError("Uploaded file is not a readable .xlsx workbook") from exc
    try:
        rows = workbook.active.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        keys = [str(cell).strip() if cell is not None else "" for cell in header]
        return [{key: value for key, value in zip(keys, values) if key} for values in rows]
    finally:
        workbook.close()


def build_template() -> bytes:
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = "Renewals"
    sheet.append(TEMPLATE_HEADERS)
    sheet.append(TEMPLATE_EXAMPLE_ROW)
    for index, header in enumerate(TEMPLATE_HEADERS, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = max(len(header) + 4, 16)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class BulkImportReconciler:
    def __init__(self, store, scheduler):
        self.store = store
        self.scheduler = scheduler

    def import_batch(self, rows: List[Dict[str, Any]]) -> ImportResult:
        result = ImportResult()
        customers_by_name = {c.company_name.strip().lower(): c for c in self.store.find_customers_all()}
        users_by_email = {
            u.email.strip().lower(): u for u in self.store.find_users_all() if getattr(u, "status", "active") == "active"
        }

        for row_number, row in enumerate(rows, start=2):  # 1-indexed, row 1 is the header
            if _is_blank(row):
                continue
            try:
                self._import_row(row, customers_by_name, users_by_email)
                result.success += 1
            except Exception as exc:
                result.failed += 1
                message = exc.message if isinstance(exc, ValidationError) else str(exc)
                logger.warning("Import row %d failed: %s", row_number, message)
                result.errors.append({"row": row_number, "error": message, "data": row})

        logger.info("Renewal import finished: %d succeeded, %d failed", result.success, result.failed)
        return result

    def _import_row(self, row, customers_by_name, users_by_email):
        company_name = _text(row, "Company Name")
        if company_name is None:
            raise ValidationError("Company Name is required")
        customer = customers_by_name.get(company_name.lower())
        contact_name = _text(row, "Contact Name")
        if customer is None and contact_name is None:
            raise ValidationError(f"Contact Name is required to create new customer '{company_name}'")

        salesperson_email = _text(row, "Assigned Salesperson Email")
        salesperson = users_by_email.get(salesperson_email.lower()) if salesperson_email else None
        salesperson_id = salesperson.id if salesperson is not None else None

        last_service_date = parse_date(row.get("Last Service Date"), "Last Service Date")
        next_due_date = parse_date(row.get("Next Due Date"), "Next Due Date")
        interval_type = normalize_choice(row.get("Interval Type"), IMPORT_INTERVAL_TYPES, "interval type")
        status = normalize_choice(row.get("Status"), RENEWAL_STATUSES, "status")
        custom_interval_months = None
        if interval_type == "custom":
            custom_interval_months = parse_positive_int(row.get("Custom Interval Months"), "Custom Interval Months")
        service_type = _service_type(_text(row, "Service Type"))

        if customer is None:
            customer = self.store.create_customer(
                {
                    "company_name": company_name,
                    "contact_name": contact_name,
                    "email": _text(row, "Email"),
                    "phone": _text(row, "Phone"),
                    "assigned_salesperson_id": salesperson_id,
                }
            )
            customers_by_name[company_name.lower()] = customer

        renewal = self.store.create_renewal(
            {
                "customer_id": customer.id,
                "service_type": service_type,
                "last_service_date": last_service_date,
                "next_due_date": next_due_date,
                "interval_type": interval_type,
                "custom_interval_months": custom_interval_months,
                "status": status,
                "notes": _text(row, "Notes"),
                "assigned_salesperson_id": salesperson_id,
            }
        )
        try:
            self.scheduler.generate_for_renewal(renewal)
        except Exception:
            # A failed row keeps no renewal.
            self.store.delete_renewal(renewal.id)
            raise
        return renewal
