import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legal_office.core.database import get_db
from legal_office.core.response_utils import create_success_response, ResponseTimer
from legal_office.models import Profile
from legal_office.schemas import InvoiceCreate, InvoiceUpdate, StandardResponse
from legal_office.services.invoice_service import InvoiceService
from legal_office.api.v1.auth import require_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=StandardResponse)
def list_invoices(
    status: Optional[str] = Query(None, pattern="^(paid|unpaid|overdue)$"),
    client_id: Optional[str] = Query(None),
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Invoices, newest first, each with its items and client."""
    with ResponseTimer() as timer:
        invoices = InvoiceService(db).list_invoices(current_user, status=status, client_id=client_id)
        return create_success_response(data=invoices, execution_time=timer.get_execution_time())


@router.post("/mark-overdue", response_model=StandardResponse)
def mark_overdue_invoices(current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        changed = InvoiceService(db).mark_overdue(current_user)
        return create_success_response(data={"updated": changed}, execution_time=timer.get_execution_time())


@router.post("", response_model=StandardResponse, status_code=201)
def create_invoice(invoice_data: InvoiceCreate, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        invoice = InvoiceService(db).create_invoice(current_user, invoice_data)
        return create_success_response(data=invoice, status_code=201, execution_time=timer.get_execution_time())


@router.get("/{invoice_id}", response_model=StandardResponse)
def get_invoice(invoice_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        invoice = InvoiceService(db).get_invoice(invoice_id, current_user)
        return create_success_response(data=invoice, execution_time=timer.get_execution_time())


@router.put("/{invoice_id}", response_model=StandardResponse)
def update_invoice(
    invoice_id: str,
    invoice_data: InvoiceUpdate,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Update fields or status; ``items`` replaces every line item."""
    with ResponseTimer() as timer:
        invoice = InvoiceService(db).update_invoice(invoice_id, current_user, invoice_data)
        return create_success_response(data=invoice, execution_time=timer.get_execution_time())


@router.delete("/{invoice_id}", response_model=StandardResponse)
def delete_invoice(invoice_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        InvoiceService(db).delete_invoice(invoice_id, current_user)
        return create_success_response(
            data=None,
            message="Invoice deleted successfully",
            execution_time=timer.get_execution_time()
        )
