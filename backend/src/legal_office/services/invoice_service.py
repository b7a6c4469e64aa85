"""
Invoice Service for the Legal Office backend.

Invoices carry line items; whenever items are present the invoice amount is
their sum. Numbers follow ``INV-<year>-<seq:03d>`` and are unique.
"""

import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.orm import selectinload

from legal_office.core.constants import INVOICE_NUMBER_PREFIX
from legal_office.core.exceptions import ValidationError
from legal_office.models import Profile, Client, Invoice, InvoiceItem
from legal_office.schemas import InvoiceCreate, InvoiceUpdate, InvoiceResponse, InvoiceItemInput
from legal_office.services.base_service import OwnedResourceService, next_sequence_number

logger = logging.getLogger(__name__)


class InvoiceService(OwnedResourceService):
    """Service for invoices and their items."""

    model = Invoice
    resource_name = "Invoice"

    def _scoped_query(self, user: Profile):
        return super()._scoped_query(user).options(
            selectinload(Invoice.items), selectinload(Invoice.client)
        )

    def generate_invoice_number(self, year: Optional[int] = None) -> str:
        year = year or datetime.utcnow().year
        return next_sequence_number(self.db, Invoice.number, INVOICE_NUMBER_PREFIX, year, 3)

    @staticmethod
    def _build_items(items: List[InvoiceItemInput]) -> List[InvoiceItem]:
        return [InvoiceItem(description=item.description, amount=item.amount) for item in items]

    def list_invoices(
        self,
        user: Profile,
        status: Optional[str] = None,
        client_id: Optional[str] = None,
    ) -> List[InvoiceResponse]:
        query = self._scoped_query(user)
        if status:
            query = query.filter(Invoice.status == status)
        if client_id:
            query = query.filter(Invoice.client_id == client_id)

        invoices = query.order_by(Invoice.created_at.desc()).all()
        return [InvoiceResponse.model_validate(invoice) for invoice in invoices]

    def get_invoice(self, invoice_id: str, user: Profile) -> InvoiceResponse:
        return InvoiceResponse.model_validate(self._get_owned(invoice_id, user))

    def create_invoice(self, user: Profile, invoice_data: InvoiceCreate) -> InvoiceResponse:
        """Write the invoice and its items in one transaction."""
        self._check_reference(Client, invoice_data.client_id, user.id, "client_id")

        def build() -> Invoice:
            items = self._build_items(invoice_data.items)
            return Invoice(
                number=self.generate_invoice_number(invoice_data.date.year),
                amount=sum(item.amount for item in items) if items else invoice_data.amount,
                status=invoice_data.status,
                date=invoice_data.date.isoformat(),
                due_date=invoice_data.due_date.isoformat(),
                client_id=invoice_data.client_id,
                lawyer_id=user.id,
                items=items,
            )

        invoice = self._insert_numbered(build)
        self.db.refresh(invoice)

        logger.info(f"Created invoice {invoice.number} ({invoice.amount}) with {len(invoice.items)} items")
        return InvoiceResponse.model_validate(invoice)

    def update_invoice(self, invoice_id: str, user: Profile, invoice_data: InvoiceUpdate) -> InvoiceResponse:
        invoice = self._get_owned(invoice_id, user)
        changes = invoice_data.model_dump(exclude_unset=True, exclude_none=True)
        new_items = invoice_data.items if "items" in changes else None
        changes.pop("items", None)
        if new_items == [] and "amount" not in changes:
            raise ValidationError("amount is required when all items are removed", field="amount")

        if "client_id" in changes:
            self._check_reference(Client, changes["client_id"], invoice.lawyer_id, "client_id")
        for field in ("date", "due_date"):
            if field in changes:
                changes[field] = changes[field].isoformat()

        self._apply_changes(invoice, changes)
        if invoice.due_date < invoice.date:
            self.db.rollback()
            raise ValidationError("due_date cannot be earlier than date", field="due_date")

        if new_items is not None:
            invoice.items = self._build_items(new_items)
        if invoice.items:
            invoice.amount = sum(item.amount for item in invoice.items)

        self._commit()
        self.db.refresh(invoice)
        return InvoiceResponse.model_validate(invoice)

    def delete_invoice(self, invoice_id: str, user: Profile) -> None:
        """Delete an invoice and its items."""
        self._delete(self._get_owned(invoice_id, user))

    def mark_overdue(self, user: Profile, today: Optional[date] = None) -> int:
        """Flag unpaid invoices past their due date as overdue. Returns how many changed."""
        today_iso = (today or date.today()).isoformat()
        query = self.db.query(Invoice).filter(Invoice.status == "unpaid", Invoice.due_date < today_iso)
        if not user.is_admin():
            query = query.filter(Invoice.lawyer_id == user.id)

        changed = query.update({Invoice.status: "overdue"}, synchronize_session="fetch")
        self._commit()
        logger.info(f"Marked {changed} invoices overdue")
        return changed
