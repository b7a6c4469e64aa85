"""
Invoice and invoice item models.
"""

from sqlalchemy import Column, String, Float, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow_iso


class Invoice(Base):
    """
    A bill sent to a client. ``amount`` is the sum of the item amounts
    whenever the invoice has items.
    """
    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=new_id)
    number = Column(String(30), unique=True, index=True, nullable=False)
    amount = Column(Float, nullable=False, default=0.0)
    status = Column(String(10), nullable=False, default="unpaid")  # 'paid', 'unpaid' or 'overdue'
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    due_date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=True, index=True)
    lawyer_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(String, nullable=True, default=utcnow_iso)

    client = relationship("Client", back_populates="invoices")
    items = relationship(
        "InvoiceItem", back_populates="invoice", cascade="all, delete-orphan", passive_deletes=True,
        order_by="InvoiceItem.created_at",
    )

    def __repr__(self):
        return f"<Invoice(id={self.id}, number='{self.number}', amount={self.amount}, status='{self.status}')>"


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(String(36), primary_key=True, default=new_id)
    description = Column(String(500), nullable=False)
    amount = Column(Float, nullable=False, default=0.0)
    invoice_id = Column(String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(String, nullable=True, default=utcnow_iso)

    invoice = relationship("Invoice", back_populates="items")

    def __repr__(self):
        return f"<InvoiceItem(id={self.id}, invoice_id={self.invoice_id}, amount={self.amount})>"
