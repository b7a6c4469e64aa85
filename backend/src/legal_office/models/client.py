"""
Client model.
"""

from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow_iso


class Client(Base):
    """An individual or company represented by a lawyer."""
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=True)
    address = Column(String(255), nullable=True)
    type = Column(String(20), nullable=False, default="individual")  # 'individual' or 'company'
    lawyer_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(String, nullable=True, default=utcnow_iso)

    # Relationships
    lawyer = relationship("Profile", back_populates="clients")
    cases = relationship("Case", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
    appointments = relationship("Appointment", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
    documents = relationship("Document", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
    invoices = relationship("Invoice", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Client(id={self.id}, name='{self.name}', type='{self.type}')>"
