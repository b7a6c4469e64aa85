"""
Profile model for lawyers and admins.
"""

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow_iso


class Profile(Base):
    """A user account with a role of ``lawyer`` or ``admin``."""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(20), default="lawyer", nullable=False)
    full_name = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)
    address = Column(String(255), nullable=True)
    license_number = Column(String(50), nullable=True)
    specialization = Column(String(100), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(String, nullable=True, default=utcnow_iso)
    updated_at = Column(String, nullable=True, default=utcnow_iso)

    # Owned records go with the profile
    clients = relationship("Client", back_populates="lawyer", cascade="all, delete-orphan", passive_deletes=True)
    cases = relationship("Case", back_populates="lawyer", cascade="all, delete-orphan", passive_deletes=True)
    appointments = relationship("Appointment", cascade="all, delete-orphan", passive_deletes=True)
    documents = relationship("Document", cascade="all, delete-orphan", passive_deletes=True)
    invoices = relationship("Invoice", cascade="all, delete-orphan", passive_deletes=True)
    messages = relationship("ChatMessage", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Profile(id={self.id}, email='{self.email}', role='{self.role}', active={self.is_active})>"

    def is_admin(self) -> bool:
        return self.role == "admin"
