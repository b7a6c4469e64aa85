"""
Case and case chat models.
"""

from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow_iso


class Case(Base):
    """
    A legal case handled by a lawyer, optionally linked to a client.
    Appointments, documents and the case chat are removed with it.
    """
    __tablename__ = "cases"

    id = Column(String(36), primary_key=True, default=new_id)
    number = Column(String(50), unique=True, index=True, nullable=False)
    title = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    court = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="open")  # 'open', 'closed' or 'in_progress'
    description = Column(Text, nullable=True)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=True, index=True)
    lawyer_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(String, nullable=True, default=utcnow_iso)
    updated_at = Column(String, nullable=True, default=utcnow_iso)

    # Relationships
    lawyer = relationship("Profile", back_populates="cases")
    client = relationship("Client", back_populates="cases")
    appointments = relationship("Appointment", back_populates="case", cascade="all, delete-orphan", passive_deletes=True)
    documents = relationship("Document", back_populates="case", cascade="all, delete-orphan", passive_deletes=True)
    chat_messages = relationship(
        "CaseChatMessage", back_populates="case", cascade="all, delete-orphan", passive_deletes=True,
        order_by="CaseChatMessage.created_at",
    )

    @property
    def caseId(self) -> str:
        return self.id

    def __repr__(self):
        return f"<Case(id={self.id}, number='{self.number}', status='{self.status}')>"


class CaseChatMessage(Base):
    """A note or exchange attached to a case."""
    __tablename__ = "case_chat_history"

    id = Column(String(36), primary_key=True, default=new_id)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    sender = Column(String(10), nullable=False)  # 'user' or 'ai'
    created_at = Column(String, nullable=True, default=utcnow_iso)

    case = relationship("Case", back_populates="chat_messages")

    def __repr__(self):
        return f"<CaseChatMessage(id={self.id}, case_id={self.case_id}, sender='{self.sender}')>"
