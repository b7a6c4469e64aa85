"""
Appointment model.
"""

from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow_iso


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # 'court', 'meeting' or 'deadline'
    date = Column(String, nullable=False, index=True)  # ISO datetime, sorts chronologically
    location = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=True, index=True)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=True, index=True)
    lawyer_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(String, nullable=True, default=utcnow_iso)

    case = relationship("Case", back_populates="appointments")
    client = relationship("Client", back_populates="appointments")

    def __repr__(self):
        return f"<Appointment(id={self.id}, type='{self.type}', date='{self.date}')>"
