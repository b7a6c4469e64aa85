"""
Document model.
"""

from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow_iso


class Document(Base):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    content = Column(Text, nullable=True)
    status = Column(String(10), nullable=False, default="draft")  # 'draft' or 'final'
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=True, index=True)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=True, index=True)
    lawyer_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(String, nullable=True, default=utcnow_iso)
    updated_at = Column(String, nullable=True, default=utcnow_iso)

    case = relationship("Case", back_populates="documents")
    client = relationship("Client", back_populates="documents")

    def __repr__(self):
        return f"<Document(id={self.id}, title='{self.title}', status='{self.status}')>"
