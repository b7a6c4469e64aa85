"""
Admin-managed prompts. At most one is the default.
"""

from sqlalchemy import Column, String, Text, Boolean

from .base import Base, new_id, utcnow_iso


class Prompt(Base):
    __tablename__ = "prompts"

    id = Column(String(36), primary_key=True, default=new_id)
    content = Column(Text, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(String, nullable=True, default=utcnow_iso)
    updated_at = Column(String, nullable=True, default=utcnow_iso)

    def __repr__(self):
        return f"<Prompt(id={self.id}, is_default={self.is_default})>"
