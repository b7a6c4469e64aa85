"""
Assistant conversation messages.
"""

import json
from typing import Any, Dict, List, Optional
from sqlalchemy import Column, String, Text, Boolean, ForeignKey

from .base import Base, new_id, utcnow_iso


class ChatMessage(Base):
    """
    One turn of a user's conversation with the legal assistant.
    JSON payloads (feedback, formatted content, metadata) are stored as text.
    """
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    sender = Column(String(10), nullable=False)  # 'user' or 'ai'
    feedback = Column(Text, nullable=True)  # {"is_correct": bool, "correction": str|null}
    formatted_content = Column(Text, nullable=True)
    response_metadata = Column(Text, nullable=True)
    error = Column(Boolean, nullable=False, default=False)
    created_at = Column(String, nullable=True, default=utcnow_iso)

    @staticmethod
    def _load(raw: Optional[str]):
        return json.loads(raw) if raw else None

    @property
    def feedback_data(self) -> Optional[Dict[str, Any]]:
        return self._load(self.feedback)

    @property
    def formatted_blocks(self) -> Optional[List[Dict[str, Any]]]:
        return self._load(self.formatted_content)

    @property
    def metadata_data(self) -> Optional[Dict[str, Any]]:
        return self._load(self.response_metadata)

    def __repr__(self):
        return f"<ChatMessage(id={self.id}, user_id={self.user_id}, sender='{self.sender}', error={self.error})>"
