"""
Runtime configuration of the legal assistant.
"""

from sqlalchemy import Column, String, Text, Float, Integer

from .base import Base, new_id, utcnow_iso


class AISettings(Base):
    """Single-row table holding the active AI mode and generation settings."""
    __tablename__ = "ai_settings"

    id = Column(String(36), primary_key=True, default=new_id)
    ai_mode = Column(String(20), nullable=False, default="glm4")  # 'glm4', 'gemini' or 'predefined'
    model = Column(String(100), nullable=False)
    system_prompt = Column(Text, nullable=False)
    temperature = Column(Float, nullable=False)
    top_p = Column(Float, nullable=False)
    max_tokens = Column(Integer, nullable=False)
    timeout_seconds = Column(Float, nullable=False)
    max_retries = Column(Integer, nullable=False)
    # Fernet tokens, see core.security.EncryptionService
    encrypted_glm_api_key = Column(Text, nullable=True)
    encrypted_gemini_api_key = Column(Text, nullable=True)
    updated_at = Column(String, nullable=True, default=utcnow_iso)

    def __repr__(self):
        return f"<AISettings(mode='{self.ai_mode}', model='{self.model}')>"


class PredefinedResponse(Base):
    """Canned answer served in ``predefined`` mode while still valid."""
    __tablename__ = "predefined_responses"

    id = Column(String(36), primary_key=True, default=new_id)
    response = Column(Text, nullable=False)
    processing_time = Column(Float, nullable=False, default=0.0)  # seconds
    valid_until = Column(String, nullable=True)  # ISO datetime, null means no expiry
    created_at = Column(String, nullable=True, default=utcnow_iso)

    def __repr__(self):
        return f"<PredefinedResponse(id={self.id}, valid_until={self.valid_until})>"
