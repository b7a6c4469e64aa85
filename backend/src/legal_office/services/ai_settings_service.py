"""
AI Settings Service for the Legal Office backend.

Keeps the single ``ai_settings`` row. Provider API keys are stored encrypted
and fall back to the environment when no key has been saved.
"""

import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from legal_office.core.config import get_config
from legal_office.core.security import get_encryption_service
from legal_office.models import AISettings
from legal_office.schemas import AISettingsUpdate, AISettingsResponse

config = get_config()
logger = logging.getLogger(__name__)

PROVIDER_GLM = "glm"
PROVIDER_GEMINI = "gemini"


class AISettingsService:
    """Read and update the assistant's runtime settings."""

    def __init__(self, db: Session):
        self.db = db

    def get_or_create(self) -> AISettings:
        settings = self.db.query(AISettings).first()
        if settings is None:
            settings = AISettings(
                ai_mode=config.ai.default_mode,
                model=config.ai.glm_model,
                system_prompt=config.ai.system_prompt,
                temperature=config.ai.temperature,
                top_p=config.ai.top_p,
                max_tokens=config.ai.max_tokens,
                timeout_seconds=config.ai.timeout_seconds,
                max_retries=config.ai.max_retries,
            )
            self.db.add(settings)
            self.db.commit()
            self.db.refresh(settings)
            logger.info("Created default AI settings")
        return settings

    def get_api_key(self, provider: str, settings: Optional[AISettings] = None) -> str:
        """Decrypted key for ``provider`` ('glm' or 'gemini'), else the environment value."""
        settings = settings or self.get_or_create()
        if provider == PROVIDER_GLM:
            encrypted, fallback = settings.encrypted_glm_api_key, config.ai.glm_api_key
        else:
            encrypted, fallback = settings.encrypted_gemini_api_key, config.ai.gemini_api_key

        if encrypted:
            try:
                return get_encryption_service().decrypt(encrypted)
            except ValueError:
                logger.error(f"Stored {provider} API key cannot be decrypted, using environment value")
        return fallback

    def to_response(self, settings: AISettings) -> AISettingsResponse:
        return AISettingsResponse(
            ai_mode=settings.ai_mode,
            model=settings.model,
            system_prompt=settings.system_prompt,
            temperature=settings.temperature,
            top_p=settings.top_p,
            max_tokens=settings.max_tokens,
            timeout_seconds=settings.timeout_seconds,
            max_retries=settings.max_retries,
            has_glm_api_key=bool(self.get_api_key(PROVIDER_GLM, settings)),
            has_gemini_api_key=bool(self.get_api_key(PROVIDER_GEMINI, settings)),
            updated_at=settings.updated_at,
        )

    def get_settings(self) -> AISettingsResponse:
        return self.to_response(self.get_or_create())

    def update_settings(self, update: AISettingsUpdate) -> AISettingsResponse:
        settings = self.get_or_create()
        changes = update.model_dump(exclude_unset=True, exclude_none=True)

        encryption = get_encryption_service()
        for key_field, column in (
            ("glm_api_key", "encrypted_glm_api_key"),
            ("gemini_api_key", "encrypted_gemini_api_key"),
        ):
            if key_field in changes:
                value = changes.pop(key_field).strip()
                setattr(settings, column, encryption.encrypt(value) if value else None)

        for key, value in changes.items():
            setattr(settings, key, value)
        settings.updated_at = datetime.utcnow().isoformat()

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(settings)

        logger.info(f"AI settings updated: {sorted(update.model_dump(exclude_unset=True))}")
        return self.to_response(settings)
