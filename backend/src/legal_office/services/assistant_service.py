"""
Assistant Service for the Legal Office backend.

Stores each user's conversation with the legal assistant and produces the
AI reply through the active mode: the GLM-4 chat-completions API, Gemini,
or a random predefined response.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional
from sqlalchemy.orm import Session

from legal_office.core import messages
from legal_office.core.config import get_config
from legal_office.core.constants import LEGAL_TEMPLATES, GLM_MODELS
from legal_office.core.exceptions import ResourceNotFoundError, ValidationError
from legal_office.core.security import SecureLogger
from legal_office.models import Profile, ChatMessage, AISettings
from legal_office.schemas import ChatMessageResponse, ChatExchangeResponse, FeedbackRequest
from legal_office.services.ai_client import AIClient, AIError
from legal_office.services.ai_settings_service import AISettingsService, PROVIDER_GLM, PROVIDER_GEMINI
from legal_office.services.content_formatter import format_legal_content
from legal_office.services.gemini_client import send_to_gemini
from legal_office.services.predefined_response_service import PredefinedResponseService
from legal_office.services.prompt_service import PromptService

config = get_config()
logger = logging.getLogger(__name__)

SENDER_ROLES = {"user": "user", "ai": "assistant"}


def build_ai_client(settings: AISettings, api_key: str) -> AIClient:
    """AIClient configured from the stored AI settings."""
    return AIClient(
        model=settings.model,
        timeout=settings.timeout_seconds,
        max_retries=settings.max_retries,
        default_system_prompt=settings.system_prompt,
        api_key=api_key,
        max_history_length=config.ai.max_history,
    )


class AssistantService:
    """Service for the per-user assistant conversation."""

    def __init__(self, db: Session, ai_client_factory: Optional[Callable[[AISettings, str], AIClient]] = None):
        self.db = db
        self.settings_service = AISettingsService(db)
        self._ai_client_factory = ai_client_factory

    @staticmethod
    def to_response(message: ChatMessage) -> ChatMessageResponse:
        return ChatMessageResponse(
            id=message.id,
            user_id=message.user_id,
            content=message.content,
            sender=message.sender,
            feedback=message.feedback_data,
            error=message.error,
            formatted_content=message.formatted_blocks,
            metadata=message.metadata_data,
            created_at=message.created_at,
        )

    def _store(self, user: Profile, content: str, sender: str, **extra) -> ChatMessage:
        message = ChatMessage(user_id=user.id, content=content, sender=sender, **extra)
        self.db.add(message)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(message)
        return message

    def list_messages(self, user: Profile) -> List[ChatMessageResponse]:
        history = self.db.query(ChatMessage).filter(
            ChatMessage.user_id == user.id
        ).order_by(ChatMessage.created_at.asc()).all()
        return [self.to_response(message) for message in history]

    def clear_messages(self, user: Profile) -> int:
        deleted = self.db.query(ChatMessage).filter(ChatMessage.user_id == user.id).delete(
            synchronize_session=False
        )
        self.db.commit()
        logger.info(f"Cleared {deleted} assistant messages for user {user.id}")
        return deleted

    def _history_turns(self, user: Profile, exclude_id: str) -> List[Dict[str, str]]:
        """Recent successful turns, oldest first, in chat-completions roles."""
        recent = self.db.query(ChatMessage).filter(
            ChatMessage.user_id == user.id,
            ChatMessage.id != exclude_id,
            ChatMessage.error.is_(False),
        ).order_by(ChatMessage.created_at.desc()).limit(config.ai.max_history).all()
        return [
            {"role": SENDER_ROLES[message.sender], "content": message.content}
            for message in reversed(recent)
        ]

    def _reply_with_glm(
        self, user: Profile, settings: AISettings, content: str, user_message_id: str, system_prompt: Optional[str]
    ) -> Dict[str, Any]:
        factory = self._ai_client_factory or build_ai_client
        client = factory(settings, self.settings_service.get_api_key(PROVIDER_GLM, settings))
        try:
            client.load_history(self._history_turns(user, exclude_id=user_message_id))
            default_prompt = PromptService(self.db).get_default_prompt()
            if default_prompt is not None:
                client.set_default_prompt(default_prompt.content)

            result = client.send_message(
                content,
                temperature=settings.temperature,
                top_p=settings.top_p,
                max_tokens=settings.max_tokens,
                system_prompt=system_prompt,
            )
        finally:
            client.dispose()
        return {
            "content": result.response,
            "formatted_content": result.formatted_content,
            "metadata": result.metadata,
        }

    def _reply_with_gemini(self, settings: AISettings, content: str, system_prompt: Optional[str]) -> Dict[str, Any]:
        prompt = f"{system_prompt}\n\n{content}" if system_prompt else content
        text = send_to_gemini(prompt, api_key=self.settings_service.get_api_key(PROVIDER_GEMINI, settings))
        return {
            "content": text,
            "formatted_content": format_legal_content(text),
            "metadata": {"model": config.ai.gemini_model},
        }

    def _reply_with_predefined(self) -> Dict[str, Any]:
        selected = PredefinedResponseService(self.db).pick_random()
        if selected is None:
            raise AIError(messages.NO_PREDEFINED_RESPONSES, AIError.NOT_CONFIGURED)
        return {
            "content": selected.response,
            "formatted_content": format_legal_content(selected.response),
            "metadata": {"processing_time": selected.processing_time, "predefined_response_id": selected.id},
        }

    def send_message(self, user: Profile, content: str, system_prompt: Optional[str] = None) -> ChatExchangeResponse:
        """
        Store the user's message and the assistant's reply.

        When the provider fails, the user message is kept, an AI message
        flagged ``error`` records the failure, and ExternalServiceError is raised.
        """
        trimmed = (content or "").strip()
        if not trimmed:
            raise ValidationError("Message content is empty", field="content", user_message=messages.EMPTY_MESSAGE)

        user_message = self._store(user, trimmed, "user")
        settings = self.settings_service.get_or_create()
        logger.info(
            f"Assistant request from {user.id} in {settings.ai_mode} mode: "
            f"{SecureLogger.sanitize_log_message(trimmed, 80)}"
        )

        try:
            if settings.ai_mode == "gemini":
                reply = self._reply_with_gemini(settings, trimmed, system_prompt)
            elif settings.ai_mode == "predefined":
                reply = self._reply_with_predefined()
            else:
                reply = self._reply_with_glm(user, settings, trimmed, user_message.id, system_prompt)
        except AIError as e:
            logger.error(f"Assistant reply failed for user {user.id}: {e!r}")
            self._store(user, e.message, "ai", error=True)
            service_name = "Gemini" if settings.ai_mode == "gemini" else settings.ai_mode
            raise e.to_service_error(service_name) from e

        ai_message = self._store(
            user,
            reply["content"],
            "ai",
            formatted_content=json.dumps(reply["formatted_content"], ensure_ascii=False),
            response_metadata=json.dumps(reply["metadata"], ensure_ascii=False),
        )
        return ChatExchangeResponse(
            user_message=self.to_response(user_message),
            ai_message=self.to_response(ai_message),
        )

    def send_with_template(self, user: Profile, template: str, content: str) -> ChatExchangeResponse:
        """Send ``content`` with one of the legal templates as the system prompt."""
        template_key = template.upper()
        if template_key not in LEGAL_TEMPLATES:
            raise ResourceNotFoundError("Template", template)
        return self.send_message(user, content, system_prompt=LEGAL_TEMPLATES[template_key])

    def save_feedback(self, user: Profile, message_id: str, feedback: FeedbackRequest) -> ChatMessageResponse:
        message = self.db.query(ChatMessage).filter(
            ChatMessage.id == message_id,
            ChatMessage.user_id == user.id,
        ).first()
        if message is None:
            raise ResourceNotFoundError("Message", message_id)

        correction = (feedback.correction or "").strip() or None
        if not feedback.is_correct and not correction:
            raise ValidationError(
                "A correction is required when the answer is marked incorrect",
                field="correction",
                user_message=messages.CORRECTION_REQUIRED,
            )

        message.feedback = json.dumps({"is_correct": feedback.is_correct, "correction": correction}, ensure_ascii=False)
        self.db.commit()
        self.db.refresh(message)
        return self.to_response(message)

    @staticmethod
    def list_templates() -> Dict[str, str]:
        return dict(LEGAL_TEMPLATES)

    @staticmethod
    def list_models() -> Dict[str, str]:
        return dict(GLM_MODELS)
