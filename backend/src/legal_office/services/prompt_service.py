"""
Prompt Service for the Legal Office backend.

Admins curate prompts; the default one is prepended to every assistant
request. At most one prompt is the default at any time.
"""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from legal_office.core.exceptions import ResourceNotFoundError
from legal_office.models import Prompt
from legal_office.schemas import PromptCreate, PromptUpdate, PromptResponse

logger = logging.getLogger(__name__)


class PromptService:
    """Service for managing admin prompts."""

    def __init__(self, db: Session):
        self.db = db

    def _get(self, prompt_id: str) -> Prompt:
        prompt = self.db.query(Prompt).filter(Prompt.id == prompt_id).first()
        if prompt is None:
            raise ResourceNotFoundError("Prompt", prompt_id)
        return prompt

    def _clear_defaults(self, keep_id: Optional[str] = None) -> None:
        query = self.db.query(Prompt).filter(Prompt.is_default.is_(True))
        if keep_id is not None:
            query = query.filter(Prompt.id != keep_id)
        query.update({Prompt.is_default: False}, synchronize_session="fetch")

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def list_prompts(self) -> List[PromptResponse]:
        prompts = self.db.query(Prompt).order_by(Prompt.created_at.desc()).all()
        return [PromptResponse.model_validate(prompt) for prompt in prompts]

    def get_prompt(self, prompt_id: str) -> PromptResponse:
        return PromptResponse.model_validate(self._get(prompt_id))

    def get_default_prompt(self) -> Optional[Prompt]:
        return self.db.query(Prompt).filter(Prompt.is_default.is_(True)).first()

    def create_prompt(self, prompt_data: PromptCreate) -> PromptResponse:
        now = datetime.utcnow().isoformat()
        prompt = Prompt(
            content=prompt_data.content,
            is_default=prompt_data.is_default,
            created_at=now,
            updated_at=now,
        )
        if prompt.is_default:
            self._clear_defaults()
        self.db.add(prompt)
        self._commit()
        self.db.refresh(prompt)

        logger.info(f"Created prompt {prompt.id} (default={prompt.is_default})")
        return PromptResponse.model_validate(prompt)

    def update_prompt(self, prompt_id: str, prompt_data: PromptUpdate) -> PromptResponse:
        prompt = self._get(prompt_id)
        changes = prompt_data.model_dump(exclude_unset=True, exclude_none=True)
        if changes.get("is_default"):
            self._clear_defaults(keep_id=prompt.id)

        for key, value in changes.items():
            setattr(prompt, key, value)
        prompt.updated_at = datetime.utcnow().isoformat()
        self._commit()
        self.db.refresh(prompt)
        return PromptResponse.model_validate(prompt)

    def set_default(self, prompt_id: str) -> PromptResponse:
        """Make ``prompt_id`` the only default prompt, in one transaction."""
        prompt = self._get(prompt_id)
        self._clear_defaults(keep_id=prompt.id)
        prompt.is_default = True
        prompt.updated_at = datetime.utcnow().isoformat()
        self._commit()
        self.db.refresh(prompt)

        logger.info(f"Prompt {prompt.id} is now the default")
        return PromptResponse.model_validate(prompt)

    def delete_prompt(self, prompt_id: str) -> None:
        self.db.delete(self._get(prompt_id))
        self._commit()
