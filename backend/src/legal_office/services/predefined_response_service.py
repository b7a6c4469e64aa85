"""
Predefined responses served by the assistant in ``predefined`` mode.
"""

import logging
import random
from datetime import datetime
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from legal_office.core.exceptions import ResourceNotFoundError
from legal_office.models import PredefinedResponse
from legal_office.schemas import PredefinedResponseCreate, PredefinedResponseUpdate, PredefinedResponseOut
from legal_office.services.base_service import to_naive_utc

logger = logging.getLogger(__name__)


class PredefinedResponseService:

    def __init__(self, db: Session):
        self.db = db

    def _get(self, response_id: str) -> PredefinedResponse:
        record = self.db.query(PredefinedResponse).filter(PredefinedResponse.id == response_id).first()
        if record is None:
            raise ResourceNotFoundError("PredefinedResponse", response_id)
        return record

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def list_responses(self) -> List[PredefinedResponseOut]:
        records = self.db.query(PredefinedResponse).order_by(PredefinedResponse.created_at.desc()).all()
        return [PredefinedResponseOut.model_validate(record) for record in records]

    def list_valid(self, now: Optional[datetime] = None) -> List[PredefinedResponse]:
        """Responses without an expiry or expiring after ``now``."""
        now_iso = (now or datetime.utcnow()).isoformat()
        return self.db.query(PredefinedResponse).filter(
            or_(PredefinedResponse.valid_until.is_(None), PredefinedResponse.valid_until > now_iso)
        ).all()

    def pick_random(self) -> Optional[PredefinedResponse]:
        valid = self.list_valid()
        return random.choice(valid) if valid else None

    def create_response(self, data: PredefinedResponseCreate) -> PredefinedResponseOut:
        record = PredefinedResponse(
            response=data.response,
            processing_time=data.processing_time,
            valid_until=to_naive_utc(data.valid_until).isoformat() if data.valid_until else None,
        )
        self.db.add(record)
        self._commit()
        self.db.refresh(record)
        return PredefinedResponseOut.model_validate(record)

    def update_response(self, response_id: str, data: PredefinedResponseUpdate) -> PredefinedResponseOut:
        record = self._get(response_id)
        changes = data.model_dump(exclude_unset=True)
        if "response" in changes and changes["response"] is not None:
            record.response = changes["response"]
        if "processing_time" in changes and changes["processing_time"] is not None:
            record.processing_time = changes["processing_time"]
        # An explicit null removes the expiry
        if "valid_until" in changes:
            valid_until = changes["valid_until"]
            record.valid_until = to_naive_utc(valid_until).isoformat() if valid_until else None
        self._commit()
        self.db.refresh(record)
        return PredefinedResponseOut.model_validate(record)

    def delete_response(self, response_id: str) -> None:
        self.db.delete(self._get(response_id))
        self._commit()
