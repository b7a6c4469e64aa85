"""
Case Service for the Legal Office backend.

Manages cases and the chat thread attached to each case.
"""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy import or_

from legal_office.core.constants import CASE_NUMBER_PREFIX
from legal_office.models import Profile, Client, Case, CaseChatMessage
from legal_office.schemas import (
    CaseCreate, CaseUpdate, CaseResponse, CaseChatMessageCreate, CaseChatMessageResponse,
)
from legal_office.services.base_service import OwnedResourceService, next_sequence_number

logger = logging.getLogger(__name__)


class CaseService(OwnedResourceService):
    """Service for managing cases."""

    model = Case
    resource_name = "Case"

    def generate_case_number(self, year: Optional[int] = None) -> str:
        """Next number of the form ``CASE-<year>-<seq:04d>``."""
        year = year or datetime.utcnow().year
        return next_sequence_number(self.db, Case.number, CASE_NUMBER_PREFIX, year, 4)

    def list_cases(
        self,
        user: Profile,
        status: Optional[str] = None,
        client_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[CaseResponse]:
        query = self._scoped_query(user)
        if status:
            query = query.filter(Case.status == status)
        if client_id:
            query = query.filter(Case.client_id == client_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Case.title.ilike(pattern), Case.number.ilike(pattern)))

        cases = query.order_by(Case.created_at.desc()).all()
        return [CaseResponse.model_validate(case) for case in cases]

    def get_case(self, case_id: str, user: Profile) -> CaseResponse:
        return CaseResponse.model_validate(self._get_owned(case_id, user))

    def create_case(self, user: Profile, case_data: CaseCreate) -> CaseResponse:
        self._check_reference(Client, case_data.client_id, user.id, "client_id")

        values = case_data.model_dump()
        now = datetime.utcnow().isoformat()

        if values.get("number"):
            case = Case(lawyer_id=user.id, created_at=now, updated_at=now, **values)
            self.db.add(case)
            self._commit(f"Case number '{values['number']}' already exists")
        else:
            values.pop("number", None)
            case = self._insert_numbered(lambda: Case(
                number=self.generate_case_number(), lawyer_id=user.id, created_at=now, updated_at=now, **values
            ))
        self.db.refresh(case)

        logger.info(f"Created case {case.number} ({case.id}) for lawyer {user.id}")
        return CaseResponse.model_validate(case)

    def update_case(self, case_id: str, user: Profile, case_data: CaseUpdate) -> CaseResponse:
        case = self._get_owned(case_id, user)
        changes = self._collect_changes(case_data, clearable=("client_id",))
        if "client_id" in changes:
            self._check_reference(Client, changes["client_id"], case.lawyer_id, "client_id")

        self._apply_changes(case, changes)
        case.updated_at = datetime.utcnow().isoformat()
        self._commit(f"Case number '{changes.get('number')}' already exists")
        self.db.refresh(case)
        return CaseResponse.model_validate(case)

    def delete_case(self, case_id: str, user: Profile) -> None:
        """Delete a case with its appointments, documents and chat."""
        self._delete(self._get_owned(case_id, user))

    def get_chat(self, case_id: str, user: Profile) -> List[CaseChatMessageResponse]:
        case = self._get_owned(case_id, user)
        chat = self.db.query(CaseChatMessage).filter(
            CaseChatMessage.case_id == case.id
        ).order_by(CaseChatMessage.created_at.asc()).all()
        return [CaseChatMessageResponse.model_validate(message) for message in chat]

    def add_chat_message(
        self, case_id: str, user: Profile, message_data: CaseChatMessageCreate
    ) -> CaseChatMessageResponse:
        case = self._get_owned(case_id, user)
        message = CaseChatMessage(case_id=case.id, message=message_data.message, sender=message_data.sender)
        self.db.add(message)
        self._commit()
        self.db.refresh(message)
        return CaseChatMessageResponse.model_validate(message)
