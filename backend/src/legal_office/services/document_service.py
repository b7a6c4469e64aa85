"""
Document Service for the Legal Office backend.
"""

import logging
from datetime import datetime
from typing import List, Optional

from legal_office.core.constants import DOCUMENT_TEMPLATE_TYPES
from legal_office.core import messages
from legal_office.models import Profile, Client, Case, Document
from legal_office.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DocumentGenerateRequest, DocumentGenerateResponse,
)
from legal_office.services import document_generator
from legal_office.services.ai_client import AIError
from legal_office.services.ai_settings_service import AISettingsService, PROVIDER_GEMINI
from legal_office.services.base_service import OwnedResourceService

logger = logging.getLogger(__name__)


class DocumentService(OwnedResourceService):
    """Service for legal documents: drafts, final versions and generated text."""

    model = Document
    resource_name = "Document"

    def list_documents(
        self,
        user: Profile,
        case_id: Optional[str] = None,
        status: Optional[str] = None,
        document_type: Optional[str] = None,
    ) -> List[DocumentResponse]:
        query = self._scoped_query(user)
        if case_id:
            query = query.filter(Document.case_id == case_id)
        if status:
            query = query.filter(Document.status == status)
        if document_type:
            query = query.filter(Document.type == document_type)

        documents = query.order_by(Document.created_at.desc()).all()
        return [DocumentResponse.model_validate(document) for document in documents]

    def get_document(self, document_id: str, user: Profile) -> DocumentResponse:
        return DocumentResponse.model_validate(self._get_owned(document_id, user))

    def create_document(self, user: Profile, document_data: DocumentCreate) -> DocumentResponse:
        self._check_reference(Case, document_data.case_id, user.id, "case_id")
        self._check_reference(Client, document_data.client_id, user.id, "client_id")

        now = datetime.utcnow().isoformat()
        document = Document(lawyer_id=user.id, created_at=now, updated_at=now, **document_data.model_dump())
        self.db.add(document)
        self._commit()
        self.db.refresh(document)

        logger.info(f"Created document {document.id} ({document.status}) for lawyer {user.id}")
        return DocumentResponse.model_validate(document)

    def update_document(self, document_id: str, user: Profile, document_data: DocumentUpdate) -> DocumentResponse:
        document = self._get_owned(document_id, user)
        changes = self._collect_changes(document_data, clearable=("case_id", "client_id"))
        if "case_id" in changes:
            self._check_reference(Case, changes["case_id"], document.lawyer_id, "case_id")
        if "client_id" in changes:
            self._check_reference(Client, changes["client_id"], document.lawyer_id, "client_id")

        self._apply_changes(document, changes)
        document.updated_at = datetime.utcnow().isoformat()
        self._commit()
        self.db.refresh(document)
        return DocumentResponse.model_validate(document)

    def delete_document(self, document_id: str, user: Profile) -> None:
        self._delete(self._get_owned(document_id, user))

    def generate_document(self, user: Profile, request: DocumentGenerateRequest) -> DocumentGenerateResponse:
        """
        Draft a document with Gemini and optionally save it as a draft.

        Nothing is saved when generation fails.
        """
        case = self._check_reference(Case, request.case_id, user.id, "case_id")
        data = request.model_dump()
        prompt = document_generator.build_generation_prompt(data)

        settings_service = AISettingsService(self.db)
        try:
            content = document_generator.generate_document_text(
                data, api_key=settings_service.get_api_key(PROVIDER_GEMINI)
            )
        except AIError as e:
            logger.error(f"Document generation failed for user {user.id}: {e!r}")
            error = e.to_service_error("Gemini")
            if e.code != AIError.NOT_CONFIGURED:
                error.user_message = messages.DOCUMENT_GENERATION_FAILED
            raise error from e

        document_id = None
        if request.save:
            template_name = DOCUMENT_TEMPLATE_TYPES[request.type]
            title = request.title or (f"{template_name} - {request.case_number}" if request.case_number else template_name)
            saved = self.create_document(user, DocumentCreate(
                title=title,
                type=template_name,
                content=content,
                status="draft",
                case_id=request.case_id,
                client_id=case.client_id if case is not None else None,
            ))
            document_id = saved.id

        return DocumentGenerateResponse(content=content, prompt=prompt, document_id=document_id)
