import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legal_office.core.database import get_db
from legal_office.core.response_utils import create_success_response, ResponseTimer
from legal_office.models import Profile
from legal_office.schemas import DocumentCreate, DocumentUpdate, DocumentGenerateRequest, StandardResponse
from legal_office.services.document_service import DocumentService
from legal_office.api.v1.auth import require_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=StandardResponse)
def list_documents(
    case_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None, pattern="^(draft|final)$"),
    type: Optional[str] = Query(None),
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        documents = DocumentService(db).list_documents(
            current_user, case_id=case_id, status=status, document_type=type
        )
        return create_success_response(data=documents, execution_time=timer.get_execution_time())


@router.post("/generate", response_model=StandardResponse)
def generate_document(
    request: DocumentGenerateRequest,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Draft a defence memo, lawsuit, objection or notice with Gemini."""
    with ResponseTimer() as timer:
        result = DocumentService(db).generate_document(current_user, request)
        return create_success_response(data=result, execution_time=timer.get_execution_time())


@router.post("", response_model=StandardResponse, status_code=201)
def create_document(document_data: DocumentCreate, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        document = DocumentService(db).create_document(current_user, document_data)
        return create_success_response(data=document, status_code=201, execution_time=timer.get_execution_time())


@router.get("/{document_id}", response_model=StandardResponse)
def get_document(document_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        document = DocumentService(db).get_document(document_id, current_user)
        return create_success_response(data=document, execution_time=timer.get_execution_time())


@router.put("/{document_id}", response_model=StandardResponse)
def update_document(
    document_id: str,
    document_data: DocumentUpdate,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        document = DocumentService(db).update_document(document_id, current_user, document_data)
        return create_success_response(data=document, execution_time=timer.get_execution_time())


@router.delete("/{document_id}", response_model=StandardResponse)
def delete_document(document_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        DocumentService(db).delete_document(document_id, current_user)
        return create_success_response(
            data=None,
            message="Document deleted successfully",
            execution_time=timer.get_execution_time()
        )
