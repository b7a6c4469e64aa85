import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legal_office.core.database import get_db
from legal_office.core.response_utils import create_success_response, ResponseTimer
from legal_office.models import Profile
from legal_office.schemas import CaseCreate, CaseUpdate, CaseChatMessageCreate, StandardResponse
from legal_office.services.case_service import CaseService
from legal_office.api.v1.auth import require_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=StandardResponse)
def list_cases(
    status: Optional[str] = Query(None, pattern="^(open|closed|in_progress)$"),
    client_id: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Match title or case number"),
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        cases = CaseService(db).list_cases(current_user, status=status, client_id=client_id, search=search)
        return create_success_response(data=cases, execution_time=timer.get_execution_time())


@router.post("", response_model=StandardResponse, status_code=201)
def create_case(case_data: CaseCreate, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    """Create a case; the number is generated when omitted."""
    with ResponseTimer() as timer:
        case = CaseService(db).create_case(current_user, case_data)
        return create_success_response(data=case, status_code=201, execution_time=timer.get_execution_time())


@router.get("/{case_id}", response_model=StandardResponse)
def get_case(case_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        case = CaseService(db).get_case(case_id, current_user)
        return create_success_response(data=case, execution_time=timer.get_execution_time())


@router.put("/{case_id}", response_model=StandardResponse)
def update_case(
    case_id: str,
    case_data: CaseUpdate,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        case = CaseService(db).update_case(case_id, current_user, case_data)
        return create_success_response(data=case, execution_time=timer.get_execution_time())


@router.delete("/{case_id}", response_model=StandardResponse)
def delete_case(case_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        CaseService(db).delete_case(case_id, current_user)
        return create_success_response(
            data=None,
            message="Case deleted successfully",
            execution_time=timer.get_execution_time()
        )


@router.get("/{case_id}/chat", response_model=StandardResponse)
def get_case_chat(case_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    """Case chat in insertion order."""
    with ResponseTimer() as timer:
        chat = CaseService(db).get_chat(case_id, current_user)
        return create_success_response(data=chat, execution_time=timer.get_execution_time())


@router.post("/{case_id}/chat", response_model=StandardResponse, status_code=201)
def add_case_chat_message(
    case_id: str,
    message_data: CaseChatMessageCreate,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        message = CaseService(db).add_chat_message(case_id, current_user, message_data)
        return create_success_response(data=message, status_code=201, execution_time=timer.get_execution_time())
