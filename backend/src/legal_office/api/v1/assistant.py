import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from legal_office.core.database import get_db
from legal_office.core.response_utils import create_success_response, ResponseTimer
from legal_office.models import Profile
from legal_office.schemas import (
    ChatMessageCreate, FeedbackRequest, TemplateMessageRequest,
    PredefinedResponseCreate, PredefinedResponseUpdate, AISettingsUpdate, StandardResponse,
)
from legal_office.services.assistant_service import AssistantService
from legal_office.services.ai_settings_service import AISettingsService
from legal_office.services.predefined_response_service import PredefinedResponseService
from legal_office.api.v1.auth import require_user, require_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/messages", response_model=StandardResponse)
def list_messages(current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    """The caller's conversation in chronological order."""
    with ResponseTimer() as timer:
        history = AssistantService(db).list_messages(current_user)
        return create_success_response(data=history, execution_time=timer.get_execution_time())


@router.post("/messages", response_model=StandardResponse, status_code=201)
def send_message(
    message: ChatMessageCreate,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Send a message and get the assistant's reply through the active AI mode."""
    with ResponseTimer() as timer:
        exchange = AssistantService(db).send_message(current_user, message.content)
        return create_success_response(data=exchange, status_code=201, execution_time=timer.get_execution_time())


@router.delete("/messages", response_model=StandardResponse)
def clear_messages(current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        deleted = AssistantService(db).clear_messages(current_user)
        return create_success_response(data={"deleted": deleted}, execution_time=timer.get_execution_time())


@router.post("/messages/{message_id}/feedback", response_model=StandardResponse)
def save_feedback(
    message_id: str,
    feedback: FeedbackRequest,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Mark an answer correct, or incorrect with a correction."""
    with ResponseTimer() as timer:
        message = AssistantService(db).save_feedback(current_user, message_id, feedback)
        return create_success_response(data=message, execution_time=timer.get_execution_time())


@router.get("/templates", response_model=StandardResponse)
def list_templates(current_user: Profile = Depends(require_user)):
    with ResponseTimer() as timer:
        return create_success_response(data=AssistantService.list_templates(), execution_time=timer.get_execution_time())


@router.post("/templates/{template}", response_model=StandardResponse, status_code=201)
def send_with_template(
    template: str,
    message: TemplateMessageRequest,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        exchange = AssistantService(db).send_with_template(current_user, template, message.content)
        return create_success_response(data=exchange, status_code=201, execution_time=timer.get_execution_time())


@router.get("/models", response_model=StandardResponse)
def list_models(current_user: Profile = Depends(require_user)):
    with ResponseTimer() as timer:
        return create_success_response(data=AssistantService.list_models(), execution_time=timer.get_execution_time())


# Predefined responses (admin)
@router.get("/predefined-responses", response_model=StandardResponse)
def list_predefined_responses(current_user: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        responses = PredefinedResponseService(db).list_responses()
        return create_success_response(data=responses, execution_time=timer.get_execution_time())


@router.post("/predefined-responses", response_model=StandardResponse, status_code=201)
def create_predefined_response(
    data: PredefinedResponseCreate,
    current_user: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        response = PredefinedResponseService(db).create_response(data)
        return create_success_response(data=response, status_code=201, execution_time=timer.get_execution_time())


@router.put("/predefined-responses/{response_id}", response_model=StandardResponse)
def update_predefined_response(
    response_id: str,
    data: PredefinedResponseUpdate,
    current_user: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        response = PredefinedResponseService(db).update_response(response_id, data)
        return create_success_response(data=response, execution_time=timer.get_execution_time())


@router.delete("/predefined-responses/{response_id}", response_model=StandardResponse)
def delete_predefined_response(
    response_id: str,
    current_user: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        PredefinedResponseService(db).delete_response(response_id)
        return create_success_response(
            data=None,
            message="Predefined response deleted successfully",
            execution_time=timer.get_execution_time()
        )


# AI settings (admin)
@router.get("/settings", response_model=StandardResponse)
def get_ai_settings(current_user: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    """Current AI settings; API keys are only reported as present or absent."""
    with ResponseTimer() as timer:
        settings = AISettingsService(db).get_settings()
        return create_success_response(data=settings, execution_time=timer.get_execution_time())


@router.put("/settings", response_model=StandardResponse)
def update_ai_settings(
    update: AISettingsUpdate,
    current_user: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        settings = AISettingsService(db).update_settings(update)
        return create_success_response(data=settings, execution_time=timer.get_execution_time())
