import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from legal_office.core.database import get_db
from legal_office.core.response_utils import create_success_response, ResponseTimer
from legal_office.models import Profile
from legal_office.schemas import PromptCreate, PromptUpdate, StandardResponse
from legal_office.services.prompt_service import PromptService
from legal_office.api.v1.auth import require_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=StandardResponse)
def list_prompts(current_user: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        prompts = PromptService(db).list_prompts()
        return create_success_response(data=prompts, execution_time=timer.get_execution_time())


@router.post("", response_model=StandardResponse, status_code=201)
def create_prompt(prompt_data: PromptCreate, current_user: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        prompt = PromptService(db).create_prompt(prompt_data)
        return create_success_response(data=prompt, status_code=201, execution_time=timer.get_execution_time())


@router.get("/{prompt_id}", response_model=StandardResponse)
def get_prompt(prompt_id: str, current_user: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        prompt = PromptService(db).get_prompt(prompt_id)
        return create_success_response(data=prompt, execution_time=timer.get_execution_time())


@router.put("/{prompt_id}", response_model=StandardResponse)
def update_prompt(
    prompt_id: str,
    prompt_data: PromptUpdate,
    current_user: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        prompt = PromptService(db).update_prompt(prompt_id, prompt_data)
        return create_success_response(data=prompt, execution_time=timer.get_execution_time())


@router.post("/{prompt_id}/default", response_model=StandardResponse)
def set_default_prompt(prompt_id: str, current_user: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    """Make this prompt the only default."""
    with ResponseTimer() as timer:
        prompt = PromptService(db).set_default(prompt_id)
        return create_success_response(data=prompt, execution_time=timer.get_execution_time())


@router.delete("/{prompt_id}", response_model=StandardResponse)
def delete_prompt(prompt_id: str, current_user: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        PromptService(db).delete_prompt(prompt_id)
        return create_success_response(
            data=None,
            message="Prompt deleted successfully",
            execution_time=timer.get_execution_time()
        )
