import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legal_office.core.database import get_db
from legal_office.core.response_utils import create_success_response, ResponseTimer
from legal_office.models import Profile
from legal_office.schemas import UserAdminUpdate, StandardResponse
from legal_office.services.profile_service import ProfileService
from legal_office.api.v1.auth import require_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=StandardResponse)
def list_users(
    role: Optional[str] = Query(None, pattern="^(lawyer|admin)$", description="Filter by role"),
    current_user: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """List lawyer and admin profiles."""
    with ResponseTimer() as timer:
        profiles = ProfileService(db).list_profiles(role)
        return create_success_response(data=profiles, execution_time=timer.get_execution_time())


@router.get("/{user_id}", response_model=StandardResponse)
def get_user(user_id: str, current_user: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        profile = ProfileService(db).get_profile(user_id)
        return create_success_response(data=profile, execution_time=timer.get_execution_time())


@router.put("/{user_id}", response_model=StandardResponse)
def update_user(
    user_id: str,
    update: UserAdminUpdate,
    current_user: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Update a profile, including activating or deactivating it."""
    with ResponseTimer() as timer:
        profile = ProfileService(db).admin_update(user_id, update, current_user)
        return create_success_response(data=profile, execution_time=timer.get_execution_time())


@router.delete("/{user_id}", response_model=StandardResponse)
def delete_user(user_id: str, current_user: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    """Delete a profile together with the records it owns."""
    with ResponseTimer() as timer:
        ProfileService(db).delete_profile(user_id, current_user)
        return create_success_response(
            data=None,
            message="User deleted successfully",
            execution_time=timer.get_execution_time()
        )
