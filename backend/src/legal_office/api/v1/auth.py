import logging
from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose import JWTError

from legal_office.core import messages
from legal_office.core.config import get_config
from legal_office.core.database import get_db
from legal_office.core.exceptions import AuthenticationError, AuthorizationError
from legal_office.core.response_utils import create_success_response, ResponseTimer
from legal_office.core.security import decode_access_token
from legal_office.models import Profile
from legal_office.schemas import (
    LoginRequest, RegisterLawyerRequest, RegisterAdminRequest, ProfileResponse, ProfileUpdate,
    PasswordChangeRequest, StandardResponse,
)
from legal_office.services.profile_service import ProfileService

config = get_config()
logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{config.application.api_root_path}/auth/login", auto_error=False
)

router = APIRouter()


def _profile_from_token(token: str, db: Session) -> Profile:
    try:
        payload = decode_access_token(token)
    except JWTError as e:
        raise AuthenticationError("Could not validate credentials", user_message=messages.LOGIN_REQUIRED) from e

    profile_id = payload.get("sub")
    if not profile_id:
        raise AuthenticationError("Token has no subject", user_message=messages.LOGIN_REQUIRED)

    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if profile is None or not profile.is_active:
        raise AuthenticationError("User not found or inactive", user_message=messages.LOGIN_REQUIRED)
    return profile


def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Profile:
    """Get current authenticated user."""
    if not token:
        raise AuthenticationError("Not authenticated", user_message=messages.LOGIN_REQUIRED)
    return _profile_from_token(token, db)


def get_optional_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Optional[Profile]:
    """The caller's profile when a valid token is sent, otherwise None."""
    if not token:
        return None
    try:
        return _profile_from_token(token, db)
    except AuthenticationError:
        return None


def require_admin(current_user: Profile = Depends(get_current_user)) -> Profile:
    """Require the admin role."""
    if not current_user.is_admin():
        raise AuthorizationError("Admin access required")
    return current_user


def require_user(current_user: Profile = Depends(get_current_user)) -> Profile:
    """Any authenticated lawyer or admin."""
    return current_user


@router.post("/login", response_model=StandardResponse)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """Exchange e-mail and password for a bearer token."""
    with ResponseTimer() as timer:
        result = ProfileService(db).login(login_data.email, login_data.password)
        return create_success_response(data=result, execution_time=timer.get_execution_time())


@router.post("/register", response_model=StandardResponse, status_code=201)
def register(
    data: RegisterLawyerRequest,
    db: Session = Depends(get_db),
    current_user: Optional[Profile] = Depends(get_optional_user),
):
    """Create a lawyer account. Open to everyone only while open registration is enabled."""
    with ResponseTimer() as timer:
        is_admin = current_user is not None and current_user.is_admin()
        if not config.application.allow_open_registration and not is_admin:
            raise AuthorizationError("Registration is closed; ask an administrator")

        profile = ProfileService(db).register_lawyer(data)
        return create_success_response(data=profile, status_code=201, execution_time=timer.get_execution_time())


@router.post("/register-admin", response_model=StandardResponse, status_code=201)
def register_admin(
    data: RegisterAdminRequest,
    db: Session = Depends(get_db),
    current_user: Optional[Profile] = Depends(get_optional_user),
):
    """Create an admin account. The first admin bootstraps; later ones need an admin caller."""
    with ResponseTimer() as timer:
        service = ProfileService(db)
        is_admin = current_user is not None and current_user.is_admin()
        if service.admin_exists() and not is_admin:
            if current_user is None:
                raise AuthenticationError("Admin credentials required", user_message=messages.LOGIN_REQUIRED)
            raise AuthorizationError("Admin access required")

        profile = service.register_admin(data)
        return create_success_response(data=profile, status_code=201, execution_time=timer.get_execution_time())


@router.get("/me", response_model=StandardResponse)
def read_current_user(current_user: Profile = Depends(require_user)):
    with ResponseTimer() as timer:
        return create_success_response(
            data=ProfileResponse.model_validate(current_user),
            execution_time=timer.get_execution_time()
        )


@router.put("/me", response_model=StandardResponse)
def update_current_user(
    update: ProfileUpdate,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db),
):
    with ResponseTimer() as timer:
        profile = ProfileService(db).update_own_profile(current_user, update)
        return create_success_response(data=profile, execution_time=timer.get_execution_time())


@router.post("/me/password", response_model=StandardResponse)
def change_password(
    request: PasswordChangeRequest,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db),
):
    with ResponseTimer() as timer:
        ProfileService(db).change_password(current_user, request)
        return create_success_response(
            data=None,
            message="Password changed successfully",
            execution_time=timer.get_execution_time()
        )


@router.post("/logout", response_model=StandardResponse)
def logout(current_user: Profile = Depends(require_user)):
    """Tokens are stateless; the client discards its copy."""
    with ResponseTimer() as timer:
        logger.info(f"User {current_user.id} logged out")
        return create_success_response(
            data=None,
            message="Logged out successfully",
            execution_time=timer.get_execution_time()
        )
