"""
Profile Service for the Legal Office backend.

Sign-in, sign-up and profile management for lawyers and admins.
"""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from legal_office.core import messages
from legal_office.core.constants import ROLE_ADMIN, ROLE_LAWYER
from legal_office.core.exceptions import (
    AuthenticationError, ConflictError, ResourceNotFoundError, ValidationError,
)
from legal_office.core.security import (
    PasswordValidator, SecureLogger, create_access_token, get_password_hash, verify_password,
)
from legal_office.models import Profile
from legal_office.schemas import (
    LoginResponse, PasswordChangeRequest, ProfileResponse, ProfileUpdate,
    RegisterAdminRequest, RegisterLawyerRequest, UserAdminUpdate,
)

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class ProfileService:
    """Service for authentication and profile management."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[Profile]:
        return self.db.query(Profile).filter(Profile.email == normalize_email(email)).first()

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        return self.db.query(Profile).filter(Profile.id == profile_id).first()

    def admin_exists(self) -> bool:
        return self.db.query(Profile.id).filter(Profile.role == ROLE_ADMIN).first() is not None

    @staticmethod
    def issue_token(profile: Profile) -> LoginResponse:
        token = create_access_token({"sub": profile.id, "email": profile.email, "role": profile.role})
        return LoginResponse(
            access_token=token,
            token_type="bearer",
            token=token,
            user=ProfileResponse.model_validate(profile),
        )

    def login(self, email: str, password: str) -> LoginResponse:
        if not email or not email.strip() or not password:
            raise ValidationError(
                "Email and password are required", field="email", user_message=messages.CREDENTIALS_REQUIRED
            )

        profile = self.get_by_email(email)
        if profile is None or not verify_password(password, profile.hashed_password):
            logger.warning(f"Failed login for {SecureLogger.sanitize_log_message(email)}")
            raise AuthenticationError("Invalid email or password", user_message=messages.INVALID_CREDENTIALS)
        if not profile.is_active:
            logger.warning(f"Login attempt on inactive profile {profile.id}")
            raise AuthenticationError("Account is inactive", user_message=messages.INVALID_CREDENTIALS)

        logger.info(f"User {profile.id} ({profile.role}) logged in")
        return self.issue_token(profile)

    def _validate_password(self, password: str) -> None:
        result = PasswordValidator.validate_password(password)
        if not result['is_valid']:
            raise ValidationError("; ".join(result['errors']), field="password")

    def _create(self, data: RegisterAdminRequest, role: str, **extra) -> ProfileResponse:
        email = normalize_email(data.email)
        if self.get_by_email(email):
            raise ConflictError(f"Email '{email}' is already registered", user_message=messages.EMAIL_IN_USE)
        self._validate_password(data.password)

        now = datetime.utcnow().isoformat()
        profile = Profile(
            email=email,
            role=role,
            full_name=data.full_name,
            phone=data.phone,
            address=data.address,
            hashed_password=get_password_hash(data.password),
            is_active=True,
            created_at=now,
            updated_at=now,
            **extra,
        )
        self.db.add(profile)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(profile)

        logger.info(f"Created {role} profile {profile.id}")
        return ProfileResponse.model_validate(profile)

    def register_lawyer(self, data: RegisterLawyerRequest) -> ProfileResponse:
        return self._create(
            data, ROLE_LAWYER, license_number=data.license_number, specialization=data.specialization
        )

    def register_admin(self, data: RegisterAdminRequest) -> ProfileResponse:
        return self._create(data, ROLE_ADMIN)

    def update_own_profile(self, profile: Profile, update: ProfileUpdate) -> ProfileResponse:
        for key, value in update.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(profile, key, value)
        profile.updated_at = datetime.utcnow().isoformat()
        self.db.commit()
        self.db.refresh(profile)
        return ProfileResponse.model_validate(profile)

    def change_password(self, profile: Profile, request: PasswordChangeRequest) -> None:
        if not verify_password(request.current_password, profile.hashed_password):
            raise AuthenticationError("Current password is incorrect", user_message=messages.INVALID_CREDENTIALS)
        self._validate_password(request.new_password)

        profile.hashed_password = get_password_hash(request.new_password)
        profile.updated_at = datetime.utcnow().isoformat()
        self.db.commit()
        logger.info(f"Password changed for user {profile.id}")

    # Admin operations
    def list_profiles(self, role: Optional[str] = None) -> List[ProfileResponse]:
        query = self.db.query(Profile)
        if role:
            query = query.filter(Profile.role == role)
        return [ProfileResponse.model_validate(p) for p in query.order_by(Profile.created_at.desc()).all()]

    def _get_or_404(self, profile_id: str) -> Profile:
        profile = self.get_by_id(profile_id)
        if profile is None:
            raise ResourceNotFoundError("Profile", profile_id)
        return profile

    def get_profile(self, profile_id: str) -> ProfileResponse:
        return ProfileResponse.model_validate(self._get_or_404(profile_id))

    def admin_update(self, profile_id: str, update: UserAdminUpdate, acting_admin: Profile) -> ProfileResponse:
        profile = self._get_or_404(profile_id)
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        if profile.id == acting_admin.id:
            if changes.get("role", ROLE_ADMIN) != ROLE_ADMIN:
                raise ValidationError("Admins cannot remove their own admin role", field="role")
            if changes.get("is_active") is False:
                raise ValidationError("Admins cannot deactivate their own account", field="is_active")
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
            existing = self.get_by_email(changes["email"])
            if existing is not None and existing.id != profile.id:
                raise ConflictError(
                    f"Email '{changes['email']}' is already registered", user_message=messages.EMAIL_IN_USE
                )

        for key, value in changes.items():
            setattr(profile, key, value)
        profile.updated_at = datetime.utcnow().isoformat()
        self.db.commit()
        self.db.refresh(profile)

        logger.info(f"Admin updated profile {profile.id}: {sorted(changes)}")
        return ProfileResponse.model_validate(profile)

    def delete_profile(self, profile_id: str, acting_admin: Profile) -> None:
        """Delete a profile and everything it owns."""
        if profile_id == acting_admin.id:
            raise ValidationError("Admins cannot delete their own account", field="id")
        profile = self._get_or_404(profile_id)
        self.db.delete(profile)
        self.db.commit()
        logger.info(f"Deleted profile {profile_id}")
