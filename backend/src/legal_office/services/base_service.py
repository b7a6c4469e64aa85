"""
Shared plumbing for services whose records belong to a lawyer.

Lawyers only see rows whose ``lawyer_id`` is their own id; admins see every
row. A row outside the caller's scope is reported as not found.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Optional, Type

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, Query
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_random

from legal_office.core.constants import NUMBER_ALLOCATION_ATTEMPTS, NUMBER_ALLOCATION_JITTER
from legal_office.core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from legal_office.models import Profile

logger = logging.getLogger(__name__)


def to_naive_utc(value: datetime) -> datetime:
    """Stored datetimes are naive UTC so that ISO strings sort chronologically."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def next_sequence_number(db: Session, column, prefix: str, year: int, width: int) -> str:
    """
    Next ``<prefix>-<year>-<seq>`` identifier for ``column``.

    The sequence restarts every year and continues from the highest suffix
    already stored, so gaps left by deletions are never reused.
    """
    stem = f"{prefix}-{year}-"
    highest = 0
    for (value,) in db.query(column).filter(column.like(f"{stem}%")).all():
        suffix = value[len(stem):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{stem}{highest + 1:0{width}d}"


class OwnedResourceService:
    """Base class for lawyer-scoped CRUD services."""

    model: Type = None
    resource_name: str = "Resource"

    def __init__(self, db: Session):
        self.db = db

    def _scoped_query(self, user: Profile) -> Query:
        query = self.db.query(self.model)
        if not user.is_admin():
            query = query.filter(self.model.lawyer_id == user.id)
        return query

    def _get_owned(self, resource_id: str, user: Profile):
        record = self._scoped_query(user).filter(self.model.id == resource_id).first()
        if record is None:
            raise ResourceNotFoundError(self.resource_name, resource_id)
        return record

    def _check_reference(self, model: Type, reference_id: Optional[str], owner_id: str, field: str):
        """A referenced client or case must belong to the same lawyer as the record."""
        if reference_id is None:
            return None
        referenced = self.db.query(model).filter(model.id == reference_id, model.lawyer_id == owner_id).first()
        if referenced is None:
            raise ValidationError(f"{field} '{reference_id}' does not reference one of your records", field=field)
        return referenced

    @staticmethod
    def _collect_changes(update, clearable: Iterable[str] = ()) -> Dict[str, Any]:
        """Sent, non-null fields of ``update``; an explicit null on a ``clearable`` field unsets it."""
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        for field in clearable:
            if field in update.model_fields_set and getattr(update, field) is None:
                changes[field] = None
        return changes

    @staticmethod
    def _apply_changes(record, changes: Dict[str, Any]) -> None:
        for key, value in changes.items():
            setattr(record, key, value)

    def _commit(self, conflict_message: str = "Record conflicts with an existing one") -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Integrity error on {self.resource_name}: {e.orig}")
            raise ConflictError(conflict_message) from e
        except Exception:
            self.db.rollback()
            raise

    def _insert_numbered(self, build: Callable[[], Any]):
        """
        Insert the record returned by ``build``, whose ``number`` is generated.

        Two concurrent creates can draw the same number. The one that loses the
        unique constraint rolls back and calls ``build`` again, which draws the
        next free number.
        """
        retrying = Retrying(
            stop=stop_after_attempt(NUMBER_ALLOCATION_ATTEMPTS),
            wait=wait_random(0, NUMBER_ALLOCATION_JITTER),
            retry=retry_if_exception_type(ConflictError),
            before_sleep=self._log_number_collision,
            reraise=True,
        )
        return retrying(self._insert_once, build)

    def _insert_once(self, build: Callable[[], Any]):
        record = build()
        self.db.add(record)
        self._commit(f"{self.resource_name} number '{record.number}' already exists")
        return record

    def _log_number_collision(self, retry_state) -> None:
        logger.info(
            f"{self.resource_name} number taken concurrently, drawing a new one "
            f"(attempt {retry_state.attempt_number}/{NUMBER_ALLOCATION_ATTEMPTS})"
        )

    def _delete(self, record) -> None:
        self.db.delete(record)
        self._commit()
        logger.info(f"Deleted {self.resource_name} {record.id}")
