"""
Appointment Service for the Legal Office backend.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from legal_office.models import Profile, Client, Case, Appointment
from legal_office.schemas import AppointmentCreate, AppointmentUpdate, AppointmentResponse
from legal_office.services.base_service import OwnedResourceService, to_naive_utc

logger = logging.getLogger(__name__)


class AppointmentService(OwnedResourceService):
    """Court sessions, meetings and deadlines, always ordered by date."""

    model = Appointment
    resource_name = "Appointment"

    def list_appointments(
        self,
        user: Profile,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        case_id: Optional[str] = None,
        appointment_type: Optional[str] = None,
    ) -> List[AppointmentResponse]:
        query = self._scoped_query(user)
        if date_from:
            query = query.filter(Appointment.date >= to_naive_utc(date_from).isoformat())
        if date_to:
            query = query.filter(Appointment.date <= to_naive_utc(date_to).isoformat())
        if case_id:
            query = query.filter(Appointment.case_id == case_id)
        if appointment_type:
            query = query.filter(Appointment.type == appointment_type)

        appointments = query.order_by(Appointment.date.asc()).all()
        return [AppointmentResponse.model_validate(appointment) for appointment in appointments]

    def list_upcoming(self, user: Profile, days: int = 7) -> List[AppointmentResponse]:
        now = datetime.utcnow()
        return self.list_appointments(user, date_from=now, date_to=now + timedelta(days=days))

    def get_appointment(self, appointment_id: str, user: Profile) -> AppointmentResponse:
        return AppointmentResponse.model_validate(self._get_owned(appointment_id, user))

    def create_appointment(self, user: Profile, appointment_data: AppointmentCreate) -> AppointmentResponse:
        self._check_reference(Case, appointment_data.case_id, user.id, "case_id")
        self._check_reference(Client, appointment_data.client_id, user.id, "client_id")

        values = appointment_data.model_dump()
        values["date"] = to_naive_utc(values["date"]).isoformat()
        appointment = Appointment(lawyer_id=user.id, **values)

        self.db.add(appointment)
        self._commit()
        self.db.refresh(appointment)

        logger.info(f"Created {appointment.type} appointment {appointment.id} on {appointment.date}")
        return AppointmentResponse.model_validate(appointment)

    def update_appointment(
        self, appointment_id: str, user: Profile, appointment_data: AppointmentUpdate
    ) -> AppointmentResponse:
        appointment = self._get_owned(appointment_id, user)
        changes = self._collect_changes(appointment_data, clearable=("case_id", "client_id"))
        if "case_id" in changes:
            self._check_reference(Case, changes["case_id"], appointment.lawyer_id, "case_id")
        if "client_id" in changes:
            self._check_reference(Client, changes["client_id"], appointment.lawyer_id, "client_id")
        if "date" in changes:
            changes["date"] = to_naive_utc(changes["date"]).isoformat()

        self._apply_changes(appointment, changes)
        self._commit()
        self.db.refresh(appointment)
        return AppointmentResponse.model_validate(appointment)

    def delete_appointment(self, appointment_id: str, user: Profile) -> None:
        self._delete(self._get_owned(appointment_id, user))
