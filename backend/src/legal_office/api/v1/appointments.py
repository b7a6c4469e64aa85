import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legal_office.core.database import get_db
from legal_office.core.response_utils import create_success_response, ResponseTimer
from legal_office.models import Profile
from legal_office.schemas import AppointmentCreate, AppointmentUpdate, StandardResponse
from legal_office.services.appointment_service import AppointmentService
from legal_office.api.v1.auth import require_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=StandardResponse)
def list_appointments(
    date_from: Optional[datetime] = Query(None, alias="from"),
    date_to: Optional[datetime] = Query(None, alias="to"),
    case_id: Optional[str] = Query(None),
    type: Optional[str] = Query(None, pattern="^(court|meeting|deadline)$"),
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Appointments ordered by date."""
    with ResponseTimer() as timer:
        appointments = AppointmentService(db).list_appointments(
            current_user, date_from=date_from, date_to=date_to, case_id=case_id, appointment_type=type
        )
        return create_success_response(data=appointments, execution_time=timer.get_execution_time())


@router.get("/upcoming", response_model=StandardResponse)
def list_upcoming_appointments(
    days: int = Query(7, ge=1, le=365),
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        appointments = AppointmentService(db).list_upcoming(current_user, days)
        return create_success_response(data=appointments, execution_time=timer.get_execution_time())


@router.post("", response_model=StandardResponse, status_code=201)
def create_appointment(
    appointment_data: AppointmentCreate,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        appointment = AppointmentService(db).create_appointment(current_user, appointment_data)
        return create_success_response(data=appointment, status_code=201, execution_time=timer.get_execution_time())


@router.get("/{appointment_id}", response_model=StandardResponse)
def get_appointment(appointment_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        appointment = AppointmentService(db).get_appointment(appointment_id, current_user)
        return create_success_response(data=appointment, execution_time=timer.get_execution_time())


@router.put("/{appointment_id}", response_model=StandardResponse)
def update_appointment(
    appointment_id: str,
    appointment_data: AppointmentUpdate,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        appointment = AppointmentService(db).update_appointment(appointment_id, current_user, appointment_data)
        return create_success_response(data=appointment, execution_time=timer.get_execution_time())


@router.delete("/{appointment_id}", response_model=StandardResponse)
def delete_appointment(appointment_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        AppointmentService(db).delete_appointment(appointment_id, current_user)
        return create_success_response(
            data=None,
            message="Appointment deleted successfully",
            execution_time=timer.get_execution_time()
        )
