import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legal_office.core.database import get_db
from legal_office.core.response_utils import create_success_response, ResponseTimer
from legal_office.models import Profile
from legal_office.schemas import ClientCreate, ClientUpdate, StandardResponse
from legal_office.services.client_service import ClientService
from legal_office.api.v1.auth import require_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=StandardResponse)
def list_clients(
    search: Optional[str] = Query(None, description="Filter by name"),
    lawyer_id: Optional[str] = Query(None, description="Admin only: clients of one lawyer"),
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    """List clients, newest first."""
    with ResponseTimer() as timer:
        clients = ClientService(db).list_clients(current_user, search=search, lawyer_id=lawyer_id)
        return create_success_response(data=clients, execution_time=timer.get_execution_time())


@router.post("", response_model=StandardResponse, status_code=201)
def create_client(client_data: ClientCreate, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        client = ClientService(db).create_client(current_user, client_data)
        return create_success_response(data=client, status_code=201, execution_time=timer.get_execution_time())


@router.get("/{client_id}", response_model=StandardResponse)
def get_client(client_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        client = ClientService(db).get_client(client_id, current_user)
        return create_success_response(data=client, execution_time=timer.get_execution_time())


@router.get("/{client_id}/summary", response_model=StandardResponse)
def get_client_summary(client_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    """Client details with record counts and the outstanding balance."""
    with ResponseTimer() as timer:
        summary = ClientService(db).get_summary(client_id, current_user)
        return create_success_response(data=summary, execution_time=timer.get_execution_time())


@router.put("/{client_id}", response_model=StandardResponse)
def update_client(
    client_id: str,
    client_data: ClientUpdate,
    current_user: Profile = Depends(require_user),
    db: Session = Depends(get_db)
):
    with ResponseTimer() as timer:
        client = ClientService(db).update_client(client_id, current_user, client_data)
        return create_success_response(data=client, execution_time=timer.get_execution_time())


@router.delete("/{client_id}", response_model=StandardResponse)
def delete_client(client_id: str, current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    """Delete a client and its cases, appointments, documents and invoices."""
    with ResponseTimer() as timer:
        ClientService(db).delete_client(client_id, current_user)
        return create_success_response(
            data=None,
            message="Client deleted successfully",
            execution_time=timer.get_execution_time()
        )
