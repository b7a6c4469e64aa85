"""
Client Service for the Legal Office backend.
"""

import logging
from typing import List, Optional
from sqlalchemy import func

from legal_office.models import Profile, Client, Case, Appointment, Document, Invoice
from legal_office.schemas import ClientCreate, ClientUpdate, ClientResponse, ClientSummaryResponse
from legal_office.services.base_service import OwnedResourceService

logger = logging.getLogger(__name__)


class ClientService(OwnedResourceService):
    """Service for managing a lawyer's clients."""

    model = Client
    resource_name = "Client"

    def list_clients(
        self,
        user: Profile,
        search: Optional[str] = None,
        lawyer_id: Optional[str] = None,
    ) -> List[ClientResponse]:
        query = self._scoped_query(user)
        if lawyer_id and user.is_admin():
            query = query.filter(Client.lawyer_id == lawyer_id)
        if search:
            query = query.filter(Client.name.ilike(f"%{search}%"))

        clients = query.order_by(Client.created_at.desc()).all()
        return [ClientResponse.model_validate(client) for client in clients]

    def get_client(self, client_id: str, user: Profile) -> ClientResponse:
        return ClientResponse.model_validate(self._get_owned(client_id, user))

    def create_client(self, user: Profile, client_data: ClientCreate) -> ClientResponse:
        client = Client(lawyer_id=user.id, **client_data.model_dump())
        self.db.add(client)
        self._commit()
        self.db.refresh(client)

        logger.info(f"Created client {client.id} for lawyer {user.id}")
        return ClientResponse.model_validate(client)

    def update_client(self, client_id: str, user: Profile, client_data: ClientUpdate) -> ClientResponse:
        client = self._get_owned(client_id, user)
        self._apply_changes(client, client_data.model_dump(exclude_unset=True, exclude_none=True))
        self._commit()
        self.db.refresh(client)
        return ClientResponse.model_validate(client)

    def delete_client(self, client_id: str, user: Profile) -> None:
        """Delete a client together with its cases, appointments, documents and invoices."""
        self._delete(self._get_owned(client_id, user))

    def get_summary(self, client_id: str, user: Profile) -> ClientSummaryResponse:
        client = self._get_owned(client_id, user)

        def count(model) -> int:
            return self.db.query(func.count(model.id)).filter(model.client_id == client.id).scalar() or 0

        outstanding = self.db.query(func.coalesce(func.sum(Invoice.amount), 0.0)).filter(
            Invoice.client_id == client.id,
            Invoice.status.in_(("unpaid", "overdue")),
        ).scalar()

        return ClientSummaryResponse(
            **ClientResponse.model_validate(client).model_dump(),
            case_count=count(Case),
            appointment_count=count(Appointment),
            document_count=count(Document),
            invoice_count=count(Invoice),
            outstanding_balance=float(outstanding or 0.0),
        )
