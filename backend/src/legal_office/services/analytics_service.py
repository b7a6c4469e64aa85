"""
Analytics Service for the Legal Office backend.

Aggregates case, client, appointment, document and invoice figures for the
lawyer dashboard and the admin statistics page.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from legal_office.core.constants import (
    CASE_STATUSES, CLIENT_TYPES, DOCUMENT_STATUSES, ROLE_LAWYER,
)
from legal_office.models import Profile, Client, Case, Appointment, Document, Invoice

logger = logging.getLogger(__name__)

PENDING_INVOICE_STATUSES = ("unpaid", "overdue")


class AnalyticsService:
    """Read-only statistics. ``lawyer_id=None`` means the whole platform."""

    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, query, model, lawyer_id: Optional[str]):
        if lawyer_id is not None:
            query = query.filter(model.lawyer_id == lawyer_id)
        return query

    def _count_by(self, model, column, lawyer_id: Optional[str], keys=()) -> Dict[str, int]:
        query = self._scoped(self.db.query(column, func.count(model.id)), model, lawyer_id)
        counts = {key: 0 for key in keys}
        for value, total in query.group_by(column).all():
            counts[value] = total
        return counts

    def case_stats(self, lawyer_id: Optional[str] = None) -> Dict[str, Any]:
        by_status = self._count_by(Case, Case.status, lawyer_id, CASE_STATUSES)
        by_month = self._count_by(Case, func.substr(Case.created_at, 1, 7), lawyer_id)
        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "by_type": self._count_by(Case, Case.type, lawyer_id),
            "by_month": dict(sorted((k, v) for k, v in by_month.items() if k)),
        }

    def client_stats(self, lawyer_id: Optional[str] = None) -> Dict[str, Any]:
        by_type = self._count_by(Client, Client.type, lawyer_id, CLIENT_TYPES)
        # Active clients have at least one case that is not closed
        active_query = self._scoped(
            self.db.query(func.count(func.distinct(Case.client_id))).filter(
                Case.client_id.isnot(None), Case.status != "closed"
            ),
            Case,
            lawyer_id,
        )
        return {
            "total": sum(by_type.values()),
            "active": active_query.scalar() or 0,
            "by_type": by_type,
        }

    def financial_stats(self, lawyer_id: Optional[str] = None) -> Dict[str, Any]:
        def total(*statuses) -> float:
            query = self._scoped(
                self.db.query(func.coalesce(func.sum(Invoice.amount), 0.0)).filter(Invoice.status.in_(statuses)),
                Invoice,
                lawyer_id,
            )
            return float(query.scalar() or 0.0)

        month = func.substr(Invoice.date, 1, 7)
        monthly = self._scoped(
            self.db.query(month, func.sum(Invoice.amount)).filter(Invoice.status == "paid"),
            Invoice,
            lawyer_id,
        ).group_by(month).order_by(month).all()

        return {
            "total_revenue": total("paid"),
            "pending_payments": total(*PENDING_INVOICE_STATUSES),
            "revenue_by_month": {key: float(value or 0.0) for key, value in monthly},
        }

    def overview(self, user: Profile) -> Dict[str, Any]:
        """Lawyer dashboard; admins get the platform-wide figures."""
        lawyer_id = None if user.is_admin() else user.id
        now = datetime.utcnow()
        upcoming = self._scoped(
            self.db.query(func.count(Appointment.id)).filter(
                Appointment.date >= now.isoformat(),
                Appointment.date <= (now + timedelta(days=7)).isoformat(),
            ),
            Appointment,
            lawyer_id,
        ).scalar() or 0

        return {
            "clients": self.client_stats(lawyer_id),
            "cases": self.case_stats(lawyer_id),
            "upcoming_appointments": upcoming,
            "documents": {
                "by_status": self._count_by(Document, Document.status, lawyer_id, DOCUMENT_STATUSES),
            },
            "finances": self.financial_stats(lawyer_id),
        }

    def admin_stats(self) -> Dict[str, Any]:
        per_lawyer = self.db.query(
            Profile.id, Profile.full_name, Profile.email, func.count(Case.id)
        ).outerjoin(Case, Case.lawyer_id == Profile.id).filter(
            Profile.role == ROLE_LAWYER
        ).group_by(Profile.id, Profile.full_name, Profile.email).order_by(func.count(Case.id).desc()).all()

        return {
            "cases_by_status": self._count_by(Case, Case.status, None, CASE_STATUSES),
            "cases_per_lawyer": [
                {"lawyer_id": lawyer_id, "name": full_name or email, "count": count}
                for lawyer_id, full_name, email, count in per_lawyer
            ],
            "clients_by_type": self._count_by(Client, Client.type, None, CLIENT_TYPES),
            "lawyer_count": len(per_lawyer),
            "finances": self.financial_stats(None),
        }

    def generate_report(self) -> Dict[str, Any]:
        """Platform-wide analytics as one document."""
        report = {
            "generated_at": datetime.utcnow().isoformat(),
            "cases": self.case_stats(),
            "clients": self.client_stats(),
            "finances": self.financial_stats(),
            "lawyers": self.admin_stats()["cases_per_lawyer"],
        }
        logger.info("Generated analytics report")
        return report
