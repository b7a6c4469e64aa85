import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from legal_office.core.database import get_db
from legal_office.core.response_utils import create_success_response, ResponseTimer
from legal_office.models import Profile
from legal_office.schemas import StandardResponse
from legal_office.services.analytics_service import AnalyticsService
from legal_office.api.v1.auth import require_user, require_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/overview", response_model=StandardResponse)
def get_overview(current_user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    """Totals for the lawyer dashboard."""
    with ResponseTimer() as timer:
        overview = AnalyticsService(db).overview(current_user)
        return create_success_response(data=overview, execution_time=timer.get_execution_time())


@router.get("/admin-stats", response_model=StandardResponse)
def get_admin_stats(current_user: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        stats = AnalyticsService(db).admin_stats()
        return create_success_response(data=stats, execution_time=timer.get_execution_time())


@router.get("/report", response_model=StandardResponse)
def get_report(current_user: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    with ResponseTimer() as timer:
        report = AnalyticsService(db).generate_report()
        return create_success_response(data=report, execution_time=timer.get_execution_time())
