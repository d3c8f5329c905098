from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.database import get_session
from app.models.user import User
from app.schemas.summary_schemas import DashboardStats, PaymentRequestStats
from app.services.stats_service import dashboard_stats, payment_request_stats
from app.utils.token import get_current_admin

router = APIRouter()


# recomputed on every call, not cached
@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    return dashboard_stats(session)


@router.get("/stats/payment-requests", response_model=PaymentRequestStats)
def get_payment_request_stats(
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    return payment_request_stats(session)
