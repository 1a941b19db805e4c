"""
Dashboard API endpoints
"""
import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_storage
from app.schemas.dashboard import DashboardSummaryResponse
from app.services.dashboard_service import get_dashboard_summary
from app.services.storage import StorageRepository

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
async def dashboard_summary(
    reference_date: Optional[datetime.date] = Query(None, description="Defaults to today"),
    storage: StorageRepository = Depends(get_storage),
):
    """
    Patients, today's agenda and the month's balance
    """
    return await get_dashboard_summary(storage, reference_date)
