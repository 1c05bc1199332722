# insights router: derived analytics for a patient dashboard
# family accounts read their own, professionals read linked patients

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from steadylog.config import settings
from steadylog.models.insights import PatientInsights
from steadylog.models.session import SessionContext
from steadylog.services.db import Database, get_db
from steadylog.services.event_log import resolve_timezone
from steadylog.services.insights import derive_insights
from steadylog.services.records import can_view_patient, fetch_events
from steadylog.dependencies import get_session

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("/{patient_id}", response_model=PatientInsights)
async def get_patient_insights(
    patient_id: str,
    trend_days: int = Query(settings.TREND_WINDOW_DAYS, alias="trendDays", ge=1, le=90),
    session: SessionContext = Depends(get_session),
    db: Database = Depends(get_db),
):
    """period of day, dominant trigger, weekly matrix, heatmap, and trends"""
    if not await can_view_patient(session, patient_id, db):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this patient's insights",
        )

    events = await fetch_events(db, patient_id)
    logger.info(f"Deriving insights for patient {patient_id} from {len(events)} events")

    return derive_insights(
        events,
        patient_id=patient_id,
        tz=resolve_timezone(settings.LOCAL_TIMEZONE),
        trend_days=trend_days,
    )
