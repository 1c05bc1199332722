# events router: log, list, and delete behavioral events
# family accounts own their events; linked professionals can read them

import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from steadylog.models.event import EventCreate, EventEntry
from steadylog.models.session import SessionContext
from steadylog.services.db import Database, get_db
from steadylog.services.records import can_view_patient, event_from_doc, fetch_events
from steadylog.dependencies import get_session, require_role

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=EventEntry, status_code=status.HTTP_201_CREATED)
async def log_event(
    payload: EventCreate,
    session: SessionContext = Depends(require_role("family")),
    db: Database = Depends(get_db),
):
    """log a new event for the signed-in family account"""
    now = datetime.now(timezone.utc)
    moment = payload.timestamp or now
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    doc = {
        "owner_id": session.user_id,
        "timestamp": moment.astimezone(timezone.utc).isoformat(),
        "type": payload.type,
        "intensity": payload.intensity,
        "triggers": list(payload.triggers),
        "notes": payload.notes,
        "location": payload.location,
        "created_at": now.isoformat(),
    }
    result = await db.events.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info(f"Event logged: {payload.type} ({payload.intensity}) by user {session.user_id}")

    return event_from_doc(doc)


@router.get("", response_model=list[EventEntry])
async def list_events(
    patient_id: Optional[str] = Query(None, alias="patientId"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    session: SessionContext = Depends(get_session),
    db: Database = Depends(get_db),
):
    """list events for the caller or, for professionals, a linked patient"""
    if patient_id is None:
        if session.is_professional:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="patientId is required for professional accounts",
            )
        patient_id = session.user_id

    if not await can_view_patient(session, patient_id, db):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this patient's events",
        )

    docs = await fetch_events(db, patient_id, ascending=(order == "asc"), limit=limit)
    return [event_from_doc(doc) for doc in docs]


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    session: SessionContext = Depends(get_session),
    db: Database = Depends(get_db),
):
    """hard-delete one of the caller's own events"""
    try:
        oid = ObjectId(event_id)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")

    result = await db.events.delete_one({"_id": oid, "owner_id": session.user_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")

    logger.info(f"Event {event_id} deleted by user {session.user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
