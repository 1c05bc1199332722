# record access: store reads shared by several routers
# converts mongodb documents to api models and answers "may this session see that patient"

import logging
from typing import Optional

from steadylog.models.event import EventEntry
from steadylog.models.medication import MedicationResponse
from steadylog.models.patient import LinkedPatientResponse
from steadylog.models.session import SessionContext
from steadylog.models.taxonomy import color_for, label_for
from steadylog.services.db import Database
from steadylog.services.event_log import resolve_timezone, valid_intensity
from steadylog.services.insights import summarize_patient
from steadylog.config import settings

logger = logging.getLogger(__name__)


def event_from_doc(doc: dict) -> EventEntry:
    event_type = doc.get("type", "")
    intensity = valid_intensity(doc.get("intensity"))
    if intensity is None:
        # still listed so the owner can delete it
        logger.warning(f"Event {doc.get('_id')} has invalid intensity {doc.get('intensity')!r}")
        intensity = 0
    return EventEntry(
        id=str(doc.get("_id", "")),
        ownerId=doc.get("owner_id", ""),
        timestamp=str(doc.get("timestamp", "")),
        type=event_type if isinstance(event_type, str) else "",
        intensity=intensity,
        triggers=list(doc.get("triggers") or []),
        notes=doc.get("notes"),
        location=doc.get("location"),
        createdAt=str(doc.get("created_at", "")),
        typeLabel=label_for(event_type),
        typeColor=color_for(event_type),
    )


def medication_from_doc(doc: dict) -> MedicationResponse:
    return MedicationResponse(
        id=str(doc.get("_id", "")),
        ownerId=doc.get("owner_id", ""),
        name=doc.get("name", ""),
        dosage=doc.get("dosage"),
        schedule=doc.get("schedule"),
        createdAt=str(doc.get("created_at", "")),
    )


async def fetch_events(
    db: Database,
    owner_id: str,
    ascending: bool = True,
    limit: Optional[int] = None,
) -> list[dict]:
    """all events of one owner ordered by timestamp"""
    cursor = db.events.find({"owner_id": owner_id}).sort("timestamp", 1 if ascending else -1)
    if limit:
        cursor = cursor.limit(limit)
    return [doc async for doc in cursor]


async def get_link(db: Database, professional_id: str, patient_id: str) -> Optional[dict]:
    return await db.patient_links.find_one({"professional_id": professional_id, "patient_id": patient_id})


async def can_view_patient(session: SessionContext, patient_id: str, db: Database) -> bool:
    """family users see themselves, professionals see linked patients"""
    if session.role == "family":
        return patient_id == session.user_id
    if session.role == "professional":
        return await get_link(db, session.user_id, patient_id) is not None
    return False


async def build_linked_patient(db: Database, link: dict, profile: dict) -> LinkedPatientResponse:
    """a linked patient with the professional's nickname and an activity summary"""
    patient_id = profile["_id"]
    events = await fetch_events(db, patient_id)
    name = profile.get("name", "")
    nickname = link.get("nickname")
    return LinkedPatientResponse(
        id=patient_id,
        name=name,
        nickname=nickname,
        displayName=nickname or name,
        linkedAt=str(link.get("created_at", "")),
        summary=summarize_patient(events, tz=resolve_timezone(settings.LOCAL_TIMEZONE)),
    )


async def linked_patients(db: Database, professional_id: str) -> list[LinkedPatientResponse]:
    """every patient linked to a professional, oldest link first"""
    patients = []
    async for link in db.patient_links.find({"professional_id": professional_id}).sort("created_at", 1):
        patient_id = link.get("patient_id", "")
        profile = await db.profiles.find_one({"_id": patient_id})
        if not profile:
            logger.warning(f"Link {professional_id} -> {patient_id} points to a missing profile")
            continue
        patients.append(await build_linked_patient(db, link, profile))
    return patients
