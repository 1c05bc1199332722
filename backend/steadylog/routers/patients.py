# patients router: professionals link to family accounts via connection codes
# professional-only endpoints, reads from profiles and patient_links collections

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.errors import DuplicateKeyError

from steadylog.models.patient import LinkedPatientResponse, NicknameUpdate, PatientLinkCreate
from steadylog.models.session import SessionContext
from steadylog.services.db import Database, get_db
from steadylog.services.records import build_linked_patient, get_link, linked_patients
from steadylog.dependencies import require_role

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("", response_model=list[LinkedPatientResponse])
async def list_patients(
    session: SessionContext = Depends(require_role("professional")),
    db: Database = Depends(get_db),
):
    """list all patients linked to the signed-in professional"""
    return await linked_patients(db, session.user_id)


@router.post("/link", response_model=LinkedPatientResponse, status_code=status.HTTP_201_CREATED)
async def link_patient(
    payload: PatientLinkCreate,
    session: SessionContext = Depends(require_role("professional")),
    db: Database = Depends(get_db),
):
    """redeem a connection code and start following that family account"""
    profile = await db.profiles.find_one({"connection_code": payload.connection_code, "role": "family"})
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No account matches this connection code",
        )

    patient_id = profile["_id"]
    if await get_link(db, session.user_id, patient_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This patient is already linked to your account",
        )

    link = {
        "professional_id": session.user_id,
        "patient_id": patient_id,
        "nickname": payload.nickname,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    try:
        await db.patient_links.insert_one(link)
    except DuplicateKeyError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This patient is already linked to your account",
        )
    logger.info(f"Patient {patient_id} linked to professional {session.user_id}")

    return await build_linked_patient(db, link, profile)


@router.patch("/{patient_id}/nickname", response_model=LinkedPatientResponse)
async def update_nickname(
    patient_id: str,
    payload: NicknameUpdate,
    session: SessionContext = Depends(require_role("professional")),
    db: Database = Depends(get_db),
):
    """set or clear the private nickname a professional uses for a patient"""
    link = await get_link(db, session.user_id, patient_id)
    if not link:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this patient",
        )

    nickname = payload.nickname.strip() if payload.nickname and payload.nickname.strip() else None
    await db.patient_links.update_one(
        {"professional_id": session.user_id, "patient_id": patient_id},
        {"$set": {"nickname": nickname}},
    )
    link["nickname"] = nickname

    profile = await db.profiles.find_one({"_id": patient_id})
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Patient not found",
        )
    return await build_linked_patient(db, link, profile)
