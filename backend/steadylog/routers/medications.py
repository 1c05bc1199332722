# medications router: medication schedule per family account
# owners create and delete, linked professionals can read

import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from steadylog.models.medication import MedicationCreate, MedicationResponse
from steadylog.models.session import SessionContext
from steadylog.services.db import Database, get_db
from steadylog.services.records import can_view_patient, medication_from_doc
from steadylog.dependencies import get_session, require_role

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/medications", tags=["medications"])


@router.post("", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def add_medication(
    payload: MedicationCreate,
    session: SessionContext = Depends(require_role("family")),
    db: Database = Depends(get_db),
):
    doc = {
        "owner_id": session.user_id,
        "name": payload.name,
        "dosage": payload.dosage,
        "schedule": payload.schedule,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    result = await db.medications.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info(f"Medication added by user {session.user_id}")

    return medication_from_doc(doc)


@router.get("", response_model=list[MedicationResponse])
async def list_medications(
    patient_id: Optional[str] = Query(None, alias="patientId"),
    session: SessionContext = Depends(get_session),
    db: Database = Depends(get_db),
):
    """newest first"""
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
            detail="You do not have access to this patient's medications",
        )

    cursor = db.medications.find({"owner_id": patient_id}).sort("created_at", -1)
    return [medication_from_doc(doc) async for doc in cursor]


@router.delete("/{medication_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medication(
    medication_id: str,
    session: SessionContext = Depends(get_session),
    db: Database = Depends(get_db),
):
    try:
        oid = ObjectId(medication_id)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Medication not found")

    result = await db.medications.delete_one({"_id": oid, "owner_id": session.user_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Medication not found")

    logger.info(f"Medication {medication_id} removed by user {session.user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
