from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_queue_cache
from ...services.patient_service import PatientService
from ...services.queue_cache import QueueCache
from ...schemas.anamnesis import AnamnesisResponse
from ...schemas.patient import (
    PatientCreate, PatientAdminCreate, PatientResponse, PatientLookupResponse
)
from ...schemas.queue import MessageResponse

router = APIRouter(prefix="/patients", tags=["Patients"])

@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def register_patient(
    patient_data: PatientCreate,
    db: Session = Depends(get_db)
):
    """Register a patient profile."""
    patient = PatientService(db).register_patient(patient_data)
    return PatientResponse.model_validate(patient)

@router.get("/byuser", response_model=PatientLookupResponse)
async def get_patient_by_user(
    user_id: int,
    db: Session = Depends(get_db)
):
    """Check whether a login already has a patient profile."""
    patient = PatientService(db).get_by_user(user_id)
    if not patient:
        return PatientLookupResponse(exists=False)
    return PatientLookupResponse(exists=True, patient=PatientResponse.model_validate(patient))

@router.post("/admin", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register_and_enqueue(
    patient_data: PatientAdminCreate,
    db: Session = Depends(get_db),
    cache: QueueCache = Depends(get_queue_cache)
):
    """Register a walk-in patient and put them in the queue."""
    PatientService(db, cache).register_and_enqueue(patient_data)
    return MessageResponse(message="Patient registered and queued successfully")

@router.get("/{patient_id}/anamnesis", response_model=List[AnamnesisResponse])
async def get_patient_anamnesis(
    patient_id: int,
    db: Session = Depends(get_db)
):
    """Anamnesis records of a patient."""
    records = PatientService(db).list_anamneses(patient_id)
    return [AnamnesisResponse.model_validate(record) for record in records]
