from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
import logging

from ..core.config import settings
from ..core.exceptions import ConflictError
from ..models.anamnesis import Anamnesis
from ..models.patient import Patient
from ..models.queue_entry import QueueEntry, QueueStatus
from ..schemas.patient import PatientAdminCreate, PatientCreate
from .priority import is_priority
from .queue_cache import QueueCache

logger = logging.getLogger(__name__)

class PatientService:
    def __init__(self, db: Session, cache: Optional[QueueCache] = None):
        self.db = db
        self.cache = cache

    def register_patient(self, patient_data: PatientCreate) -> Patient:
        """Register a patient profile."""
        patient = Patient(**patient_data.model_dump())

        self.db.add(patient)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("A patient with this CPF already exists")
        self.db.refresh(patient)

        return patient

    def get_by_user(self, user_id: int) -> Optional[Patient]:
        """Patient profile linked to a login, if any."""
        return self.db.query(Patient).filter(Patient.user_id == user_id).first()

    def register_and_enqueue(self, patient_data: PatientAdminCreate) -> QueueEntry:
        """Front-desk registration: create the patient and queue them atomically."""
        try:
            patient = Patient(
                **patient_data.model_dump(exclude={"is_priority"})
            )
            self.db.add(patient)
            self.db.flush()

            entry = QueueEntry(
                patient_id=patient.id,
                is_priority=is_priority(
                    patient.birth_date,
                    explicit=patient_data.is_priority,
                    threshold=settings.PRIORITY_AGE_THRESHOLD
                ),
                status=QueueStatus.WAITING
            )
            self.db.add(entry)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("A patient with this CPF already exists")
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(entry)
        logger.info(f"Patient {entry.patient_id} registered and queued as entry {entry.id}")

        if self.cache is not None:
            self.cache.rebuild()
        return entry

    def list_anamneses(self, patient_id: int) -> List[Anamnesis]:
        return self.db.query(Anamnesis).filter(
            Anamnesis.patient_id == patient_id
        ).order_by(Anamnesis.created_at.asc(), Anamnesis.id.asc()).all()
