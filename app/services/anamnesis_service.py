from sqlalchemy.orm import Session
from typing import List

from ..core.exceptions import NotFoundError
from ..models.anamnesis import Anamnesis
from ..models.queue_entry import QueueEntry
from ..schemas.anamnesis import AnamnesisBase

class AnamnesisService:
    """Clinical interview records, reached through a queue entry."""

    def __init__(self, db: Session):
        self.db = db

    def _patient_id_for_entry(self, entry_id: int) -> int:
        entry = self.db.query(QueueEntry).filter(QueueEntry.id == entry_id).first()
        if not entry:
            raise NotFoundError("Patient not found in the queue")
        return entry.patient_id

    def list_for_entry(self, entry_id: int) -> List[Anamnesis]:
        patient_id = self._patient_id_for_entry(entry_id)
        return self.db.query(Anamnesis).filter(
            Anamnesis.patient_id == patient_id
        ).order_by(Anamnesis.created_at.asc(), Anamnesis.id.asc()).all()

    def create_for_entry(self, entry_id: int, data: AnamnesisBase) -> Anamnesis:
        patient_id = self._patient_id_for_entry(entry_id)

        anamnesis = Anamnesis(patient_id=patient_id, **data.model_dump())
        self.db.add(anamnesis)
        self.db.commit()
        self.db.refresh(anamnesis)

        return anamnesis

    def update_for_entry(self, entry_id: int, data: AnamnesisBase) -> Anamnesis:
        """Overwrite the patient's most recent anamnesis."""
        patient_id = self._patient_id_for_entry(entry_id)

        anamnesis = self.db.query(Anamnesis).filter(
            Anamnesis.patient_id == patient_id
        ).order_by(Anamnesis.id.desc()).first()
        if not anamnesis:
            raise NotFoundError("Anamnesis not found")

        for field, value in data.model_dump().items():
            setattr(anamnesis, field, value)
        self.db.commit()
        self.db.refresh(anamnesis)

        return anamnesis
