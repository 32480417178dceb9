from sqlalchemy.orm import Session
from datetime import date, datetime
from typing import Optional
import logging

from ..core.config import settings
from ..core.exceptions import ConflictError, NotFoundError
from ..models.patient import Patient
from ..models.queue_entry import QueueEntry, QueueStatus, ACTIVE_STATUSES
from ..schemas.queue import QueueItem
from .notification import EmailNotifier
from .priority import is_priority
from .queue_cache import QueueCache, to_queue_item

logger = logging.getLogger(__name__)

class QueueService:
    """Queue mutations. Every successful write is followed by a cache rebuild."""

    def __init__(
        self,
        db: Session,
        cache: QueueCache,
        notifier: Optional[EmailNotifier] = None
    ):
        self.db = db
        self.cache = cache
        self.notifier = notifier

    def enqueue(
        self,
        cpf: str,
        explicit_priority: bool = False,
        today: Optional[date] = None
    ) -> QueueEntry:
        """Put a registered patient at the end of their priority tier."""
        patient = self.db.query(Patient).filter(Patient.cpf == cpf).first()
        if not patient:
            raise NotFoundError("Patient not registered")

        active = self.db.query(QueueEntry).filter(
            QueueEntry.patient_id == patient.id,
            QueueEntry.status.in_(ACTIVE_STATUSES)
        ).first()
        if active:
            raise ConflictError("Patient is already in the queue")

        entry = QueueEntry(
            patient_id=patient.id,
            is_priority=is_priority(
                patient.birth_date,
                explicit=explicit_priority,
                today=today,
                threshold=settings.PRIORITY_AGE_THRESHOLD
            ),
            status=QueueStatus.WAITING
        )

        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)

        logger.info(f"Patient {patient.id} queued as entry {entry.id} (priority={entry.is_priority})")
        self.cache.rebuild()
        return entry

    def start_attending(self, entry_id: int) -> bool:
        """Call a waiting patient. Returns whether the patient was notified."""
        row = self.db.query(Patient.email, Patient.name).join(
            QueueEntry, QueueEntry.patient_id == Patient.id
        ).filter(QueueEntry.id == entry_id).first()

        if not row:
            raise NotFoundError("Patient not found in the queue")
        email, name = row

        updated = self.db.query(QueueEntry).filter(
            QueueEntry.id == entry_id,
            QueueEntry.status == QueueStatus.WAITING
        ).update(
            {QueueEntry.status: QueueStatus.ATTENDING, QueueEntry.served_at: datetime.utcnow()},
            synchronize_session=False
        )

        if updated == 0:
            self.db.rollback()
            raise NotFoundError("Patient is not waiting in the queue or is already being attended")

        self.db.commit()
        logger.info(f"Queue entry {entry_id} is now being attended")
        self.cache.rebuild()

        notified = False
        if email and self.notifier is not None:
            try:
                notified = self.notifier.send(email, name)
            except Exception as e:
                logger.error(f"Notification for queue entry {entry_id} failed: {str(e)}")
        return notified

    def finish_attending(self, entry_id: int) -> None:
        """Close an appointment in progress."""
        updated = self.db.query(QueueEntry).filter(
            QueueEntry.id == entry_id,
            QueueEntry.status == QueueStatus.ATTENDING
        ).update(
            {QueueEntry.status: QueueStatus.ATTENDED},
            synchronize_session=False
        )

        if updated == 0:
            self.db.rollback()
            raise NotFoundError("No appointment in progress found for this entry")

        self.db.commit()
        logger.info(f"Queue entry {entry_id} attended")
        self.cache.rebuild()

    def cancel(self, entry_id: int) -> None:
        """Soft delete: the entry keeps its history with status cancelled."""
        updated = self.db.query(QueueEntry).filter(
            QueueEntry.id == entry_id
        ).update(
            {QueueEntry.status: QueueStatus.CANCELLED, QueueEntry.cancelled_at: datetime.utcnow()},
            synchronize_session=False
        )

        if updated == 0:
            self.db.rollback()
            raise NotFoundError("Queue entry not found")

        self.db.commit()
        logger.info(f"Queue entry {entry_id} cancelled")
        self.cache.rebuild()

    def current_attending(self) -> Optional[QueueItem]:
        """The patient most recently called into the consulting room."""
        row = self.db.query(QueueEntry, Patient).join(
            Patient, QueueEntry.patient_id == Patient.id
        ).filter(
            QueueEntry.status == QueueStatus.ATTENDING
        ).order_by(QueueEntry.served_at.desc()).first()

        if not row:
            return None
        entry, patient = row
        return to_queue_item(entry, patient)
