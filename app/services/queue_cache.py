"""
In-memory snapshot of the waiting line.

The database is the source of truth. ``QueueCache`` keeps the ordered list of
waiting entries plus a version counter so pollers can revalidate with
``If-None-Match`` instead of downloading the queue on every cycle.
"""

import logging
import threading
from typing import Callable, List, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.patient import Patient
from ..models.queue_entry import QueueEntry, QueueStatus
from ..schemas.queue import QueueItem

logger = logging.getLogger(__name__)

Snapshot = Tuple[QueueItem, ...]


def fetch_waiting(db: Session) -> List[QueueItem]:
    """Load waiting entries joined with patient data, in calling order."""
    rows = (
        db.query(QueueEntry, Patient)
        .join(Patient, QueueEntry.patient_id == Patient.id)
        .filter(QueueEntry.status == QueueStatus.WAITING)
        .order_by(
            QueueEntry.is_priority.desc(),
            QueueEntry.created_at.asc(),
            QueueEntry.id.asc(),
        )
        .all()
    )
    return [to_queue_item(entry, patient) for entry, patient in rows]


def to_queue_item(entry: QueueEntry, patient: Patient) -> QueueItem:
    return QueueItem(
        id=entry.id,
        patient_id=entry.patient_id,
        is_priority=entry.is_priority,
        status=entry.status,
        created_at=entry.created_at,
        served_at=entry.served_at,
        cancelled_at=entry.cancelled_at,
        name=patient.name,
        email=patient.email,
        phone=patient.phone,
        cpf=patient.cpf,
        gender=patient.gender,
        birth_date=patient.birth_date,
    )


class QueueCache:
    """Waiting-line snapshot and its version token."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory
        # Guards the (version, snapshot) pair
        self._state_lock = threading.Lock()
        # Serializes rebuilds so an older read never replaces a newer one
        self._rebuild_lock = threading.Lock()
        self._snapshot: Snapshot = ()
        self._version = 0

    def rebuild(self) -> bool:
        """Reload the snapshot from the database.

        Returns False when the query or the row conversion fails; the previous
        snapshot and version are kept in that case.
        """
        with self._rebuild_lock:
            try:
                with self._session_factory() as db:
                    snapshot = tuple(fetch_waiting(db))
            except (SQLAlchemyError, LookupError, ValueError):
                # ValueError covers pydantic's ValidationError on a bad row
                logger.exception(
                    f"Queue cache rebuild failed, keeping version {self.current_version()}"
                )
                return False

            with self._state_lock:
                self._snapshot = snapshot
                self._version += 1
                version = self._version

        logger.info(f"Queue cache rebuilt: version={version} waiting={len(snapshot)}")
        return True

    def current_snapshot(self) -> Snapshot:
        with self._state_lock:
            return self._snapshot

    def current_version(self) -> int:
        with self._state_lock:
            return self._version

    def state(self) -> Tuple[int, Snapshot]:
        """Version and snapshot read together."""
        with self._state_lock:
            return self._version, self._snapshot
