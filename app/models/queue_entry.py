from sqlalchemy import Column, Integer, ForeignKey, DateTime, Boolean, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from ..core.database import Base

class QueueStatus(str, enum.Enum):
    WAITING = "waiting"
    ATTENDING = "attending"
    ATTENDED = "attended"
    CANCELLED = "cancelled"

# A patient holds at most one entry in these states at a time
ACTIVE_STATUSES = (QueueStatus.WAITING, QueueStatus.ATTENDING)

class QueueEntry(Base):
    __tablename__ = "queue_entries"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)

    is_priority = Column(Boolean, nullable=False, default=False)
    status = Column(SQLEnum(QueueStatus), nullable=False, default=QueueStatus.WAITING, index=True)

    # Tracking
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    served_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    # Relationships
    patient = relationship("Patient", back_populates="queue_entries")

    def __repr__(self):
        return f"<QueueEntry(id={self.id}, patient_id={self.patient_id}, status='{self.status}', priority={self.is_priority})>"
