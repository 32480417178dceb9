from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Optional

from ..models.queue_entry import QueueStatus


class EnqueueRequest(BaseModel):
    cpf: str = Field(..., min_length=1)
    is_priority: bool = False


class QueueEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    is_priority: bool
    status: QueueStatus
    created_at: datetime
    served_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None


class QueueItem(QueueEntryResponse):
    """Queue entry joined with the patient fields shown on the waiting board."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    cpf: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[date] = None


class MessageResponse(BaseModel):
    message: str


class AttendResponse(MessageResponse):
    notification: bool
