from fastapi import APIRouter, Depends, Header, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_notifier, get_queue_cache
from ...services.anamnesis_service import AnamnesisService
from ...services.notification import EmailNotifier
from ...services.queue_cache import QueueCache
from ...services.queue_service import QueueService
from ...schemas.anamnesis import AnamnesisBase, AnamnesisCreated, AnamnesisResponse
from ...schemas.queue import (
    AttendResponse, EnqueueRequest, MessageResponse, QueueEntryResponse, QueueItem
)

router = APIRouter(prefix="/queue", tags=["Queue"])

@router.post("", response_model=QueueEntryResponse, status_code=status.HTTP_201_CREATED)
async def join_queue(
    request: EnqueueRequest,
    db: Session = Depends(get_db),
    cache: QueueCache = Depends(get_queue_cache)
):
    """Put a registered patient in the waiting line."""
    entry = QueueService(db, cache).enqueue(request.cpf, request.is_priority)
    return QueueEntryResponse.model_validate(entry)

@router.get(
    "",
    response_model=List[QueueItem],
    responses={status.HTTP_304_NOT_MODIFIED: {"description": "Queue unchanged since the given ETag"}}
)
async def read_queue(
    response: Response,
    if_none_match: Optional[str] = Header(None),
    cache: QueueCache = Depends(get_queue_cache)
):
    """Waiting line from the cache.

    Clients poll with the last ETag they received; an unchanged queue
    answers 304 with no body.
    """
    version, snapshot = cache.state()
    etag = str(version)

    if if_none_match is not None and if_none_match == etag:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": etag})

    response.headers["ETag"] = etag
    return list(snapshot)

@router.get("/current", response_model=Optional[QueueItem])
async def get_current_patient(
    db: Session = Depends(get_db),
    cache: QueueCache = Depends(get_queue_cache)
):
    """Patient currently in the consulting room, or null."""
    return QueueService(db, cache).current_attending()

@router.post("/{entry_id}/attend", response_model=AttendResponse)
async def start_attending(
    entry_id: int,
    db: Session = Depends(get_db),
    cache: QueueCache = Depends(get_queue_cache),
    notifier: EmailNotifier = Depends(get_notifier)
):
    """Call a waiting patient and notify them by email."""
    notified = QueueService(db, cache, notifier).start_attending(entry_id)
    return AttendResponse(message="Appointment started successfully", notification=notified)

@router.post("/{entry_id}/finish", response_model=MessageResponse)
async def finish_attending(
    entry_id: int,
    db: Session = Depends(get_db),
    cache: QueueCache = Depends(get_queue_cache)
):
    """Finish the appointment in progress."""
    QueueService(db, cache).finish_attending(entry_id)
    return MessageResponse(message="Appointment finished successfully")

@router.delete("/{entry_id}", response_model=MessageResponse)
async def cancel_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    cache: QueueCache = Depends(get_queue_cache)
):
    """Remove a patient from the queue, keeping the entry as cancelled."""
    QueueService(db, cache).cancel(entry_id)
    return MessageResponse(message="Patient removed from the queue successfully")

@router.get("/{entry_id}/anamnesis", response_model=List[AnamnesisResponse])
async def get_anamnesis(
    entry_id: int,
    db: Session = Depends(get_db)
):
    records = AnamnesisService(db).list_for_entry(entry_id)
    return [AnamnesisResponse.model_validate(record) for record in records]

@router.post("/{entry_id}/anamnesis", response_model=AnamnesisCreated, status_code=status.HTTP_201_CREATED)
async def create_anamnesis(
    entry_id: int,
    data: AnamnesisBase,
    db: Session = Depends(get_db)
):
    anamnesis = AnamnesisService(db).create_for_entry(entry_id, data)
    return AnamnesisCreated(message="Anamnesis created successfully", id=anamnesis.id)

@router.put("/{entry_id}/anamnesis", response_model=MessageResponse)
async def update_anamnesis(
    entry_id: int,
    data: AnamnesisBase,
    db: Session = Depends(get_db)
):
    AnamnesisService(db).update_for_entry(entry_id, data)
    return MessageResponse(message="Anamnesis updated successfully")
