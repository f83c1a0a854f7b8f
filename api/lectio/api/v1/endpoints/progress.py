"""
Progress endpoints: batched observations and progress lookups.
"""
from fastapi import APIRouter, Depends
from typing import Optional

from lectio.api.deps import get_current_user_id, get_progress_store
from lectio.models.enums import ItemType
from lectio.schemas.progress import (
    BatchProgressRequest,
    BatchProgressResponse,
    DueProgressResponse,
    ProgressRecordResponse,
)
from lectio.services.progress_service import (
    apply_observations,
    get_progress,
    list_due_progress,
    to_progress_record,
)
from lectio.services.progress_store import ProgressStore

router = APIRouter(prefix="/progress", tags=["progress"])


@router.post("/batch", response_model=BatchProgressResponse)
async def apply_progress_batch(
    request: BatchProgressRequest,
    user_id: str = Depends(get_current_user_id),
    store: ProgressStore = Depends(get_progress_store)
):
    """
    Apply an ordered list of observations in one transaction.

    Malformed events are dropped; if none is valid the request fails with 400.
    Either every valid event is applied or none is.
    """
    results = apply_observations(store, user_id, request.events)
    return BatchProgressResponse(
        progress={item_id: to_progress_record(record) for item_id, record in results.items()}
    )


@router.get("/due", response_model=DueProgressResponse)
async def get_due_progress(
    item_type: Optional[ItemType] = None,
    user_id: str = Depends(get_current_user_id),
    store: ProgressStore = Depends(get_progress_store)
):
    """Progress records of the caller that are due for review, soonest first."""
    records = list_due_progress(store, user_id, item_type=item_type)
    return DueProgressResponse(progress=[to_progress_record(r) for r in records])


@router.get("/{item_type}/{item_id}", response_model=ProgressRecordResponse)
async def get_item_progress(
    item_type: ItemType,
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ProgressStore = Depends(get_progress_store)
):
    """Progress of the caller on one item; 404 when the caller never answered it."""
    return to_progress_record(get_progress(store, user_id, item_type, item_id))
