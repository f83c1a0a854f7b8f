"""
Exercise submission endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
import logging

from lectio.api.deps import get_current_user_id, get_progress_store
from lectio.core.database import get_session
from lectio.schemas.progress import ExerciseSubmitRequest, ExerciseSubmitResponse
from lectio.services.paragraph_service import get_item
from lectio.services.progress_service import apply_observation, parse_item_ref, to_progress
from lectio.services.progress_store import ProgressStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exercises", tags=["exercises"])


@router.post("/submit", response_model=ExerciseSubmitResponse, status_code=status.HTTP_200_OK)
async def submit_exercise(
    request: ExerciseSubmitRequest,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    store: ProgressStore = Depends(get_progress_store)
):
    """
    Record one correct/incorrect answer for a question or word.

    The item must exist in the catalog (404 otherwise). Returns the updated
    progress of the caller on that item.
    """
    item = parse_item_ref(request.item_type, request.id)
    get_item(session, item)

    record = apply_observation(
        store,
        user_id,
        item.item_type,
        item.item_id,
        request.correct
    )

    return ExerciseSubmitResponse(
        item_type=item.item_type,
        progress=to_progress(record)
    )
