"""
Paragraph endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List, Optional

from lectio.api.deps import get_current_user_id, get_optional_user_id
from lectio.core.database import get_session
from lectio.schemas.paragraph import CreateParagraphRequest, ParagraphResponse
from lectio.services.paragraph_service import create_paragraph, list_paragraphs

router = APIRouter(prefix="/paragraphs", tags=["paragraphs"])


@router.get("", response_model=List[ParagraphResponse])
async def get_paragraphs(
    theme: Optional[str] = None,
    level: Optional[str] = None,
    due_only: bool = False,
    user_id: Optional[str] = Depends(get_optional_user_id),
    session: Session = Depends(get_session)
):
    """
    List paragraphs with their questions and words.

    Each item carries the caller's progress, or zeroed progress for anonymous
    callers and items never answered. With due_only only the items due for
    review are returned.
    """
    return list_paragraphs(session, user_id=user_id, theme=theme, level=level, due_only=due_only)


@router.post(
    "",
    response_model=ParagraphResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(get_current_user_id)]
)
async def post_paragraph(
    request: CreateParagraphRequest,
    session: Session = Depends(get_session)
):
    """Store a paragraph with its questions and important words."""
    return create_paragraph(session, request)
