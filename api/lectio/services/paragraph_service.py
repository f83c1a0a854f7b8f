"""
Paragraph catalog service: storing generated paragraphs and serving them with progress.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from lectio.core.exceptions import NotFoundError, StoreFailure, ValidationError
from lectio.models.enums import ItemType
from lectio.models.paragraph import ImportantWord, Paragraph, ParagraphQuestion
from lectio.models.user_progress import ItemRef, UserProgress
from lectio.schemas.paragraph import (
    CreateParagraphRequest,
    ImportantWordResponse,
    ParagraphQuestionResponse,
    ParagraphResponse,
)
from lectio.services.progress_service import fetch_progress_map, partition_due, to_progress
from lectio.services.progress_store import ProgressStore
from lectio.utils.text_utils import sanitize_text

logger = logging.getLogger(__name__)

# Maximum stored lengths per field
MAX_TITLE = 160
MAX_LABEL = 120  # theme and topic
MAX_LEVEL = 8
MAX_CONTENT = 5000
MAX_QUESTION = 240
MAX_ANSWER = 300
MAX_CHOICE = 200
MAX_TERM = 120
MAX_MEANING = 240
MAX_USAGE_SENTENCE = 320


def get_item(
    session: Session,
    item: ItemRef
) -> Union[ParagraphQuestion, ImportantWord]:
    """
    Look up a learning item in the catalog.

    Raises:
        NotFoundError: No question/word with that id exists
    """
    if item.item_type == ItemType.PARAGRAPH_QUESTION:
        found = session.get(ParagraphQuestion, item.item_id)
        label = "ParagraphQuestion"
    else:
        found = session.get(ImportantWord, item.item_id)
        label = "ImportantWord"
    if found is None:
        raise NotFoundError(f"{label} {item.item_id} not found")
    return found


def _paragraph_response(
    paragraph: Paragraph,
    progress_map: Dict[ItemRef, UserProgress],
    questions: Optional[List[ParagraphQuestion]] = None,
    words: Optional[List[ImportantWord]] = None
) -> ParagraphResponse:
    if questions is None:
        questions = paragraph.questions
    if words is None:
        words = paragraph.important_words
    question_items = [
        ParagraphQuestionResponse(
            id=q.id,
            paragraph_id=q.paragraph_id,
            question=q.question,
            answer=q.answer,
            choices=list(q.choices or []),
            created_at=q.created_at,
            updated_at=q.updated_at,
            progress=to_progress(progress_map.get(ItemRef(ItemType.PARAGRAPH_QUESTION, q.id))),
        )
        for q in questions
    ]
    word_items = [
        ImportantWordResponse(
            id=w.id,
            paragraph_id=w.paragraph_id,
            term=w.term,
            meaning=w.meaning,
            usage_sentence=w.usage_sentence,
            created_at=w.created_at,
            updated_at=w.updated_at,
            progress=to_progress(progress_map.get(ItemRef(ItemType.IMPORTANT_WORD, w.id))),
        )
        for w in words
    ]
    return ParagraphResponse(
        id=paragraph.id,
        title=paragraph.title,
        theme=paragraph.theme,
        topic=paragraph.topic,
        level=paragraph.level,
        content=paragraph.content,
        created_at=paragraph.created_at,
        updated_at=paragraph.updated_at,
        questions=question_items,
        important_words=word_items,
    )


def list_paragraphs(
    session: Session,
    user_id: Optional[str] = None,
    theme: Optional[str] = None,
    level: Optional[str] = None,
    due_only: bool = False,
    now: Optional[datetime] = None
) -> List[ParagraphResponse]:
    """
    List paragraphs newest first with the caller's progress on every item.

    Anonymous callers (user_id None) get the zeroed default progress everywhere.
    Progress for all items is fetched in a single query.

    Args:
        session: Database session
        user_id: Caller, or None for anonymous
        theme: Only paragraphs with this theme
        level: Only paragraphs with this level
        due_only: Keep only questions and words due for review (never answered,
            or next review passed); paragraphs left without items are dropped
        now: Reference time for due_only (defaults to now)
    """
    statement = select(Paragraph).options(
        selectinload(Paragraph.questions),
        selectinload(Paragraph.important_words),
    )
    if theme:
        statement = statement.where(Paragraph.theme == theme)
    if level:
        statement = statement.where(Paragraph.level == level)
    statement = statement.order_by(Paragraph.created_at.desc())

    paragraphs = session.exec(statement).all()

    progress_map: Dict[ItemRef, UserProgress] = {}
    if user_id and paragraphs:
        question_ids = [q.id for p in paragraphs for q in p.questions]
        word_ids = [w.id for p in paragraphs for w in p.important_words]
        progress_map = fetch_progress_map(
            ProgressStore(session, lock_rows=False), user_id, question_ids, word_ids
        )

    logger.info(
        f"Listing {len(paragraphs)} paragraph(s) (theme={theme}, level={level}, "
        f"user={user_id or 'anonymous'}, progress records={len(progress_map)}, due_only={due_only})"
    )
    if not due_only:
        return [_paragraph_response(p, progress_map) for p in paragraphs]

    if now is None:
        now = datetime.now(timezone.utc)
    responses = []
    for p in paragraphs:
        questions, _ = partition_due(
            p.questions, progress_map,
            key=lambda q: ItemRef(ItemType.PARAGRAPH_QUESTION, q.id), now=now
        )
        words, _ = partition_due(
            p.important_words, progress_map,
            key=lambda w: ItemRef(ItemType.IMPORTANT_WORD, w.id), now=now
        )
        if questions or words:
            responses.append(_paragraph_response(p, progress_map, questions, words))
    return responses


def _optional_text(value: Optional[str], max_length: int) -> Optional[str]:
    if not value:
        return None
    return sanitize_text(value, max_length) or None


def create_paragraph(
    session: Session,
    request: CreateParagraphRequest
) -> ParagraphResponse:
    """
    Store a paragraph with its questions and important words.

    All text is sanitized (tags stripped, trimmed, length capped). Blank
    questions and words left after sanitizing are skipped.

    Raises:
        ValidationError: Content is empty after sanitizing
        StoreFailure: The insert failed
    """
    content = sanitize_text(request.content, MAX_CONTENT)
    if not content:
        raise ValidationError("Content is required.")

    paragraph = Paragraph(
        title=_optional_text(request.title, MAX_TITLE),
        theme=_optional_text(request.theme, MAX_LABEL),
        topic=_optional_text(request.topic, MAX_LABEL),
        level=_optional_text(request.level, MAX_LEVEL),
        content=content,
    )
    session.add(paragraph)

    for q in request.questions:
        question = sanitize_text(q.question, MAX_QUESTION)
        answer = sanitize_text(q.answer, MAX_ANSWER)
        if not question or not answer:
            continue
        choices = [sanitize_text(c, MAX_CHOICE) for c in q.choices]
        session.add(ParagraphQuestion(
            paragraph_id=paragraph.id,
            question=question,
            answer=answer,
            choices=[c for c in choices if c],
        ))

    for w in request.important_words:
        term = sanitize_text(w.term, MAX_TERM)
        meaning = sanitize_text(w.meaning, MAX_MEANING)
        usage_sentence = sanitize_text(w.usage_sentence, MAX_USAGE_SENTENCE)
        if not term or not meaning:
            continue
        session.add(ImportantWord(
            paragraph_id=paragraph.id,
            term=term,
            meaning=meaning,
            usage_sentence=usage_sentence,
        ))

    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error creating paragraph: {str(e)}")
        raise StoreFailure("Failed to create paragraph") from e

    session.refresh(paragraph)
    logger.info(
        f"Created paragraph {paragraph.id} with {len(paragraph.questions)} question(s) "
        f"and {len(paragraph.important_words)} word(s)"
    )
    return _paragraph_response(paragraph, {})
