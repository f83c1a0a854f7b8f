"""
Durable storage for UserProgress records.

Wraps a SQLModel session behind the small contract the progress tracker needs:
single lookup, batched lookup, upsert and an all-or-nothing transaction.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from lectio.core.exceptions import StoreFailure
from lectio.models.enums import ItemType
from lectio.models.user_progress import ItemRef, UserProgress

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProgressStore:
    """UserProgress persistence bound to one database session."""

    def __init__(self, session: Session, lock_rows: bool = True):
        self.session = session
        # Lock the row read by find_one until commit (no-op on SQLite)
        self.lock_rows = lock_rows

    def find_one(
        self,
        user_id: str,
        item: ItemRef,
        for_update: Optional[bool] = None
    ) -> Optional[UserProgress]:
        statement = select(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.item_type == item.item_type,
            UserProgress.item_id == item.item_id
        )
        if for_update is None:
            for_update = self.lock_rows
        if for_update:
            statement = statement.with_for_update()
        return self.session.exec(statement).first()

    def find_many(
        self,
        user_id: str,
        question_ids: Iterable[str] = (),
        word_ids: Iterable[str] = ()
    ) -> List[UserProgress]:
        """Fetch all records of the user for the given question and word ids in one query."""
        question_ids = list(question_ids)
        word_ids = list(word_ids)
        if not question_ids and not word_ids:
            return []

        clauses = []
        if question_ids:
            clauses.append(and_(
                UserProgress.item_type == ItemType.PARAGRAPH_QUESTION,
                UserProgress.item_id.in_(question_ids)  # type: ignore[attr-defined]
            ))
        if word_ids:
            clauses.append(and_(
                UserProgress.item_type == ItemType.IMPORTANT_WORD,
                UserProgress.item_id.in_(word_ids)  # type: ignore[attr-defined]
            ))

        statement = select(UserProgress).where(
            UserProgress.user_id == user_id,
            or_(*clauses)
        )
        return list(self.session.exec(statement).all())

    def find_due(
        self,
        user_id: str,
        now: datetime,
        item_type: Optional[ItemType] = None
    ) -> List[UserProgress]:
        statement = select(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.next_review <= now
        )
        if item_type is not None:
            statement = statement.where(UserProgress.item_type == item_type)
        statement = statement.order_by(UserProgress.next_review)  # type: ignore[arg-type]
        return list(self.session.exec(statement).all())

    def upsert(
        self,
        user_id: str,
        item: ItemRef,
        data: Dict[str, Any],
        existing: Optional[UserProgress] = None,
        lookup: bool = True
    ) -> UserProgress:
        """
        Create or update the record for (user_id, item).

        Args:
            user_id: Owning user
            item: Item reference (unique key together with user_id)
            data: Field values to write
            existing: Record already loaded in this session
            lookup: Query the store when existing is None. Callers that already
                know the record is absent pass False to create directly.

        Returns:
            The persisted (flushed) record
        """
        record = existing
        if record is None and lookup:
            record = self.find_one(user_id, item)
        if record is None:
            record = UserProgress(
                user_id=user_id,
                item_type=item.item_type,
                item_id=item.item_id,
                **data
            )
        else:
            for field, value in data.items():
                setattr(record, field, value)
            record.updated_at = datetime.now(timezone.utc)

        self.session.add(record)
        self.session.flush()
        return record

    def run_transaction(self, work: Callable[["ProgressStore"], T]) -> T:
        """
        Run work against this store and commit, or roll back everything on failure.

        Database errors are raised as StoreFailure; any other exception raised by
        work is re-raised unchanged after the rollback.
        """
        try:
            result = work(self)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Progress transaction failed, rolled back: {str(e)}", exc_info=e)
            raise StoreFailure("Failed to persist progress") from e
        except Exception:
            self.session.rollback()
            raise
        return result
