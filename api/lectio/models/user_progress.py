"""
UserProgress model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from dataclasses import dataclass
from typing import Optional
from datetime import datetime, timezone

from lectio.models.columns import utc_column, utc_now
from lectio.models.enums import ItemType


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class ItemRef:
    """Reference to one learning item: the variant tag plus the item id of that variant."""
    item_type: ItemType
    item_id: str


class UserProgress(SQLModel, table=True):
    """UserProgress table - aggregate statistics for one (user, item) pair."""
    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "item_type", "item_id", name="uq_user_progress_user_item"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    item_type: ItemType
    # Id of a ParagraphQuestion or an ImportantWord, depending on item_type
    item_id: str = Field(index=True)
    correct_count: int = Field(default=0)
    wrong_count: int = Field(default=0)
    success_streak: int = Field(default=0)
    knowledge_score: float = Field(default=0.0)  # Percent in [0, 100]
    last_reviewed: datetime = Field(default=EPOCH, sa_column=utc_column())
    next_review: datetime = Field(default=EPOCH, sa_column=utc_column(index=True))
    created_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())

    @property
    def item(self) -> ItemRef:
        return ItemRef(item_type=self.item_type, item_id=self.item_id)
