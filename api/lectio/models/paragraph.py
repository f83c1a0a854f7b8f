"""
Paragraph, ParagraphQuestion and ImportantWord models (the item catalog).
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import Optional, List
from datetime import datetime
import uuid

from lectio.models.columns import utc_column, utc_now


def _new_id() -> str:
    return uuid.uuid4().hex


class Paragraph(SQLModel, table=True):
    """Paragraph table - a generated reading text."""
    __tablename__ = "paragraph"

    id: str = Field(default_factory=_new_id, primary_key=True)
    title: Optional[str] = None
    theme: Optional[str] = Field(default=None, index=True)
    topic: Optional[str] = None
    level: Optional[str] = Field(default=None, index=True)  # CEFR level, e.g. "A1"
    content: str
    created_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())

    # Relationships
    questions: List["ParagraphQuestion"] = Relationship(back_populates="paragraph")
    important_words: List["ImportantWord"] = Relationship(back_populates="paragraph")


class ParagraphQuestion(SQLModel, table=True):
    """ParagraphQuestion table - comprehension question about a paragraph."""
    __tablename__ = "paragraph_question"

    id: str = Field(default_factory=_new_id, primary_key=True)
    paragraph_id: str = Field(foreign_key="paragraph.id", index=True)
    question: str
    answer: str
    choices: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())

    paragraph: "Paragraph" = Relationship(back_populates="questions")


class ImportantWord(SQLModel, table=True):
    """ImportantWord table - vocabulary word taken from a paragraph."""
    __tablename__ = "important_word"

    id: str = Field(default_factory=_new_id, primary_key=True)
    paragraph_id: str = Field(foreign_key="paragraph.id", index=True)
    term: str
    meaning: str
    usage_sentence: str
    created_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=utc_column())

    paragraph: "Paragraph" = Relationship(back_populates="important_words")
