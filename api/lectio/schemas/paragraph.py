"""
Paragraph schemas.
"""
from pydantic import Field
from typing import List, Optional
from datetime import datetime

from lectio.schemas.progress import CamelModel, ProgressResponse


class ParagraphQuestionInput(CamelModel):
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    choices: List[str] = Field(default_factory=list)


class ImportantWordInput(CamelModel):
    term: str = Field(..., min_length=1)
    meaning: str = Field(..., min_length=1)
    usage_sentence: str = Field(..., min_length=1)


class CreateParagraphRequest(CamelModel):
    """Request to store a paragraph with its questions and words."""
    title: Optional[str] = None
    theme: Optional[str] = None
    topic: Optional[str] = None
    level: Optional[str] = None
    content: str
    questions: List[ParagraphQuestionInput] = Field(default_factory=list)
    important_words: List[ImportantWordInput] = Field(default_factory=list)


class ParagraphQuestionResponse(CamelModel):
    id: str
    paragraph_id: str
    question: str
    answer: str
    choices: List[str]
    created_at: datetime
    updated_at: datetime
    progress: ProgressResponse


class ImportantWordResponse(CamelModel):
    id: str
    paragraph_id: str
    term: str
    meaning: str
    usage_sentence: str
    created_at: datetime
    updated_at: datetime
    progress: ProgressResponse


class ParagraphResponse(CamelModel):
    """A paragraph with its items, each carrying the caller's progress."""
    id: str
    title: Optional[str] = None
    theme: Optional[str] = None
    topic: Optional[str] = None
    level: Optional[str] = None
    content: str
    created_at: datetime
    updated_at: datetime
    questions: List[ParagraphQuestionResponse]
    important_words: List[ImportantWordResponse]
