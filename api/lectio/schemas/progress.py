"""
Progress schemas.
"""
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StringConstraints
from pydantic.alias_generators import to_camel
from typing import Annotated, Any, Dict, List, Literal, Union
from datetime import datetime

from lectio.models.enums import ItemType, ObservationResult

ItemId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys, accepting either spelling on input."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ProgressResponse(CamelModel):
    """Progress statistics attached to an item."""
    correct_count: int = 0
    wrong_count: int = 0
    knowledge_score: float = 0.0
    success_streak: int = 0
    last_reviewed: datetime
    next_review: datetime


class ProgressRecordResponse(ProgressResponse):
    """A full progress record including its key."""
    user_id: str
    item_type: ItemType
    item_id: str


class ObservationEvent(CamelModel):
    """One observation in a batch. Each event is validated on its own."""
    item_id: ItemId = Field(..., description="Id of the question or word")
    item_type: ItemType = Field(..., description="PARAGRAPH_QUESTION or IMPORTANT_WORD")
    result: ObservationResult = Field(..., description="'correct' or 'incorrect'")
    # Numbers only: numeric strings and booleans are rejected
    timestamp: Union[StrictInt, StrictFloat] = Field(
        ..., description="Client time of the observation, epoch milliseconds"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "itemId": "3f0c2a...",
                "itemType": "IMPORTANT_WORD",
                "result": "correct",
                "timestamp": 1735725600000
            }
        }
    )


class ExerciseSubmitRequest(CamelModel):
    """Single observation submitted for one item."""
    id: ItemId = Field(..., description="Id of the question or word")
    item_type: ItemType = Field(..., description="PARAGRAPH_QUESTION or IMPORTANT_WORD")
    correct: bool = Field(True, description="Outcome, defaults to correct")
    mode: Literal["reading"] = "reading"


class ExerciseSubmitResponse(CamelModel):
    item_type: ItemType
    progress: ProgressResponse


class BatchProgressRequest(BaseModel):
    """Ordered list of observations; malformed entries are dropped individually."""
    events: List[Any] = Field(..., description="Observations in the order they happened")


class BatchProgressResponse(BaseModel):
    progress: Dict[str, ProgressRecordResponse]


class DueProgressResponse(BaseModel):
    progress: List[ProgressRecordResponse]
