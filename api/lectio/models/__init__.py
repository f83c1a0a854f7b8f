"""
Models package - imports all models so SQLModel registers their tables.
"""
from lectio.models.enums import ItemType, ObservationResult, SchedulingPolicyName
from lectio.models.paragraph import Paragraph, ParagraphQuestion, ImportantWord
from lectio.models.user_progress import UserProgress, ItemRef, EPOCH

__all__ = [
    'ItemType',
    'ObservationResult',
    'SchedulingPolicyName',
    'Paragraph',
    'ParagraphQuestion',
    'ImportantWord',
    'UserProgress',
    'ItemRef',
    'EPOCH',
]
