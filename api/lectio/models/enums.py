"""
Model enums.
"""
from enum import Enum


class ItemType(str, Enum):
    """Variant tag of a learning item."""
    PARAGRAPH_QUESTION = "PARAGRAPH_QUESTION"  # Comprehension question about a paragraph
    IMPORTANT_WORD = "IMPORTANT_WORD"  # Vocabulary word taken from a paragraph


class ObservationResult(str, Enum):
    """Outcome of a single observation in a batch."""
    CORRECT = "correct"
    INCORRECT = "incorrect"


class SchedulingPolicyName(str, Enum):
    """Named review scheduling policies."""
    STEP = "step"  # 0 / 1h / 24h / 3d / 7d by streak
    LINEAR_BY_STREAK = "linear_by_streak"  # 60min x streak when correct, 5min when incorrect
