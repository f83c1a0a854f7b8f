"""
Review scheduling policies.

Two policies exist and are kept under explicit names:

- ``step``: a step function of the success streak (immediate, 1 hour, 24 hours,
  3 days, then 7 days for every streak of 4 or more). Used by single apply.
- ``linear_by_streak``: 60 minutes times the streak for a correct outcome, a
  flat 5 minutes for an incorrect one. Used by batch apply.

Which apply path uses which policy is configured in ``lectio.core.config``.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from lectio.core.exceptions import ValidationError
from lectio.models.enums import SchedulingPolicyName


# Step policy delays, indexed by success streak (streaks above the last index use the last delay)
STEP_DELAYS = [
    timedelta(0),
    timedelta(hours=1),
    timedelta(hours=24),
    timedelta(days=3),
    timedelta(days=7),
]

LINEAR_STEP = timedelta(minutes=60)
INCORRECT_RETRY_DELAY = timedelta(minutes=5)


def next_review_delay(success_streak: int) -> timedelta:
    """
    Delay before an item should be reviewed again under the step policy.

    Args:
        success_streak: Success streak after the observation was applied

    Returns:
        0 for streak <= 0, 1h for 1, 24h for 2, 3 days for 3, 7 days for 4 and above
    """
    if success_streak <= 0:
        return STEP_DELAYS[0]
    return STEP_DELAYS[min(success_streak, len(STEP_DELAYS) - 1)]


def linear_review_delay(success_streak: int, correct: bool) -> timedelta:
    """Delay under the linear-by-streak policy."""
    if not correct:
        return INCORRECT_RETRY_DELAY
    return LINEAR_STEP * max(1, success_streak)


def resolve_policy(policy: Union[str, SchedulingPolicyName]) -> SchedulingPolicyName:
    try:
        return SchedulingPolicyName(policy)
    except ValueError:
        raise ValidationError(f"Unknown scheduling policy: {policy}")


def review_delay(
    policy: Union[str, SchedulingPolicyName],
    success_streak: int,
    correct: bool
) -> timedelta:
    """Dispatch to the named scheduling policy."""
    if resolve_policy(policy) == SchedulingPolicyName.STEP:
        return next_review_delay(success_streak)
    return linear_review_delay(success_streak, correct)


def calculate_next_review_at(
    policy: Union[str, SchedulingPolicyName],
    success_streak: int,
    correct: bool,
    base_time: Optional[datetime] = None
) -> datetime:
    """
    Calculate the next review time.

    Args:
        policy: Scheduling policy name
        success_streak: Success streak after the observation was applied
        correct: Whether the observation was correct
        base_time: Time of the review (defaults to now)

    Returns:
        Datetime before which the item should not be resurfaced
    """
    if base_time is None:
        base_time = datetime.now(timezone.utc)
    return base_time + review_delay(policy, success_streak, correct)
