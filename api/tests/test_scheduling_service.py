from datetime import datetime, timedelta, timezone

import pytest

from lectio.core.exceptions import ValidationError
from lectio.models.enums import SchedulingPolicyName
from lectio.services.scheduling_service import (
    calculate_next_review_at,
    linear_review_delay,
    next_review_delay,
    review_delay,
)


@pytest.mark.parametrize(
    "streak, expected",
    [
        (-1, timedelta(0)),
        (0, timedelta(0)),
        (1, timedelta(hours=1)),
        (2, timedelta(hours=24)),
        (3, timedelta(days=3)),
        (4, timedelta(days=7)),
        (25, timedelta(days=7)),
    ],
)
def test_step_policy_breakpoints(streak, expected):
    assert next_review_delay(streak) == expected


@pytest.mark.parametrize(
    "streak, correct, expected",
    [
        (1, True, timedelta(minutes=60)),
        (2, True, timedelta(minutes=120)),
        (5, True, timedelta(minutes=300)),
        (0, True, timedelta(minutes=60)),
        (0, False, timedelta(minutes=5)),
        (7, False, timedelta(minutes=5)),
    ],
)
def test_linear_policy(streak, correct, expected):
    assert linear_review_delay(streak, correct) == expected


def test_review_delay_dispatches_by_name():
    assert review_delay("step", 3, True) == timedelta(days=3)
    assert review_delay(SchedulingPolicyName.LINEAR_BY_STREAK, 3, True) == timedelta(hours=3)


def test_unknown_policy_is_rejected():
    with pytest.raises(ValidationError):
        review_delay("fibonacci", 1, True)


def test_next_review_never_before_base_time():
    base = datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc)
    for streak in range(0, 6):
        for correct in (True, False):
            for policy in SchedulingPolicyName:
                assert calculate_next_review_at(policy, streak, correct, base_time=base) >= base
