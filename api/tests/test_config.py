import pytest
from pydantic import ValidationError as SettingsError

from lectio.core.config import Settings
from lectio.models.enums import SchedulingPolicyName


def test_policy_defaults():
    settings = Settings()
    assert settings.single_apply_policy == SchedulingPolicyName.STEP
    assert settings.batch_apply_policy == SchedulingPolicyName.LINEAR_BY_STREAK


def test_policy_from_environment(monkeypatch):
    monkeypatch.setenv("SINGLE_APPLY_POLICY", "linear_by_streak")
    assert Settings().single_apply_policy == SchedulingPolicyName.LINEAR_BY_STREAK


def test_unknown_policy_fails_at_startup(monkeypatch):
    monkeypatch.setenv("BATCH_APPLY_POLICY", "fibonacci")
    with pytest.raises(SettingsError):
        Settings()
