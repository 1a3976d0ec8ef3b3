"""
Tests for the threshold policy evaluation.
"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from core.domain.errors import InvalidInputError
from core.domain.models import Profile, Subject, ThresholdPolicy
from core.services.policy_evaluator import evaluate

from conftest import NOW

POLICY = ThresholdPolicy(min_account_age_days=90, min_friends=20, min_groups=30)


def make_profile(age: int = 95, friends: int = 25, groups: int = 35) -> Profile:
    return Profile(
        subject=Subject(id=156, name="Builderman", display_name="Builderman"),
        created_at=NOW - timedelta(days=age),
        account_age_days=age,
        friend_count=friends,
        group_count=groups,
    )


class TestVerdicts:
    def test_all_criteria_pass(self):
        result = evaluate(make_profile(), POLICY)

        assert result.overall_passed is True
        assert all(c.passed for c in result.criteria)
        assert result.subject_name == "Builderman"
        assert result.account_age_days == 95

    def test_all_criteria_fail(self):
        result = evaluate(make_profile(age=10, friends=5, groups=2), POLICY)

        assert result.overall_passed is False
        assert [c.passed for c in result.criteria] == [False, False, False]

    def test_thresholds_are_inclusive(self):
        result = evaluate(make_profile(age=90, friends=20, groups=30), POLICY)

        assert [c.passed for c in result.criteria] == [True, True, True]
        assert result.overall_passed is True

    def test_one_below_threshold_fails(self):
        result = evaluate(make_profile(age=89, friends=19, groups=29), POLICY)
        assert [c.passed for c in result.criteria] == [False, False, False]

    @pytest.mark.parametrize(
        "profile_kwargs, failing",
        [
            ({"age": 89}, "Account Age"),
            ({"friends": 19}, "Friends"),
            ({"groups": 29}, "Groups"),
        ],
    )
    def test_single_failing_criterion_fails_overall(self, profile_kwargs, failing):
        result = evaluate(make_profile(**profile_kwargs), POLICY)

        verdicts = {c.name: c.passed for c in result.criteria}
        assert verdicts.pop(failing) is False
        assert all(verdicts.values())
        assert result.overall_passed is False

    def test_zero_thresholds_accept_empty_accounts(self):
        policy = ThresholdPolicy(min_account_age_days=0, min_friends=0, min_groups=0)
        assert evaluate(make_profile(age=0, friends=0, groups=0), policy).overall_passed is True


class TestContract:
    def test_criteria_order_and_fields(self):
        result = evaluate(make_profile(), POLICY)

        assert [c.name for c in result.criteria] == ["Account Age", "Friends", "Groups"]
        assert [c.unit for c in result.criteria] == ["days", "friends", "groups"]
        assert [(c.measured, c.threshold) for c in result.criteria] == [(95, 90), (25, 20), (35, 30)]

    def test_deterministic(self):
        profile = make_profile(age=91, friends=3, groups=40)
        assert evaluate(profile, POLICY) == evaluate(profile, POLICY)

    def test_result_is_immutable(self):
        result = evaluate(make_profile(), POLICY)
        with pytest.raises(ValidationError):
            result.overall_passed = False

    @pytest.mark.parametrize(
        "profile_kwargs",
        [{"age": -1}, {"friends": -3}, {"groups": -1}],
    )
    def test_negative_metrics_rejected(self, profile_kwargs):
        with pytest.raises(InvalidInputError):
            evaluate(make_profile(**profile_kwargs), POLICY)
