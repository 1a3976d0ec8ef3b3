"""Threshold policy evaluation.

Pure and deterministic: the same (profile, policy) always yields the same
`VerificationResult`. No I/O.
"""

from __future__ import annotations

from core.domain.errors import InvalidInputError
from core.domain.models import CriterionResult, Profile, ThresholdPolicy, VerificationResult


def _criterion(name: str, measured: int, threshold: int, unit: str) -> CriterionResult:
    # Inclusive lower bound: reaching the threshold exactly passes.
    return CriterionResult(
        name=name,
        measured=measured,
        threshold=threshold,
        passed=measured >= threshold,
        unit=unit,
    )


def evaluate(profile: Profile, policy: ThresholdPolicy) -> VerificationResult:
    """Compare each metric against its threshold.

    Criteria order is part of the contract (consumers render in this order):
    account age, friends, groups. `overall_passed` is the AND of all of them.

    Raises:
        InvalidInputError: a metric is negative (indicates an aggregation bug).
    """

    metrics = {
        "account_age_days": profile.account_age_days,
        "friend_count": profile.friend_count,
        "group_count": profile.group_count,
    }
    negative = {name: value for name, value in metrics.items() if value < 0}
    if negative:
        raise InvalidInputError(f"Negative metrics for {profile.subject.name}: {negative}")

    criteria = (
        _criterion("Account Age", profile.account_age_days, policy.min_account_age_days, "days"),
        _criterion("Friends", profile.friend_count, policy.min_friends, "friends"),
        _criterion("Groups", profile.group_count, policy.min_groups, "groups"),
    )

    return VerificationResult(
        subject_name=profile.subject.name,
        account_age_days=profile.account_age_days,
        criteria=criteria,
        overall_passed=all(c.passed for c in criteria),
    )
