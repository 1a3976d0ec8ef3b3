"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (`Field`) without coupling the
  Core to I/O libraries.
- Every record is frozen: each stage owns its output until it hands it to the
  next one, nobody mutates it afterwards.

Note:
- These models describe *what* the information is, not *how* it is fetched.
"""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlencode

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.errors import BackgroundCheckError


class RequestKey(BaseModel):
    """Canonical identity of an idempotent, read-only remote call.

    Used as the cache key by the fetch layer. Parameter order never changes the
    identity: `canonical` sorts them.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1, description="Absolute endpoint URL.")
    params: tuple[tuple[str, str], ...] = Field(
        default=(),
        description="Query parameters as (name, value) pairs.",
    )

    @property
    def canonical(self) -> str:
        if not self.params:
            return self.url
        return f"{self.url}?{urlencode(sorted(self.params))}"

    def __str__(self) -> str:
        return self.canonical


class Subject(BaseModel):
    """The account being evaluated."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Numeric account id.")
    name: str = Field(..., min_length=1, description="Canonical username.")
    display_name: str = Field(..., min_length=1, description="Public display name.")


class Profile(BaseModel):
    """Metrics of a subject, derived entirely from upstream responses.

    Counts are not constrained here: the evaluator rejects negative values with
    its own error so a faulty aggregation is reported as an internal failure.
    """

    model_config = ConfigDict(frozen=True)

    subject: Subject
    created_at: datetime = Field(..., description="Account creation timestamp (UTC).")
    account_age_days: int = Field(..., description="Whole days since creation, rounded up.")
    friend_count: int
    group_count: int


class ThresholdPolicy(BaseModel):
    """Minimum values a subject must reach to pass the check."""

    model_config = ConfigDict(frozen=True)

    min_account_age_days: int = Field(default=90, ge=0)
    min_friends: int = Field(default=20, ge=0)
    min_groups: int = Field(default=30, ge=0)


class CriterionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    measured: int
    threshold: int
    passed: bool
    unit: str = Field(..., description="Presentation label for `measured` (days, friends...).")


class VerificationResult(BaseModel):
    """Verdict of one background check.

    `criteria` keeps the presentation order: account age, friends, groups.
    """

    model_config = ConfigDict(frozen=True)

    subject_name: str
    account_age_days: int
    criteria: tuple[CriterionResult, ...]
    overall_passed: bool


class CheckOutcome(BaseModel):
    """Result of one name in a batch: either `result` or `error` is set."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    result: VerificationResult | None = None
    error: BackgroundCheckError | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None
