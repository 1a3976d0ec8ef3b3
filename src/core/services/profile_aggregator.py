"""Fan-out aggregation of a subject's metrics.

Three independent calls (details, friends, groups) are started as explicit
tasks, in that order, and joined with `asyncio.gather`:
- the join fails as soon as one call fails (first failure wins);
- sibling tasks are not cancelled: the fetch layer offers no cancellation, so
  they run to completion and the join consumes whatever they raise;
- results are matched to their request by position, never by completion order.
"""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Callable

from adapters import roblox_api
from core.config import AppSettings
from core.domain.models import Profile, RequestKey, Subject
from core.interfaces.fetcher import Fetcher

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def account_age_days(created_at: datetime, now: datetime) -> int:
    """Whole days between `created_at` and `now`, rounded up.

    Rounding up means an account created a fraction of a day ago is one day
    old, never zero.
    """

    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    elapsed = abs((now - created_at).total_seconds())
    return math.ceil(elapsed / SECONDS_PER_DAY)


class ProfileAggregator:
    def __init__(
        self,
        fetcher: Fetcher,
        *,
        settings: AppSettings,
        clock: Clock = utc_now,
    ) -> None:
        self._fetcher = fetcher
        self._settings = settings
        self._clock = clock

    async def aggregate(self, subject_id: int) -> Profile:
        details_task = asyncio.create_task(self._fetch_details(subject_id))
        friends_task = asyncio.create_task(
            self._fetch_count(roblox_api.friends_key(self._settings, subject_id))
        )
        groups_task = asyncio.create_task(
            self._fetch_count(roblox_api.groups_key(self._settings, subject_id))
        )

        (subject, created_at), friend_count, group_count = await asyncio.gather(
            details_task, friends_task, groups_task
        )

        profile = Profile(
            subject=subject,
            created_at=created_at,
            account_age_days=account_age_days(created_at, self._clock()),
            friend_count=friend_count,
            group_count=group_count,
        )
        logger.debug(
            "Aggregated %s: %d days, %d friends, %d groups",
            subject.name,
            profile.account_age_days,
            friend_count,
            group_count,
        )
        return profile

    async def _fetch_details(self, subject_id: int) -> tuple[Subject, datetime]:
        key = roblox_api.user_details_key(self._settings, subject_id)
        payload = await self._fetcher.fetch(key)
        return roblox_api.parse_user_details(key, payload)

    async def _fetch_count(self, key: RequestKey) -> int:
        payload = await self._fetcher.fetch(key)
        return roblox_api.count_entries(key, payload)
