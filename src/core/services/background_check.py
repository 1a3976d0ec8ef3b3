"""Background check orchestration.

This module composes the three stages (identity resolution, profile
aggregation, policy evaluation) behind a single entry point, so front ends
(CLI, chat bots, batch jobs, tests) never deal with HTTP clients, caches or
retries themselves.

Failure policy:
- A failure at any stage yields no result; the typed error propagates with
  its own type and carries the subject name (`error.subject_name`).
- Retries happen inside the fetch layer and the resolver only.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

import httpx

from adapters.fetch_client import FetchClient, SleepFn
from adapters.http_client import build_async_client
from adapters.identity_resolver import IdentityResolver
from adapters.response_cache import default_cache
from core.config import AppSettings
from core.domain.errors import BackgroundCheckError
from core.domain.models import CheckOutcome, ThresholdPolicy, VerificationResult
from core.interfaces.cache import ResponseCache
from core.services.policy_evaluator import evaluate
from core.services.profile_aggregator import Clock, ProfileAggregator, utc_now

logger = logging.getLogger(__name__)


class BackgroundCheckService:
    """Resolver -> Aggregator -> Evaluator."""

    def __init__(
        self,
        *,
        resolver: IdentityResolver,
        aggregator: ProfileAggregator,
        policy: ThresholdPolicy,
    ) -> None:
        self._resolver = resolver
        self._aggregator = aggregator
        self._policy = policy

    @classmethod
    def build(
        cls,
        *,
        settings: AppSettings,
        client: httpx.AsyncClient,
        cache: ResponseCache,
        sleep: SleepFn = asyncio.sleep,
        clock: Clock = utc_now,
    ) -> "BackgroundCheckService":
        fetcher = FetchClient.from_settings(settings, client=client, cache=cache, sleep=sleep)
        return cls(
            resolver=IdentityResolver.from_settings(settings, client=client, sleep=sleep),
            aggregator=ProfileAggregator(fetcher, settings=settings, clock=clock),
            policy=settings.threshold_policy(),
        )

    async def run(self, name: str) -> VerificationResult:
        logger.info("Running background check for %s...", name)
        try:
            subject_id = await self._resolver.resolve_id(name)
            profile = await self._aggregator.aggregate(subject_id)
            result = evaluate(profile, self._policy)
        except BackgroundCheckError as exc:
            if exc.subject_name is None:
                exc.subject_name = name
            logger.error("Error checking %s: %s", name, exc)
            raise

        logger.info(
            "Background check complete for %s: %s",
            name,
            "PASSED" if result.overall_passed else "FAILED",
        )
        return result

    async def run_many(self, names: Sequence[str]) -> list[CheckOutcome]:
        """Run one check per name concurrently; failures stay per name."""

        async def one(name: str) -> CheckOutcome:
            try:
                return CheckOutcome(name=name, result=await self.run(name))
            except BackgroundCheckError as exc:
                return CheckOutcome(name=name, error=exc)

        return list(await asyncio.gather(*(one(name) for name in names)))


@asynccontextmanager
async def _open_service(
    settings: AppSettings,
    cache: ResponseCache | None,
    client: httpx.AsyncClient | None,
) -> AsyncIterator[BackgroundCheckService]:
    # Without an explicit cache the process-wide one is used, so repeated
    # checks within one process never re-fetch the same metrics.
    cache = cache if cache is not None else default_cache()

    if client is not None:
        yield BackgroundCheckService.build(settings=settings, client=client, cache=cache)
        return

    async with build_async_client(settings) as owned_client:
        yield BackgroundCheckService.build(settings=settings, client=owned_client, cache=cache)


async def run_background_check(
    name: str,
    *,
    settings: AppSettings | None = None,
    cache: ResponseCache | None = None,
    client: httpx.AsyncClient | None = None,
) -> VerificationResult:
    """Check one subject by name."""

    async with _open_service(settings or AppSettings(), cache, client) as service:
        return await service.run(name)


async def run_background_checks(
    names: Sequence[str],
    *,
    settings: AppSettings | None = None,
    cache: ResponseCache | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[CheckOutcome]:
    """Check several subjects concurrently over one client and one cache."""

    async with _open_service(settings or AppSettings(), cache, client) as service:
        return await service.run_many(names)
