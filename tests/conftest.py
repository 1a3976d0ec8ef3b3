"""
Pytest configuration and shared fixtures.

The remote profile service is simulated with `httpx.MockTransport`, so every
test runs the real httpx client stack without touching the network.
"""

import asyncio
import json
import re
from collections import Counter, defaultdict
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio

from adapters.http_client import build_async_client
from adapters.response_cache import InMemoryResponseCache, reset_default_cache
from core.config import AppSettings

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

LOOKUP_PATH = "/v1/usernames/users"
_DETAILS_RE = re.compile(r"/v1/users/(\d+)")
_FRIENDS_RE = re.compile(r"/v1/users/(\d+)/friends")
_GROUPS_RE = re.compile(r"/v1/users/(\d+)/groups/roles")


def details_path(user_id: int) -> str:
    return f"/v1/users/{user_id}"


def friends_path(user_id: int) -> str:
    return f"/v1/users/{user_id}/friends"


def groups_path(user_id: int) -> str:
    return f"/v1/users/{user_id}/groups/roles"


def roblox_timestamp(value: datetime) -> str:
    """Render a datetime the way the users API does (millisecond 'Z')."""
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class FakeRobloxService:
    """In-memory stand-in for the users/friends/groups APIs.

    - `calls` counts requests per path, `call_log` keeps their order.
    - `script(path, ...)` queues responses (status codes, `httpx.Response`
      objects or exceptions to raise) served before the normal behavior.
    - `gate(path)` makes requests to `path` wait until the event is set.
    """

    def __init__(self, now: datetime = NOW):
        self.now = now
        self.users: dict[str, dict] = {}
        self.friends: dict[int, int] = {}
        self.groups: dict[int, int] = {}
        self.calls: Counter = Counter()
        self.call_log: list[str] = []
        self.lookup_bodies: list[dict] = []
        self.scripted: dict[str, list] = defaultdict(list)
        self.gates: dict[str, asyncio.Event] = {}

    def add_user(
        self,
        name: str,
        user_id: int,
        *,
        age_days: float,
        friends: int,
        groups: int,
        display_name: str | None = None,
    ) -> None:
        created = self.now - timedelta(days=age_days)
        self.users[name.lower()] = {
            "id": user_id,
            "name": name,
            "displayName": display_name or name,
            "created": roblox_timestamp(created),
            "isBanned": False,
        }
        self.friends[user_id] = friends
        self.groups[user_id] = groups

    def script(self, path: str, *responses) -> None:
        self.scripted[path].extend(responses)

    def gate(self, path: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[path] = event
        return event

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls[path] += 1
        self.call_log.append(path)

        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()

        if self.scripted[path]:
            item = self.scripted[path].pop(0)
            if isinstance(item, Exception):
                raise item
            if isinstance(item, int):
                return httpx.Response(item, json={"errors": [{"code": 0, "message": "scripted"}]})
            return item

        if path == LOOKUP_PATH:
            body = json.loads(request.content)
            self.lookup_bodies.append(body)
            data = []
            for requested in body.get("usernames", []):
                user = self.users.get(requested.lower())
                if user is not None:
                    data.append(
                        {
                            "requestedUsername": requested,
                            "hasVerifiedBadge": False,
                            "id": user["id"],
                            "name": user["name"],
                            "displayName": user["displayName"],
                        }
                    )
            return httpx.Response(200, json={"data": data})

        match = _FRIENDS_RE.fullmatch(path)
        if match:
            count = self.friends.get(int(match.group(1)), 0)
            return httpx.Response(200, json={"data": [{"id": i} for i in range(count)]})

        match = _GROUPS_RE.fullmatch(path)
        if match:
            count = self.groups.get(int(match.group(1)), 0)
            data = [{"group": {"id": i}, "role": {"rank": 1}} for i in range(count)]
            return httpx.Response(200, json={"data": data})

        match = _DETAILS_RE.fullmatch(path)
        if match:
            user_id = int(match.group(1))
            for user in self.users.values():
                if user["id"] == user_id:
                    return httpx.Response(200, json=user)

        return httpx.Response(404, json={"errors": [{"code": 3, "message": "not found"}]})


class RecordingSleep:
    """Replacement for `asyncio.sleep` that records delays without waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


async def wait_until(predicate, timeout: float = 1.0) -> None:
    """Yield to the event loop until `predicate()` holds."""

    async def _poll():
        while not predicate():
            await asyncio.sleep(0)

    await asyncio.wait_for(_poll(), timeout)


@pytest.fixture(autouse=True)
def _isolated_default_cache():
    reset_default_cache()
    yield
    reset_default_cache()


@pytest.fixture
def settings() -> AppSettings:
    """Settings with defaults only (no .env files)."""
    return AppSettings(_env_file=None)


@pytest.fixture
def fake_service() -> FakeRobloxService:
    service = FakeRobloxService()
    service.add_user("Builderman", 156, age_days=95, friends=25, groups=35)
    service.add_user("NewPlayer", 9001, age_days=10, friends=5, groups=2)
    return service


@pytest.fixture
def cache() -> InMemoryResponseCache:
    return InMemoryResponseCache()


@pytest.fixture
def sleeps() -> RecordingSleep:
    return RecordingSleep()


@pytest_asyncio.fixture
async def client(settings, fake_service):
    transport = httpx.MockTransport(fake_service.handler)
    async with build_async_client(settings, transport=transport) as http_client:
        yield http_client
