import json
import sys
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
import pytest
from fastapi.testclient import TestClient

# Ensure project root on sys.path so 'app' package resolves without an install
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app.main import app  # type: ignore
from app.api import deps  # type: ignore
"""Pytest fixtures and fakes.

The GraphQL endpoint, accounts store and auth provider are replaced by
in-process fakes. Async code is driven with asyncio.run from sync tests.
"""
from app.cache.response_cache import InMemoryResponseCache
from app.models.schemas.accounts import Account, AuthSession, CurrentUser
from app.models.schemas.base import GraphQLResponse
from app.services.blog_queries import BlogQueryService

SUPABASE_URL = "https://project.supabase.test"
ANON_KEY = "anon-key-123"


@pytest.fixture(autouse=True)
def supabase_env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", SUPABASE_URL)
    monkeypatch.setenv("SUPABASE_ANON_KEY", ANON_KEY)
    yield
    app.dependency_overrides.clear()


# ---------- aiohttp-shaped fakes ----------

class FakeResponse:
    def __init__(self, status: int = 200, body=None, *, reason: str = "OK", text: str | None = None):
        self.status = status
        self.reason = reason
        self._text = text if text is not None else json.dumps(body)

    async def text(self):
        return self._text

    async def json(self):
        return json.loads(self._text)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    """Replays scripted responses (or raises scripted exceptions) in order."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls: list[dict] = []

    def _next(self, method: str, url: str, kwargs: dict):
        self.calls.append({"method": method, "url": url, **kwargs})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)

    def get(self, url, **kwargs):
        return self._next("GET", url, kwargs)


class SleepRecorder:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# ---------- GraphQL / collaborator fakes ----------

class FakeBlogBackend:
    """Answers the blog queries/mutation from an in-memory list of published posts.

    ``fail_with`` makes every call raise that exception instead.
    """

    def __init__(self, posts=None, *, fail_with: BaseException | None = None):
        self.posts = list(posts or [])
        self.fail_with = fail_with
        self.calls: list[dict] = []
        self.created: list[dict] = []

    async def request(self, query, variables=None, headers=None, retries=None):
        variables = variables or {}
        self.calls.append({"query": query, "variables": variables, "headers": headers})
        if self.fail_with is not None:
            raise self.fail_with

        if "insertIntoblog_postsCollection" in query:
            now = datetime.now(timezone.utc).isoformat()
            record = {
                "id": str(uuid.uuid4()),
                "title": variables["title"],
                "body": variables["body"],
                "published_at": variables["published_at"],
                "created_at": now,
                "updated_at": now,
                "author_id": variables["author_id"],
            }
            self.created.append(record)
            self.posts.insert(0, record)
            return GraphQLResponse(data={"insertIntoblog_postsCollection": {"records": [record]}})

        if "id" in variables:
            matches = [p for p in self.posts if p["id"] == variables["id"]]
            return GraphQLResponse(data={"blog_postsCollection": {"edges": [{"node": p} for p in matches]}})

        first = variables.get("first", len(self.posts))
        edges = [{"node": p} for p in self.posts[:first]]
        return GraphQLResponse(data={
            "blog_postsCollection": {
                "edges": edges,
                "pageInfo": {"hasNextPage": len(self.posts) > first, "hasPreviousPage": False},
            }
        })

    async def authenticated_request(self, query, token, variables=None):
        return await self.request(query, variables, {"Authorization": f"Bearer {token}"})


class FakeAccountsStore:
    def __init__(self, accounts=None, *, fail_with: BaseException | None = None):
        self.accounts = {a.id: a for a in (accounts or [])}
        self.fail_with = fail_with
        self.calls: list[list[str]] = []

    async def fetch_accounts(self, account_ids):
        ids = list(account_ids)
        self.calls.append(ids)
        if self.fail_with is not None:
            raise self.fail_with
        return [self.accounts[i] for i in ids if i in self.accounts]


class FakeAuthProvider:
    def __init__(self, users_by_token=None):
        self.users_by_token = users_by_token or {}

    async def get_session(self, access_token):
        if not access_token:
            return AuthSession(user=None, access_token=None)
        return AuthSession(user=self.users_by_token.get(access_token), access_token=access_token)


# ---------- Data factory helpers ----------

def make_post_dict(index: int = 0, *, author_id: str | None = None, base: datetime | None = None) -> dict:
    base = base or datetime(2025, 6, 1, tzinfo=timezone.utc)
    published = base - timedelta(hours=index)
    return {
        "id": str(uuid.uuid4()),
        "title": f"Post {index}",
        "body": f"Body of post number {index}.",
        "published_at": published.isoformat(),
        "created_at": published.isoformat(),
        "updated_at": published.isoformat(),
        "author_id": author_id or str(uuid.uuid4()),
    }


@pytest.fixture()
def post_factory():
    """Build ``count`` published posts ordered newest first."""
    def _create(count: int, *, author_id: str | None = None):
        return [make_post_dict(i, author_id=author_id) for i in range(count)]
    return _create


@pytest.fixture()
def author():
    return Account(id=str(uuid.uuid4()), name="Ada Writer", email="ada@example.com")


@pytest.fixture()
def current_user():
    return CurrentUser(id=str(uuid.uuid4()), email="writer@example.com")


@pytest.fixture()
def auth_session(current_user):
    return AuthSession(user=current_user, access_token="user-token")


@pytest.fixture()
def response_cache():
    return InMemoryResponseCache(stale_seconds=60)


@pytest.fixture()
def api_backend(post_factory, author, current_user, response_cache):
    """Wire fakes into the FastAPI dependencies; returns the fakes for assertions."""
    backend = FakeBlogBackend(post_factory(7, author_id=author.id))
    store = FakeAccountsStore([author])
    provider = FakeAuthProvider({"valid-token": current_user})
    sleep = SleepRecorder()

    app.dependency_overrides[deps.get_blog_query_service] = lambda: BlogQueryService(
        response_cache, client=backend, accounts_store=store, sleep=sleep
    )
    app.dependency_overrides[deps.get_auth_provider] = lambda: provider
    return {"backend": backend, "store": store, "provider": provider, "cache": response_cache}


@pytest.fixture()
def client():
    return TestClient(app)
