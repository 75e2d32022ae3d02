import httpx
import pytest
from fastapi.testclient import TestClient

from github_searcher.config import Settings
from github_searcher.datasources.github_adapter import GitHubAdapter
from github_searcher.db import create_db_engine, create_session_factory, init_db
from github_searcher.main import create_app
from github_searcher.services.store import RepositoryStore


def github_item(
    id=1,
    name="x",
    stars=50,
    forks=5,
    login="o",
    language="Java",
    updated_at="2024-05-01T12:00:00Z",
    **extra,
):
    """Build one item the way the GitHub search API returns it."""
    item = {
        "id": id,
        "node_id": f"R_{id}",
        "name": name,
        "full_name": f"{login}/{name}",
        "owner": {"login": login, "id": 99, "type": "User"} if login is not None else None,
        "language": language,
        "stargazers_count": stars,
        "forks_count": forks,
        "updated_at": updated_at,
        "html_url": f"https://github.com/{login}/{name}",
    }
    item.update(extra)
    return item


class GitHubStub:
    """Records every request and answers with the configured status/payload."""

    def __init__(self):
        self.requests = []
        self.status = 200
        self.payload = {"total_count": 0, "incomplete_results": False, "items": []}

    def respond_with(self, items=None, status=200, payload=None):
        self.status = status
        if payload is not None:
            self.payload = payload
        else:
            items = items or []
            self.payload = {"total_count": len(items), "incomplete_results": False, "items": items}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json=self.payload)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path}/test.db",
        GITHUB_BASE_URL="https://api.github.test",
        GITHUB_TOKEN="test-token",
    )


@pytest.fixture
def github_stub():
    return GitHubStub()


@pytest.fixture
def adapter(settings, github_stub):
    return GitHubAdapter(settings, transport=httpx.MockTransport(github_stub))


@pytest.fixture
def client(settings, adapter):
    """Test client whose GitHub calls go to ``github_stub``."""
    app = create_app(settings, github=adapter)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session_factory(settings):
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    """A database session for direct DB access in tests"""
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def store(db_session):
    return RepositoryStore(db_session)
