import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure repo root is importable when running without an install
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from auth.jwt import get_current_member  # noqa: E402
from core.settings import AuthSettings, FileItemSettings, Settings, StorageSettings  # noqa: E402
from fakes import CountingItemTaskManager, FakeObjectStore  # noqa: E402
from items.models import Member  # noqa: E402
from main import create_app  # noqa: E402
from providers.factory import build_providers  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage=StorageSettings(
            provider="s3",
            region="us-east-1",
            bucket="test-bucket",
            access_key_id="test",
            secret_access_key="test",
            upload_expiration_seconds=60,
        ),
        file_item=FileItemSettings(filename_truncate_limit=100),
        auth=AuthSettings(issuer="", jwks_url="", audience=""),
    )


@pytest.fixture
def member() -> Member:
    return Member(id="member-1", name="Alice")


@pytest.fixture
def fake_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def items() -> CountingItemTaskManager:
    return CountingItemTaskManager()


@pytest.fixture
def providers(settings, fake_store, items):
    return build_providers(settings=settings, storage=fake_store, items=items)


@pytest.fixture
def client(providers, member):
    app = create_app(providers)
    app.dependency_overrides[get_current_member] = lambda: member
    with TestClient(app) as c:
        yield c
