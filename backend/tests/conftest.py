"""
BrettAppsCode Backend - Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before any app import; each test
       gets its own storage directory and KV stores, wired into the app
       through FastAPI dependency overrides.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── temp_storage:  storage root path that does NOT exist yet
    ├── file_service:  FileService bound to temp_storage
    ├── gateway:       GatewayService with a short timeout
    ├── datasheets / databank: empty KeyValueStores
    └── test_client:   HTTPX AsyncClient over ASGITransport with all of the above
"""

import os
import tempfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="brettappscode_test_")
os.environ["PUBLIC_DIR"] = os.path.join(os.environ["STORAGE_ROOT"], "no-public")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["UPSTREAM_TIMEOUT"] = "5"

from app.services.file_service import FileService, get_file_service  # noqa: E402
from app.services.gateway_service import GatewayService, get_gateway_service  # noqa: E402
from app.services.kv_store import (  # noqa: E402
    KeyValueStore,
    get_databank_store,
    get_datasheet_store,
)


@pytest.fixture
def temp_storage(tmp_path):
    """
    Storage root path inside tmp_path.

    Not created: FileService must cope with an absent root.
    """
    return tmp_path / "uploads"


@pytest.fixture
def file_service(temp_storage):
    return FileService(storage_root=str(temp_storage))


@pytest.fixture
def gateway():
    return GatewayService(timeout=5.0)


@pytest.fixture
def datasheets():
    return KeyValueStore("datasheet", missing_message="Data sheet not found")


@pytest.fixture
def databank():
    return KeyValueStore("databank", missing_message="Key not found")


@pytest_asyncio.fixture
async def test_client(file_service, gateway, datasheets, databank):
    """
    Async HTTP client talking straight to the ASGI app.

    Usage:
        async def test_files(test_client):
            response = await test_client.get("/api/files")
            assert response.status_code == 200
    """
    from app.main import app

    app.dependency_overrides[get_file_service] = lambda: file_service
    app.dependency_overrides[get_gateway_service] = lambda: gateway
    app.dependency_overrides[get_datasheet_store] = lambda: datasheets
    app.dependency_overrides[get_databank_store] = lambda: databank

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
