"""Shared test fixtures for Spooly backend tests."""

import os
from collections.abc import AsyncGenerator

import pytest

# IMPORTANT: Set environment variables BEFORE any app imports
# This must happen before settings/config are loaded
os.environ["LOG_TO_FILE"] = "false"
os.environ["DEBUG"] = "false"

from httpx import ASGITransport, AsyncClient  # noqa: E402

from backend.app.core.config import settings  # noqa: E402
from backend.app.core.store import FilamentStore  # noqa: E402

settings.log_to_file = False


@pytest.fixture
def store(tmp_path) -> FilamentStore:
    """A store backed by a throwaway file."""
    return FilamentStore(tmp_path / "filaments.json")


@pytest.fixture
def asgi_transport(store) -> ASGITransport:
    """ASGI transport for the app, with the store swapped for the test one."""
    from backend.app.core.store import get_store
    from backend.app.main import app

    app.dependency_overrides[get_store] = lambda: store
    yield ASGITransport(app=app)
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(asgi_transport) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    async with AsyncClient(transport=asgi_transport, base_url="http://test") as client:
        yield client


# ============================================================================
# Factory Fixtures for Test Data
# ============================================================================


@pytest.fixture
def filament_factory(store):
    """Factory that writes filaments straight into the store, newest first."""

    def _create_filament(**kwargs):
        defaults = {
            "name": "Test PLA",
            "brand": "Generic",
            "material": "PLA",
            "color": "#FF0000",
            "notes": "",
            "copies": 1,
            "startMass": 1000,
            "currentMass": 1000,
        }
        defaults.update(kwargs)

        filaments = store.load_all()
        defaults.setdefault("id", store.next_id(filaments))
        filaments.insert(0, defaults)
        store.save_all(filaments)
        return defaults

    return _create_filament
