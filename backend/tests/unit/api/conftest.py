"""Fixtures for API route tests.

Routes run against the in-memory BookingService from the top-level
conftest via FastAPI dependency overrides.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client(booking_service) -> Generator[TestClient, None, None]:
    """TestClient with the booking service overridden."""
    from booking_api.dependencies import get_booking_service
    from booking_api.main import app

    app.dependency_overrides[get_booking_service] = lambda: booking_service
    yield TestClient(app)
    app.dependency_overrides.clear()
