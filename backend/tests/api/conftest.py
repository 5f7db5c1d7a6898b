"""API test specific fixtures."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from xregions.routes import router

ADMIN_TOKEN = "test_admin_token"


@pytest.fixture
def app(store):
    """FastAPI app exposing the admin routes over the test store."""
    app = FastAPI()
    app.include_router(router)
    app.state.xregions_store = store
    app.state.xregions_admin_token = ADMIN_TOKEN
    return app


@pytest.fixture
def test_client(app):
    """Create FastAPI TestClient for API endpoint testing."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def admin_headers():
    return {
        "Authorization": f"Bearer {ADMIN_TOKEN}",
        "Content-Type": "application/json",
    }
