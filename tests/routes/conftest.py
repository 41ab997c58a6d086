"""App-level fixtures: the real app factory wired to the in-memory GitHub."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import patch

import httpx
import pytest
from fastapi.testclient import TestClient

from tenkai.app import create_app
from tenkai.config import Settings


@pytest.fixture
def client(settings: Settings, http: httpx.AsyncClient) -> Iterator[TestClient]:
    with (
        patch("tenkai.app.load_settings", return_value=settings),
        patch("tenkai.app.configure_logging"),
        patch("tenkai.app.init_http_client", return_value=http),
    ):
        app = create_app()
        with TestClient(app) as test_client:
            yield test_client
