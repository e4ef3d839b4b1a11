from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

if TYPE_CHECKING:
    from collections.abc import Generator

TEST_URL = "https://api.example.com/data"


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def request_template() -> httpx.Request:
    """Create the request sent by the controller under test."""
    return httpx.Request("GET", TEST_URL)


@pytest.fixture
def mock_response() -> httpx.Response:
    """Create a mock httpx.Response for testing."""
    return Mock(spec=httpx.Response, status_code=200)


@pytest.fixture
def mock_response_fail() -> httpx.Response:
    """Create a mock httpx.Response with a server error status."""
    return Mock(spec=httpx.Response, status_code=500)


@pytest.fixture
def mock_async_client(mock_response: httpx.Response) -> httpx.AsyncClient:
    """Create a mock httpx.AsyncClient whose send returns
    ``mock_response``."""
    return Mock(
        spec=httpx.AsyncClient,
        send=AsyncMock(return_value=mock_response),
        aclose=AsyncMock(),
    )


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks."""
    return Mock()
