r"""Unit tests for the retry checkers."""

from __future__ import annotations

import httpx
import pytest

from reqctl.retry import RETRY_STATUS_CODES, default_retry_checker, retry_on_status

###########################################
#     Tests for default_retry_checker     #
###########################################


@pytest.mark.parametrize("status_code", [200, 204, 404, 500, 503])
def test_default_retry_checker_accepts_any_response(status_code: int) -> None:
    """Test that a response is a success whatever its status code."""
    assert not default_retry_checker(httpx.Response(status_code), None)


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("Connection refused"),
        httpx.ReadTimeout("read timed out"),
        TimeoutError(),
    ],
)
def test_default_retry_checker_rejects_errors(error: Exception) -> None:
    assert default_retry_checker(None, error)


#####################################
#     Tests for retry_on_status     #
#####################################


def test_retry_status_codes() -> None:
    assert RETRY_STATUS_CODES == (429, 500, 502, 503, 504)


@pytest.mark.parametrize("status_code", RETRY_STATUS_CODES)
def test_retry_on_status_default_codes(status_code: int) -> None:
    assert retry_on_status()(httpx.Response(status_code), None)


@pytest.mark.parametrize("status_code", [200, 201, 400, 404])
def test_retry_on_status_default_codes_accepts(status_code: int) -> None:
    assert not retry_on_status()(httpx.Response(status_code), None)


def test_retry_on_status_custom_codes() -> None:
    checker = retry_on_status(404)
    assert checker(httpx.Response(404), None)
    assert not checker(httpx.Response(500), None)


def test_retry_on_status_rejects_errors() -> None:
    checker = retry_on_status(503)
    assert checker(None, httpx.ConnectError("Connection refused"))
