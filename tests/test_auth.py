"""Test API key handling."""

from datetime import UTC, datetime, timedelta

import pytest
from yarl import URL

from custom_components.ryobi_gdo.exceptions import (
    AuthenticationError,
    MalformedResponseError,
    TransportError,
)

from tests.conftest import TEST_URL_API, load_fixture


def login_calls(mock_aioclient):
    """Return the number of login requests made."""
    return len(mock_aioclient.requests.get(("POST", URL(TEST_URL_API)), []))


async def test_api_key(api_client, mock_api_key, mock_aioclient):
    """Test the API key is fetched and cookies stored."""
    assert await api_client.auth.async_ensure_api_key() == "FakeAPIKey"
    assert api_client.store.api_key == "FakeAPIKey"
    assert api_client.store.cookies["connect.sid"] == "s%3AFakeSession"

    call = mock_aioclient.requests[("POST", URL(TEST_URL_API))][0]
    assert call.kwargs["data"] == {
        "username": "TestUser",
        "password": "FakePassword",
    }
    assert call.kwargs["ssl"] is False


async def test_api_key_reused(api_client, mock_api_key, mock_aioclient):
    """Test a cached key is reused until the cookie expires."""
    await api_client.auth.async_ensure_api_key()
    await api_client.auth.async_ensure_api_key()
    assert login_calls(mock_aioclient) == 1

    api_client.store.cookie_expires = datetime.now(tz=UTC) - timedelta(minutes=1)
    await api_client.auth.async_ensure_api_key()
    assert login_calls(mock_aioclient) == 2


async def test_cookie_sent(api_client, mock_api_key, mock_aioclient):
    """Test stored cookies are sent with the request."""
    api_client.store.cookies["region"] = "us-east"
    await api_client.auth.async_ensure_api_key()

    call = mock_aioclient.requests[("POST", URL(TEST_URL_API))][0]
    assert list(call.kwargs["headers"].values()) == ["region=us-east"]


async def test_api_key_without_expiry(api_client, mock_aioclient):
    """Test a login without cookie expiry logs in every time."""
    mock_aioclient.post(TEST_URL_API, status=200, body=load_fixture("api.json"), repeat=True)
    await api_client.auth.async_ensure_api_key()
    await api_client.auth.async_ensure_api_key()
    assert login_calls(mock_aioclient) == 2


@pytest.mark.parametrize(
    "body",
    [
        load_fixture("api_invalid.json"),
        '{"result": {"auth": {}}}',
        '{"result": {"metaData": {}}}',
        "{}",
        '[{"result": {"auth": {"apiKey": "FakeAPIKey"}}}]',
    ],
)
async def test_api_key_rejected(api_client, mock_aioclient, body):
    """Test rejected logins raise AuthenticationError."""
    mock_aioclient.post(TEST_URL_API, status=200, body=body)
    with pytest.raises(AuthenticationError):
        await api_client.auth.async_ensure_api_key()
    assert api_client.store.api_key is None


async def test_api_key_rejected_payload(api_client, mock_aioclient):
    """Test the raw result is kept for diagnostics."""
    mock_aioclient.post(TEST_URL_API, status=401, body='{"result": "invalid"}')
    with pytest.raises(AuthenticationError) as err:
        await api_client.auth.async_ensure_api_key()
    assert err.value.payload == "invalid"


async def test_api_key_not_json(api_client, mock_aioclient):
    """Test a non JSON reply."""
    mock_aioclient.post(TEST_URL_API, status=500, body="<html>Server Error</html>")
    with pytest.raises(MalformedResponseError):
        await api_client.auth.async_ensure_api_key()


async def test_api_key_timeout(api_client, mock_aioclient):
    """Test a timeout is reported as a transport error."""
    mock_aioclient.post(TEST_URL_API, exception=TimeoutError())
    with pytest.raises(TransportError):
        await api_client.auth.async_ensure_api_key()


async def test_cookie_header_always_sent(api_client, mock_api_key, mock_aioclient):
    """Test the cookie header is sent even before any cookie is stored."""
    await api_client.auth.async_ensure_api_key()

    call = mock_aioclient.requests[("POST", URL(TEST_URL_API))][0]
    assert list(call.kwargs["headers"].values()) == [""]
