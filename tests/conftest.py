# pylint: disable=protected-access,redefined-outer-name
"""Global fixtures for integration."""
import asyncio
from collections import namedtuple
from datetime import UTC, datetime, timedelta
import json
import os
from unittest.mock import AsyncMock, patch

import aiohttp
from aioresponses import aioresponses
import pytest

from custom_components.ryobi_gdo.api import RyobiApiClient

pytest_plugins = "pytest_homeassistant_custom_component"  # pylint: disable=invalid-name

TEST_URL_API = "https://tti.tiwiconnect.com/api/login"
TEST_URL_DEVICES = "https://tti.tiwiconnect.com/api/devices"
TEST_URL_DEVICE = "https://tti.tiwiconnect.com/api/devices/fakedeviceID02"
TEST_WS_SERVER = "wss://tti.tiwiconnect.com/api/wsrpc"
TEST_COOKIE = (
    "connect.sid=s%3AFakeSession; Path=/; "
    "Expires=Wed, 21 Oct 2037 07:28:00 GMT; HttpOnly"
)

Frame = namedtuple("Frame", ["type", "data", "extra"])


# This fixture enables loading custom integrations in all tests.
# Remove to enable selective use of this fixture
@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    """Automatically enable loading custom integrations in all tests."""
    yield


# This fixture is used to prevent HomeAssistant from attempting to create and dismiss persistent
# notifications. These calls would fail without this fixture since the persistent_notification
# integration is never loaded during a test.
@pytest.fixture(name="skip_notifications", autouse=True)
def skip_notifications_fixture():
    """Skip notification calls."""
    with patch("homeassistant.components.persistent_notification.async_create"), patch(
        "homeassistant.components.persistent_notification.async_dismiss"
    ):
        yield


@pytest.fixture
def mock_aioclient():
    """Fixture to mock aioclient calls."""
    with aioresponses() as m:
        yield m


@pytest.fixture
async def client_session():
    """Return a client session for the API client."""
    async with aiohttp.ClientSession() as http_session:
        yield http_session


@pytest.fixture(name="mock_api_key")
def mock_api_key(mock_aioclient):
    """Mock API call for API key endpoint."""
    mock_aioclient.post(
        TEST_URL_API,
        status=200,
        body=load_fixture("api.json"),
        headers={"Set-Cookie": TEST_COOKIE},
        repeat=True,
    )


@pytest.fixture(name="mock_devices")
def mock_devices(mock_aioclient):
    """Mock API call for the device list endpoint."""
    mock_aioclient.get(
        TEST_URL_DEVICES,
        status=200,
        body=load_fixture("devices.json"),
        repeat=True,
    )


@pytest.fixture(name="mock_device")
def mock_device(mock_aioclient):
    """Mock API call for the device status endpoint."""
    mock_aioclient.get(
        TEST_URL_DEVICE,
        status=200,
        body=load_fixture("device_id_GDO200.json"),
        repeat=True,
    )


@pytest.fixture
def api_client(client_session):
    """Return an API client for the test device."""
    return RyobiApiClient(
        username="TestUser",
        password="FakePassword",
        session=client_session,
        device_id="fakedeviceID02",
    )


@pytest.fixture
def authorized_client(api_client):
    """Return an API client holding a cached API key."""
    api_client.store.api_key = "FakeAPIKey"
    api_client.store.cookie_expires = datetime.now(tz=UTC) + timedelta(hours=1)
    return api_client


class FakeWebSocket:
    """Stand in for aiohttp.ClientWebSocketResponse."""

    def __init__(self, frames=(), answer_ping=True, error=None, hold=False):
        """Initialize with the frames the server will send.

        With hold set, receive waits for push once the frames run out.
        """
        self.hold = hold
        self._pushed = asyncio.Event()
        self.frames = list(frames)
        self.answer_ping = answer_ping
        self.error = error
        self.sent = []
        self.pings = 0
        self.pongs = []
        self.closed = False

    async def send_str(self, data):
        """Record a sent frame."""
        self.sent.append(json.loads(data))

    async def ping(self, message=b""):
        """Queue a pong when the server answers pings."""
        self.pings += 1
        if self.answer_ping:
            self.frames.append(Frame(aiohttp.WSMsgType.PONG, message, None))

    async def pong(self, message=b""):
        """Record a pong sent to the server."""
        self.pongs.append(message)

    async def receive(self):
        """Return the next server frame."""
        while self.hold and not self.frames:
            await self._pushed.wait()
            self._pushed.clear()
        if self.frames:
            return self.frames.pop(0)
        return Frame(aiohttp.WSMsgType.CLOSED, None, None)

    def push(self, frame):
        """Deliver a frame to a waiting receive."""
        self.frames.append(frame)
        self._pushed.set()

    def exception(self):
        """Return the transport error."""
        return self.error

    async def close(self):
        """Close the socket."""
        self.closed = True
        return True


def text_frame(payload):
    """Return a text frame carrying payload."""
    return Frame(aiohttp.WSMsgType.TEXT, json.dumps(payload), None)


@pytest.fixture
def mock_ws():
    """Patch websocket connections to use a FakeWebSocket."""
    fake = FakeWebSocket([text_frame(json.loads(load_fixture("ws_auth_reply.json")))])
    with patch(
        "aiohttp.ClientSession.ws_connect", new=AsyncMock(return_value=fake)
    ) as ws_connect:
        fake.ws_connect = ws_connect
        yield fake


def load_fixture(filename):
    """Load a fixture."""
    path = os.path.join(os.path.dirname(__file__), "fixtures", filename)
    with open(path, encoding="utf-8") as fptr:
        return fptr.read()
