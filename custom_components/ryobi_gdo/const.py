"""Constants for ryobi_gdo."""

DOMAIN = "ryobi_gdo"
VERSION = "0.5.0"
ATTRIBUTION = "Data provided by Ryobi"
ISSUE_URL = "https://github.com/catduckgnaf/ryobi_gdo/issues"

PLATFORMS = ["cover"]

HOST_URI = "tti.tiwiconnect.com"
LOGIN_ENDPOINT = "api/login"
DEVICE_GET_ENDPOINT = "api/devices"
DEVICE_SET_ENDPOINT = "api/wsrpc"
COORDINATOR = "coordinator"

ATTR_ATTRIBUTION = "attribution"

# Configuration constants
CONF_DEVICE_ID = "device_id"
UPDATE_INTERVAL = 60

# Connection policy defaults, seconds. None waits indefinitely.
REQUEST_TIMEOUT = 10
WS_CONNECT_TIMEOUT = 10
WS_AUTH_TIMEOUT = 15
WS_PONG_TIMEOUT = 15
# Ryobi serves a certificate that does not validate
VERIFY_SSL = False

# Device Model
# deviceTypeIds = "gdoMasterUnit" or "GD125", hubs contain "hub"
DEVICE_TYPE_HUB = "hub"
DEVICE_TYPE_GDO = "gdo"
GARAGE_DOOR_PREFIX = "garageDoor_"

# WSS Messages
WS_AUTH_METHOD = "srvWebSocketAuth"
WS_COMMAND_METHOD = "gdoModuleCommand"
WS_AUTH_ID = 3
WS_MSG_TYPE_COMMAND = 16

# Door commands
DOOR_COMMAND = "doorCommand"
DOOR_OPEN = 1
DOOR_CLOSE = 0
