"""Adds config flow for Ryobi GDO."""

from __future__ import annotations

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.helpers import selector
from homeassistant.helpers.aiohttp_client import async_get_clientsession
import homeassistant.helpers.config_validation as cv

from .api import RyobiApiClient
from .const import CONF_DEVICE_ID, DOMAIN
from .exceptions import RyobiError, TransportError

CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)


class RyobiFlowHandler(config_entries.ConfigFlow, domain=DOMAIN):
    """Config flow for Ryobi GDO."""

    VERSION = 1
    CONNECTION_CLASS = config_entries.CONN_CLASS_CLOUD_POLL

    def __init__(self) -> None:
        """Initialize."""
        self._data = {}
        self._client: RyobiApiClient | None = None

    async def async_step_user(
        self,
        user_input: dict | None = None,
    ) -> config_entries.ConfigFlowResult:
        """Handle a flow initialized by the user."""
        errors = {}
        if user_input is not None:
            self._client = RyobiApiClient(
                username=user_input[CONF_USERNAME],
                password=user_input[CONF_PASSWORD],
                session=async_get_clientsession(self.hass),
            )
            try:
                result = await self._client.async_check_credentials()
            except TransportError:
                errors["base"] = "Unable to connect to the Ryobi servers."
            except RyobiError:
                errors["base"] = "Unexpected reply from the Ryobi servers."
            else:
                if not result:
                    errors["base"] = (
                        "Authentication failed. Please check your credentials."
                    )
                else:
                    self._data.update(user_input)
                    return await self.async_step_user_2()

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_USERNAME,
                        default=(user_input or {}).get(CONF_USERNAME),
                    ): selector.TextSelector(
                        selector.TextSelectorConfig(
                            type=selector.TextSelectorType.TEXT
                        ),
                    ),
                    vol.Required(CONF_PASSWORD): selector.TextSelector(
                        selector.TextSelectorConfig(
                            type=selector.TextSelectorType.PASSWORD
                        ),
                    ),
                }
            ),
            errors=errors,
        )

    async def async_step_user_2(
        self,
        user_input: dict | None = None,
    ) -> config_entries.ConfigFlowResult:
        """Let the user pick the garage door opener."""
        errors = {}
        if user_input is not None:
            self._data.update(user_input)
            await self.async_set_unique_id(user_input[CONF_DEVICE_ID])
            self._abort_if_unique_id_configured()
            return self.async_create_entry(
                title=self._data[CONF_USERNAME],
                data=self._data,
            )
        client = self._client or RyobiApiClient(
            username=self._data[CONF_USERNAME],
            password=self._data[CONF_PASSWORD],
            session=async_get_clientsession(self.hass),
        )
        device_list = await self._get_device_ids(client)
        if not device_list:
            return self.async_abort(reason="no_devices_found")
        return self.async_show_form(
            step_id="user_2",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_DEVICE_ID): vol.In(device_list),
                }
            ),
            errors=errors,
        )

    async def _get_device_ids(self, client: RyobiApiClient) -> dict[str, str]:
        """Return garage door openers by device id."""
        try:
            devices = await client.async_get_devices()
        except RyobiError:
            return {}
        return client.door_openers(devices)
