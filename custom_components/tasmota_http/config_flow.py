"""Config flow to configure Tasmota devices."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.const import CONF_HOST, CONF_NAME, CONF_PASSWORD, CONF_PORT
from homeassistant.core import callback

from .api import TasmotaClient
from .const import (
    CMD_POWER,
    CONF_COLOR_MODE,
    CONF_DEBUG,
    CONF_MULTI_CHANNEL_RELAY,
    CONF_POLL_INTERVAL,
    CONF_TEMPERATURE_KEY,
    CONF_TEMPERATURE_SENSOR,
    CONF_USE_WHITE_LED,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_PORT,
    DOMAIN,
)
from .exceptions import (
    TasmotaAuthenticationError,
    TasmotaCommandError,
    TasmotaConnectionError,
)

_LOGGER = logging.getLogger(__name__)

DEVICE_SETTINGS = {
    vol.Required(CONF_HOST): str,
    vol.Optional(CONF_PORT, default=DEFAULT_PORT): vol.All(
        vol.Coerce(int), vol.Range(min=1, max=65535)
    ),
    vol.Optional(CONF_PASSWORD, default=""): str,
    vol.Optional(CONF_NAME, default=""): str,
}

FEATURE_FLAGS = (
    CONF_TEMPERATURE_SENSOR,
    CONF_MULTI_CHANNEL_RELAY,
    CONF_USE_WHITE_LED,
    CONF_COLOR_MODE,
)


class TasmotaFlowHandler(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a Tasmota config flow."""

    VERSION = 1
    CONNECTION_CLASS = config_entries.CONN_CLASS_LOCAL_POLL

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Handle a flow initialized by the user to add a device."""
        errors: dict[str, str] = {}

        if user_input is not None:
            host = user_input[CONF_HOST]
            port = user_input.get(CONF_PORT, DEFAULT_PORT)
            password = user_input.get(CONF_PASSWORD, "")

            await self.async_set_unique_id(f"{host}:{port}")
            self._abort_if_unique_id_configured()

            client = TasmotaClient(host=host, port=port, password=password)
            try:
                await client.get_status(CMD_POWER)
            except TasmotaConnectionError:
                errors["base"] = "connect_error"
            except TasmotaAuthenticationError:
                errors["base"] = "auth_error"
            except TasmotaCommandError:
                errors["base"] = "command_error"
            else:
                name = user_input.get(CONF_NAME) or host
                return self.async_create_entry(
                    title=name,
                    data={
                        CONF_HOST: host,
                        CONF_PORT: port,
                        CONF_PASSWORD: password,
                        CONF_NAME: name,
                    },
                )
            finally:
                await client.close()

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(DEVICE_SETTINGS),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> TasmotaOptionsFlow:
        return TasmotaOptionsFlow()


class TasmotaOptionsFlow(config_entries.OptionsFlow):
    """Poll interval and experimental feature flags."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        if user_input is not None:
            return self.async_create_entry(title="", data=user_input)

        options = self.config_entry.options
        schema: dict[Any, Any] = {
            vol.Required(
                CONF_POLL_INTERVAL,
                default=options.get(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL),
            ): vol.All(vol.Coerce(int), vol.Range(min=100)),
        }
        for flag in FEATURE_FLAGS:
            schema[vol.Optional(flag, default=options.get(flag, False))] = bool
        schema[
            vol.Optional(
                CONF_TEMPERATURE_KEY,
                default=options.get(CONF_TEMPERATURE_KEY, ""),
            )
        ] = str
        schema[
            vol.Optional(CONF_DEBUG, default=options.get(CONF_DEBUG, False))
        ] = bool

        return self.async_show_form(
            step_id="init", data_schema=vol.Schema(schema)
        )
