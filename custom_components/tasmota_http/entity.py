"""Base entity for the Tasmota HTTP integration."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity import Entity

from .const import DOMAIN
from .device import TasmotaDevice
from .properties import Property


class TasmotaEntity(Entity):
    """Base class for all Tasmota entities.

    Provides shared plumbing: unique_id, device_info, should_poll (False;
    the integration's poll scheduler drives updates) and property listener
    registration.
    """

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(
        self,
        device: TasmotaDevice,
        properties: Iterable[Property],
        key: str | None = None,
    ) -> None:
        """Initialise the entity."""
        self._device = device
        self._watched = list(properties)
        self._attr_unique_id = (
            f"{device.device_id}_{key}" if key else device.device_id
        )

    async def async_added_to_hass(self) -> None:
        for prop in self._watched:
            self.async_on_remove(
                prop.add_listener(self._handle_property_update)
            )

    @callback
    def _handle_property_update(self, prop: Property, value: Any) -> None:
        self.async_write_ha_state()

    @property
    def device_info(self) -> DeviceInfo:
        client = self._device.client
        return DeviceInfo(
            identifiers={(DOMAIN, self._device.device_id)},
            name=self._device.name,
            manufacturer="Tasmota",
            model=", ".join(self._device.types),
            configuration_url=f"http://{client.host}:{client.port}/",
        )
