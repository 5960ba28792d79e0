"""Support for Tasmota plug telemetry (voltage, current, power, temperature)."""

from __future__ import annotations

import logging

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import (
    UnitOfElectricCurrent,
    UnitOfElectricPotential,
    UnitOfPower,
    UnitOfTemperature,
)
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .device import PowerPlugDevice
from .entity import TasmotaEntity
from .models import TasmotaRuntimeData
from .properties import TelemetryProperty

_LOGGER = logging.getLogger(__name__)

ENTITY_DESCRIPTIONS: dict[str, SensorEntityDescription] = {
    "voltage": SensorEntityDescription(
        key="voltage",
        name="Voltage",
        device_class=SensorDeviceClass.VOLTAGE,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfElectricPotential.VOLT,
    ),
    "current": SensorEntityDescription(
        key="current",
        name="Current",
        device_class=SensorDeviceClass.CURRENT,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfElectricCurrent.AMPERE,
    ),
    "power": SensorEntityDescription(
        key="power",
        name="Power",
        device_class=SensorDeviceClass.POWER,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfPower.WATT,
    ),
    "temperature": SensorEntityDescription(
        key="temperature",
        name="Temperature",
        device_class=SensorDeviceClass.TEMPERATURE,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=None,  # From the status table
    ),
}

# Unit symbols printed by the web UI.
TEMPERATURE_UNITS = {
    "°C": UnitOfTemperature.CELSIUS,
    "°F": UnitOfTemperature.FAHRENHEIT,
    "C": UnitOfTemperature.CELSIUS,
    "F": UnitOfTemperature.FAHRENHEIT,
}


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up Tasmota sensors from a config entry."""
    data: TasmotaRuntimeData = hass.data[DOMAIN][config_entry.entry_id]
    device = data.device

    if not isinstance(device, PowerPlugDevice):
        return

    async_add_entities(
        TasmotaSensor(device, prop, ENTITY_DESCRIPTIONS[prop.name])
        for prop in device.telemetry_properties
        if prop.name in ENTITY_DESCRIPTIONS
    )


class TasmotaSensor(TasmotaEntity, SensorEntity):
    """Representation of one telemetry value of a Tasmota plug."""

    def __init__(
        self,
        device: PowerPlugDevice,
        prop: TelemetryProperty,
        description: SensorEntityDescription,
    ) -> None:
        super().__init__(device, [prop], prop.name)
        self.entity_description = description
        self._prop = prop

        if description.device_class == SensorDeviceClass.TEMPERATURE:
            self._attr_native_unit_of_measurement = TEMPERATURE_UNITS.get(
                prop.description.unit or "", UnitOfTemperature.CELSIUS
            )

    @property
    def available(self) -> bool:
        return self._prop.value is not None

    @property
    def native_value(self) -> float | None:
        return self._prop.value
