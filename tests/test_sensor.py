"""Tests for the Tasmota sensor entity."""

from __future__ import annotations

from homeassistant.components.sensor import SensorDeviceClass, SensorStateClass
from homeassistant.const import (
    UnitOfElectricPotential,
    UnitOfPower,
    UnitOfTemperature,
)

from custom_components.tasmota_http.device import PowerPlugDevice
from custom_components.tasmota_http.models import Features, TelemetryValue
from custom_components.tasmota_http.sensor import (
    ENTITY_DESCRIPTIONS,
    TasmotaSensor,
)


def _make_entity(make_client, sample, name, features=None) -> TasmotaSensor:
    device = PowerPlugDevice(
        make_client(), "192.168.1.60:80", "Heater Plug", sample, [], features
    )
    prop = device.properties[name]
    return TasmotaSensor(device, prop, ENTITY_DESCRIPTIONS[name])


class TestTasmotaSensorProperties:
    """Test sensor entity property delegation."""

    def test_voltage(self, make_client, energy_sample):
        entity = _make_entity(make_client, energy_sample, "voltage")
        assert entity.unique_id == "192.168.1.60:80_voltage"
        assert entity.native_value == 229.0
        assert entity.device_class == SensorDeviceClass.VOLTAGE
        assert entity.state_class == SensorStateClass.MEASUREMENT
        assert entity.native_unit_of_measurement == UnitOfElectricPotential.VOLT

    def test_power(self, make_client, energy_sample):
        entity = _make_entity(make_client, energy_sample, "power")
        assert entity.native_value == 17.0
        assert entity.native_unit_of_measurement == UnitOfPower.WATT

    def test_should_poll_false(self, make_client, energy_sample):
        entity = _make_entity(make_client, energy_sample, "current")
        assert entity.should_poll is False
        assert entity.available is True

    def test_temperature_unit_from_status_table(self, make_client, energy_sample):
        entity = _make_entity(
            make_client,
            energy_sample,
            "temperature",
            Features(temperature_sensor=True),
        )
        assert entity.native_value == 23.4
        assert entity.device_class == SensorDeviceClass.TEMPERATURE
        assert entity.native_unit_of_measurement == UnitOfTemperature.CELSIUS

    def test_fahrenheit(self, make_client):
        sample = {"SHT3X Temperature": TelemetryValue(value=70.1, unit="°F")}
        entity = _make_entity(
            make_client, sample, "temperature", Features(temperature_sensor=True)
        )
        assert entity.native_unit_of_measurement == UnitOfTemperature.FAHRENHEIT

    def test_device_info(self, make_client, energy_sample):
        entity = _make_entity(make_client, energy_sample, "voltage")
        info = entity.device_info
        assert info["manufacturer"] == "Tasmota"
        assert ("tasmota_http", "192.168.1.60:80") in info["identifiers"]
