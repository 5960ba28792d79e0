"""Tests for the web UI status table parser."""

from __future__ import annotations

from custom_components.tasmota_http.models import TelemetryValue
from custom_components.tasmota_http.telemetry import (
    find_temperature_key,
    parse_telemetry,
)

CLASSIC_TABLE = (
    "{t}{s}Voltage{m}229 V{e}"
    "{s}Current{m}0.128 A{e}"
    "{s}Power{m}17 W{e}"
    "{s}AM2301 Temperature{m}22.3&deg;C{e}"
    "</table>{t}<tr><td style='width:100%'>ON</td></tr></table>"
)

SPLIT_TABLE = (
    "{s}Voltage{m}</td><td style='text-align:left'>231</td>"
    "<td>&nbsp;</td><td>V{e}"
)


class TestParseTelemetry:
    """Test parse_telemetry."""

    def test_classic_rows(self):
        sample = parse_telemetry(CLASSIC_TABLE)
        assert sample == {
            "Voltage": TelemetryValue(value=229.0, unit="V"),
            "Current": TelemetryValue(value=0.128, unit="A"),
            "Power": TelemetryValue(value=17.0, unit="W"),
            "AM2301 Temperature": TelemetryValue(value=22.3, unit="°C"),
        }

    def test_value_and_unit_in_separate_cells(self):
        sample = parse_telemetry(SPLIT_TABLE)
        assert sample == {"Voltage": TelemetryValue(value=231.0, unit="V")}

    def test_non_numeric_rows_skipped(self):
        sample = parse_telemetry("{s}Status{m}ON{e}{s}Power{m}3 W{e}")
        assert list(sample) == ["Power"]

    def test_negative_value(self):
        sample = parse_telemetry("{s}Outdoor Temperature{m}-4.5 °C{e}")
        assert sample["Outdoor Temperature"].value == -4.5

    def test_first_duplicate_wins(self):
        sample = parse_telemetry("{s}Power{m}3 W{e}{s}Power{m}9 W{e}")
        assert sample["Power"].value == 3.0

    def test_value_without_unit(self):
        sample = parse_telemetry("{s}Factor{m}0.95{e}")
        assert sample["Factor"] == TelemetryValue(value=0.95, unit="")

    def test_empty_page(self):
        assert parse_telemetry("") == {}


class TestFindTemperatureKey:
    """Test find_temperature_key."""

    def test_finds_sensor_row(self):
        sample = parse_telemetry(CLASSIC_TABLE)
        assert find_temperature_key(sample) == "AM2301 Temperature"

    def test_none_without_temperature(self):
        sample = {"Power": TelemetryValue(value=1.0, unit="W")}
        assert find_temperature_key(sample) is None
