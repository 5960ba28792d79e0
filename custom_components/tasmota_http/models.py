"""Data models for Tasmota devices."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .const import (
    CONF_COLOR_MODE,
    CONF_MULTI_CHANNEL_RELAY,
    CONF_TEMPERATURE_KEY,
    CONF_TEMPERATURE_SENSOR,
    CONF_USE_WHITE_LED,
)

if TYPE_CHECKING:
    from .api import TasmotaClient
    from .device import TasmotaDevice
    from .scheduler import PollScheduler


@dataclass(frozen=True, slots=True)
class TelemetryValue:
    """One row of the web UI status table (value plus unit symbol)."""

    value: float
    unit: str


# Telemetry name -> value, produced per poll cycle.
PollSample = dict[str, TelemetryValue]


@dataclass(frozen=True, slots=True)
class CommandResponse:
    """Outcome of a command sent to the device."""

    status: int
    reason: str | None
    body: dict[str, Any] | None

    @property
    def ok(self) -> bool:
        return self.status == 200


@dataclass(frozen=True, slots=True)
class Features:
    """Feature flags taken from the config entry options."""

    temperature_sensor: bool = False
    multi_channel_relay: bool = False
    use_white_led_in_color_mode: bool = False
    color_mode: bool = False
    temperature_key: str | None = None

    @classmethod
    def from_options(cls, options: dict[str, Any]) -> Features:
        return cls(
            temperature_sensor=options.get(CONF_TEMPERATURE_SENSOR, False),
            multi_channel_relay=options.get(CONF_MULTI_CHANNEL_RELAY, False),
            use_white_led_in_color_mode=options.get(CONF_USE_WHITE_LED, False),
            color_mode=options.get(CONF_COLOR_MODE, False),
            temperature_key=options.get(CONF_TEMPERATURE_KEY) or None,
        )


@dataclass(frozen=True, slots=True)
class PropertyDescription:
    """Static metadata of a device property."""

    semantic_type: str
    value_type: str
    title: str
    description: str | None = None
    unit: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    multiple_of: float | None = None
    enum: tuple[str, ...] | None = None
    read_only: bool = False


@dataclass(slots=True)
class TasmotaRuntimeData:
    """Objects owned by one loaded config entry."""

    client: TasmotaClient
    device: TasmotaDevice
    scheduler: PollScheduler
