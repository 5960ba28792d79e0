"""Tasmota devices assembled from synchronized properties."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any, Callable

from .api import TasmotaClient
from .capabilities import (
    PropertyKind,
    detect_light_capabilities,
    probe_channels,
)
from .const import (
    DATA_CURRENT,
    DATA_POWER,
    DATA_VOLTAGE,
    SCHEMA_CONTEXT,
    TYPE_LIGHT,
    TYPE_SMART_PLUG,
    TYPE_TEMPERATURE_SENSOR,
)
from .exceptions import TasmotaError
from .models import Features, PollSample
from .properties import (
    BrightnessProperty,
    ColorModeProperty,
    ColorProperty,
    ColorTemperatureProperty,
    OnOffProperty,
    PollingProperty,
    Property,
    TelemetryProperty,
    current_property,
    power_property,
    temperature_property,
    voltage_property,
)
from .telemetry import find_temperature_key

_LOGGER = logging.getLogger(__name__)


class TasmotaDevice:
    """A device exposed to the gateway as a mapping of properties."""

    def __init__(
        self,
        client: TasmotaClient,
        device_id: str,
        name: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.device_id = device_id
        self.name = name
        self.context = SCHEMA_CONTEXT
        self.types: list[str] = []
        self.properties: dict[str, Property] = {}
        self._logger = logger or _LOGGER

    def add_property(self, prop: Property) -> None:
        if prop.name in self.properties:
            raise ValueError(
                f"Duplicate property '{prop.name}' on {self.device_id}"
            )
        self.properties[prop.name] = prop

    def _property_kwargs(self) -> dict[str, Any]:
        return {"device_name": self.name, "logger": self._logger}

    async def poll(self) -> None:
        """Refresh every property once."""
        raise NotImplementedError


# ----------------------------------------------------------------------
#  Lights
# ----------------------------------------------------------------------

_LightBuilder = Callable[[TasmotaClient, Features, dict[str, Any]], PollingProperty]

# Insertion order is the order properties are exposed in.
_LIGHT_BUILDERS: dict[PropertyKind, _LightBuilder] = {
    PropertyKind.ON_OFF: lambda client, _, kw: OnOffProperty(client, **kw),
    PropertyKind.BRIGHTNESS: lambda client, _, kw: BrightnessProperty(
        client, **kw
    ),
    PropertyKind.COLOR_TEMPERATURE: lambda client, _, kw: (
        ColorTemperatureProperty(client, **kw)
    ),
    PropertyKind.COLOR: lambda client, features, kw: ColorProperty(
        client, use_white_led=features.use_white_led_in_color_mode, **kw
    ),
    PropertyKind.COLOR_MODE: lambda client, _, kw: ColorModeProperty(
        client, **kw
    ),
}


class LightDevice(TasmotaDevice):
    """Light built from a set of property kinds.

    ``kinds`` usually is one of the presets in :mod:`.capabilities`
    (dimmable, color temperature, color, color + CT).
    """

    def __init__(
        self,
        client: TasmotaClient,
        device_id: str,
        name: str,
        kinds: Iterable[PropertyKind],
        features: Features | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(client, device_id, name, logger)
        self.types = [TYPE_LIGHT]
        self.kinds = frozenset(kinds)
        if PropertyKind.ON_OFF not in self.kinds:
            raise ValueError(f"Light {device_id} needs an on/off property")

        features = features or Features()
        kwargs = self._property_kwargs()
        for kind, build in _LIGHT_BUILDERS.items():
            if kind in self.kinds:
                self.add_property(build(client, features, kwargs))

    async def poll(self) -> None:
        await asyncio.gather(
            *(prop.poll() for prop in self.properties.values())
        )


# ----------------------------------------------------------------------
#  Power plugs
# ----------------------------------------------------------------------

_TELEMETRY_BUILDERS: tuple[tuple[str, Callable[..., TelemetryProperty]], ...] = (
    (DATA_VOLTAGE, voltage_property),
    (DATA_CURRENT, current_property),
    (DATA_POWER, power_property),
)


class PowerPlugDevice(TasmotaDevice):
    """Relay / power plug with optional energy and temperature telemetry."""

    def __init__(
        self,
        client: TasmotaClient,
        device_id: str,
        name: str,
        sample: PollSample,
        channels: list[int],
        features: Features | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(client, device_id, name, logger)
        self.types = [TYPE_SMART_PLUG]
        features = features or Features()
        kwargs = self._property_kwargs()

        self.on_off_properties: list[OnOffProperty] = []
        if features.multi_channel_relay and channels:
            for channel in channels:
                self._logger.debug("Creating property for channel %s", channel)
                self._add_on_off(
                    OnOffProperty(
                        client,
                        name="on" if channel == 1 else f"on{channel}",
                        title=f"Channel {channel}",
                        channel=f"{channel}",
                        notify_on_change=True,
                        **kwargs,
                    )
                )
        else:
            self._add_on_off(
                OnOffProperty(client, notify_on_change=True, **kwargs)
            )

        self._logger.debug("Parsed data: %s", sample)

        self.telemetry_properties: list[TelemetryProperty] = []
        for key, build in _TELEMETRY_BUILDERS:
            if key in sample:
                self._add_telemetry(build(**kwargs))

        if features.temperature_sensor:
            key = features.temperature_key or find_temperature_key(sample)
            if key is not None and key in sample:
                self._add_telemetry(
                    temperature_property(key, sample[key], **kwargs)
                )
                self.types.append(TYPE_TEMPERATURE_SENSOR)

        self._update_telemetry(sample)

    def _add_on_off(self, prop: OnOffProperty) -> None:
        self.on_off_properties.append(prop)
        self.add_property(prop)

    def _add_telemetry(self, prop: TelemetryProperty) -> None:
        self.telemetry_properties.append(prop)
        self.add_property(prop)

    async def poll(self) -> None:
        await asyncio.gather(
            *(prop.poll() for prop in self.on_off_properties),
            self._poll_telemetry(),
        )

    async def _poll_telemetry(self) -> None:
        if not self.telemetry_properties:
            return
        try:
            sample = await self.client.get_data()
        except TasmotaError:
            return
        self._update_telemetry(sample)

    def _update_telemetry(self, sample: PollSample) -> None:
        for prop in self.telemetry_properties:
            prop.update_from(sample)


# ----------------------------------------------------------------------
#  Factory
# ----------------------------------------------------------------------


async def async_create_device(
    client: TasmotaClient,
    device_id: str,
    name: str,
    features: Features,
    logger: logging.Logger | None = None,
) -> TasmotaDevice:
    """Probe the device and build the matching light or plug."""
    logger = logger or _LOGGER

    kinds = await detect_light_capabilities(
        client, color_mode=features.color_mode, logger=logger
    )
    if kinds:
        logger.debug(
            "Creating light %s with %s",
            device_id,
            sorted(kind.value for kind in kinds),
        )
        return LightDevice(client, device_id, name, kinds, features, logger)

    channels: list[int] = []
    if features.multi_channel_relay:
        channels = await probe_channels(client, logger)

    try:
        sample = await client.get_data()
    except TasmotaError as exc:
        logger.warning(
            "Could not read sensor data of %s, no telemetry: %s",
            device_id,
            exc,
        )
        sample = {}

    return PowerPlugDevice(
        client, device_id, name, sample, channels, features, logger
    )
