"""Property synchronization for Tasmota devices.

Each property owns a cached value that mirrors one field of the device's
command endpoint:

* ``poll()`` queries the device, normalizes the answer and updates the cache.
  Transport errors skip the cycle (the client has already logged them) and
  fields missing from the answer count as "no new data".
* ``write()`` caches the requested value immediately, sends the command and
  only logs problems. The optimistic value is never rolled back.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable

from .api import TasmotaClient
from .const import (
    BLACK,
    CMD_COLOR,
    CMD_CT,
    CMD_DIMMER,
    CMD_POWER,
    COLOR_MODE_COLOR,
    COLOR_MODE_TEMPERATURE,
    MAX_KELVIN,
    MIN_KELVIN,
    STATE_OFF,
    STATE_ON,
)
from .conversion import kelvin_to_tasmota, tasmota_to_kelvin
from .exceptions import TasmotaError
from .models import PollSample, PropertyDescription, TelemetryValue

_LOGGER = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^[0-9A-Fa-f]+$")

Listener = Callable[["Property", Any], None]


class Property:
    """A named, cached device value with change listeners."""

    def __init__(
        self,
        name: str,
        description: PropertyDescription,
        *,
        device_name: str = "",
        logger: logging.Logger | None = None,
    ) -> None:
        self.name = name
        self.description = description
        self._device_name = device_name
        self._logger = logger or _LOGGER
        self._value: Any = None
        self._listeners: list[Listener] = []

    @property
    def value(self) -> Any:
        """Last known good value (``None`` until the first update)."""
        return self._value

    @property
    def title(self) -> str:
        return self.description.title

    @property
    def read_only(self) -> bool:
        return self.description.read_only

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener(property, value)``; returns an unsubscribe."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def set_cached_value(self, value: Any) -> None:
        self._value = value

    def set_cached_value_and_notify(self, value: Any) -> None:
        self._value = value
        for listener in list(self._listeners):
            listener(self, value)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}={self._value!r}>"


class PollingProperty(Property):
    """Property refreshed by querying one command of the device."""

    command: str

    def __init__(
        self,
        client: TasmotaClient,
        name: str,
        description: PropertyDescription,
        command: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, description, **kwargs)
        self._client = client
        self.command = command

    async def poll(self) -> None:
        try:
            result = await self._client.get_status(self.command)
        except TasmotaError:
            # The client logs transport failures; keep the cached value.
            return

        value = self._normalize(result)
        if value is not None:
            self._update(value)

    def _normalize(self, result: dict[str, Any]) -> Any:
        """Local value for a status answer, or ``None`` for no new data."""
        raise NotImplementedError

    def _update(self, value: Any) -> None:
        self.set_cached_value_and_notify(value)


class WritableProperty(PollingProperty):
    """Polling property that also accepts writes from the gateway."""

    async def write(self, value: Any) -> None:
        self._logger.debug(
            "Set value of %s / %s to %s", self._device_name, self.title, value
        )
        self.set_cached_value_and_notify(value)

        try:
            response = await self._client.set_status(
                self.command, self._encode(value)
            )
        except TasmotaError as exc:
            self._logger.warning("Could not set value: %s", exc)
            return

        if not response.ok:
            self._logger.warning(
                "Could not set status: %s (%s)",
                response.reason,
                response.status,
            )
            return

        body = response.body or {}
        if body.get("WARNING"):
            self._logger.warning("Could not set status: %s", body["WARNING"])
            if body.get("Command"):
                self._logger.warning(
                    "Could not set status: %s", body["Command"]
                )

    def _encode(self, value: Any) -> str:
        """Command payload for ``value``."""
        raise NotImplementedError


# ----------------------------------------------------------------------
#  Lights and relays
# ----------------------------------------------------------------------


class OnOffProperty(WritableProperty):
    """Relay state (``Power``/``Power<n>``).

    With ``notify_on_change`` a poll only updates and announces a state that
    differs from the cached one; otherwise every successful poll notifies.
    """

    def __init__(
        self,
        client: TasmotaClient,
        name: str = "on",
        title: str = "On",
        channel: str = "",
        notify_on_change: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            client,
            name,
            PropertyDescription(
                semantic_type="OnOffProperty",
                value_type="boolean",
                title=title,
                description="Whether the device is on or off",
            ),
            f"{CMD_POWER}{channel}",
            **kwargs,
        )
        self.channel = channel
        self._notify_on_change = notify_on_change

    def _encode(self, value: bool) -> str:
        return STATE_ON if value else STATE_OFF

    def _normalize(self, result: dict[str, Any]) -> bool | None:
        # Multi-relay firmware answers Power<n> with POWER<n>.
        state = result.get(f"POWER{self.channel}", result.get("POWER"))
        if state is None:
            return None
        return state == STATE_ON

    def _update(self, value: bool) -> None:
        if not self._notify_on_change:
            self.set_cached_value_and_notify(value)
            return

        if self.value != value:
            self.set_cached_value_and_notify(value)
            self._logger.debug(
                "Value of %s / %s changed to %s",
                self._device_name,
                self.title,
                value,
            )


class BrightnessProperty(WritableProperty):
    """Dimmer level, 0..100."""

    def __init__(self, client: TasmotaClient, **kwargs: Any) -> None:
        super().__init__(
            client,
            "brightness",
            PropertyDescription(
                semantic_type="BrightnessProperty",
                value_type="integer",
                title="Brightness",
                description="The brightness of the light",
                unit="percent",
                minimum=0,
                maximum=100,
            ),
            CMD_DIMMER,
            **kwargs,
        )

    def _encode(self, value: int) -> str:
        return f"{value}"

    def _normalize(self, result: dict[str, Any]) -> int | None:
        return result.get("Dimmer")


class ColorTemperatureProperty(WritableProperty):
    """Color temperature in kelvin, stored on the device in CT units."""

    def __init__(
        self,
        client: TasmotaClient,
        to_device: Callable[[int], int] = kelvin_to_tasmota,
        from_device: Callable[[int], int] = tasmota_to_kelvin,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            client,
            "color_temperature",
            PropertyDescription(
                semantic_type="ColorTemperatureProperty",
                value_type="integer",
                title="Color Temperature",
                description="The color temperature of the light",
                unit="kelvin",
                minimum=MIN_KELVIN,
                maximum=MAX_KELVIN,
            ),
            CMD_CT,
            **kwargs,
        )
        self._to_device = to_device
        self._from_device = from_device

    def _encode(self, value: int) -> str:
        return f"{self._to_device(value)}"

    def _normalize(self, result: dict[str, Any]) -> int | None:
        ct = result.get("CT")
        if ct is None:
            return None
        return self._from_device(ct)


class ColorProperty(WritableProperty):
    """RGB color as ``#rrggbb``.

    The number of color channels (3 for RGB, 4 for RGBW) is learned from the
    first successful read and kept for the lifetime of the property.
    """

    def __init__(
        self,
        client: TasmotaClient,
        use_white_led: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            client,
            "color",
            PropertyDescription(
                semantic_type="ColorProperty",
                value_type="string",
                title="Color",
                description="The color of the light",
            ),
            CMD_COLOR,
            **kwargs,
        )
        self._use_white_led = use_white_led
        self._channel_width = 0

    @property
    def channel_width(self) -> int:
        return self._channel_width

    def _encode(self, value: str) -> str:
        if self._use_white_led and self._channel_width > 3:
            # A grey maps onto the white channel instead of three equal LEDs.
            level = value[1:3]
            if value.lower() == f"#{level * 3}".lower():
                return f"#{BLACK}{level}"
        return value

    def _normalize(self, result: dict[str, Any]) -> str | None:
        color = result.get("Color") or ""
        if not isinstance(color, str) or not _HEX_RE.match(color):
            return None
        # RGB, RGBW or RGBCW: whole bytes, at least three channels.
        if len(color) < 6 or len(color) % 2:
            return None

        if self._channel_width == 0:
            self._channel_width = len(color) // 2

        rgb = color[:6]
        # Black with a white channel is shown as the white level in grey.
        if rgb == BLACK and self._channel_width == 4 and len(color) == 8:
            rgb = color[6:8] * 3
        return f"#{rgb.lower()}"


class ColorModeProperty(PollingProperty):
    """Read-only: whether the light runs on its color or white channels."""

    def __init__(self, client: TasmotaClient, **kwargs: Any) -> None:
        super().__init__(
            client,
            "color_mode",
            PropertyDescription(
                semantic_type="ColorModeProperty",
                value_type="string",
                title="Color Mode",
                enum=(COLOR_MODE_COLOR, COLOR_MODE_TEMPERATURE),
                read_only=True,
            ),
            CMD_COLOR,
            **kwargs,
        )

    def _normalize(self, result: dict[str, Any]) -> str | None:
        color = result.get("Color")
        if not isinstance(color, str) or not color:
            return None
        if color[:6] == BLACK:
            return COLOR_MODE_TEMPERATURE
        return COLOR_MODE_COLOR


# ----------------------------------------------------------------------
#  Telemetry (web UI status table)
# ----------------------------------------------------------------------


class TelemetryProperty(Property):
    """Read-only value fed from a :data:`PollSample` by its device."""

    def __init__(
        self,
        name: str,
        description: PropertyDescription,
        data_key: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, description, **kwargs)
        self.data_key = data_key

    def update_from(self, sample: PollSample) -> None:
        entry = sample.get(self.data_key)
        if entry is not None:
            self.set_cached_value_and_notify(entry.value)


def voltage_property(**kwargs: Any) -> TelemetryProperty:
    return TelemetryProperty(
        "voltage",
        PropertyDescription(
            semantic_type="VoltageProperty",
            value_type="number",
            title="Voltage",
            unit="volt",
            read_only=True,
        ),
        "Voltage",
        **kwargs,
    )


def current_property(**kwargs: Any) -> TelemetryProperty:
    return TelemetryProperty(
        "current",
        PropertyDescription(
            semantic_type="CurrentProperty",
            value_type="number",
            title="Current",
            unit="ampere",
            read_only=True,
        ),
        "Current",
        **kwargs,
    )


def power_property(**kwargs: Any) -> TelemetryProperty:
    return TelemetryProperty(
        "power",
        PropertyDescription(
            semantic_type="InstantaneousPowerProperty",
            value_type="number",
            title="Power",
            unit="watt",
            read_only=True,
        ),
        "Power",
        **kwargs,
    )


def temperature_property(
    data_key: str, data: TelemetryValue, **kwargs: Any
) -> TelemetryProperty:
    return TelemetryProperty(
        "temperature",
        PropertyDescription(
            semantic_type="TemperatureProperty",
            value_type="number",
            title="Temperature",
            unit=data.unit,
            multiple_of=0.1,
            read_only=True,
        ),
        data_key,
        **kwargs,
    )
