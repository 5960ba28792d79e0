"""Shared fixtures for Tasmota HTTP tests."""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from custom_components.tasmota_http.models import (
    CommandResponse,
    Features,
    TelemetryValue,
)

UNKNOWN_COMMAND = {"Command": "Unknown"}


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    """Enable custom integrations for all tests."""
    yield


@pytest.fixture
def make_client() -> Callable[..., MagicMock]:
    """Return a factory for a mocked TasmotaClient.

    ``responses`` maps a command to its JSON answer; an exception instance
    is raised instead.  Unknown commands answer like the firmware does.
    """

    def factory(
        responses: dict[str, Any] | None = None,
        sample: dict[str, TelemetryValue] | None = None,
    ) -> MagicMock:
        answers = dict(responses or {})

        async def get_status(command: str) -> dict[str, Any]:
            answer = answers.get(command, UNKNOWN_COMMAND)
            if isinstance(answer, Exception):
                raise answer
            return answer

        client = MagicMock()
        client.host = "192.168.1.50"
        client.port = 80
        client.responses = answers
        client.get_status = AsyncMock(side_effect=get_status)
        client.set_status = AsyncMock(
            return_value=CommandResponse(status=200, reason="OK", body={})
        )
        client.get_data = AsyncMock(return_value=dict(sample or {}))
        client.close = AsyncMock()
        return client

    return factory


@pytest.fixture
def energy_sample() -> dict[str, TelemetryValue]:
    """Return a status table sample of a plug with energy monitoring."""
    return {
        "Voltage": TelemetryValue(value=229.0, unit="V"),
        "Current": TelemetryValue(value=0.128, unit="A"),
        "Power": TelemetryValue(value=17.0, unit="W"),
        "DS18B20 Temperature": TelemetryValue(value=23.4, unit="°C"),
    }


@pytest.fixture
def features() -> Features:
    """Return default feature flags (all experimental features off)."""
    return Features()
