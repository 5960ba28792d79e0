"""Color temperature conversion between kelvin and Tasmota CT units."""

from __future__ import annotations

from .const import MAX_KELVIN, MAX_TASMOTA_CT, MIN_KELVIN, MIN_TASMOTA_CT

_KELVIN_SPAN = MAX_KELVIN - MIN_KELVIN
_CT_SPAN = MAX_TASMOTA_CT - MIN_TASMOTA_CT


def kelvin_to_tasmota(kelvin: float) -> int:
    """Map 2700..6500 K onto Tasmota's 500..153 CT scale (warm is high)."""
    kelvin = min(max(kelvin, MIN_KELVIN), MAX_KELVIN)
    ratio = (kelvin - MIN_KELVIN) / _KELVIN_SPAN
    return round(MAX_TASMOTA_CT - ratio * _CT_SPAN)


def tasmota_to_kelvin(value: float) -> int:
    """Inverse of :func:`kelvin_to_tasmota`."""
    value = min(max(value, MIN_TASMOTA_CT), MAX_TASMOTA_CT)
    ratio = (MAX_TASMOTA_CT - value) / _CT_SPAN
    return round(MIN_KELVIN + ratio * _KELVIN_SPAN)
