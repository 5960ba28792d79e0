"""Constants for the Tasmota HTTP integration and device library."""

from __future__ import annotations

# ── Home Assistant integration ──────────────────────────────────────
DOMAIN = "tasmota_http"

DEFAULT_PORT = 80
DEFAULT_POLL_INTERVAL = 1000  # milliseconds
DEFAULT_REQUEST_TIMEOUT = 5

# ── Config entry options (feature flags) ───────────────────────────
CONF_POLL_INTERVAL = "poll_interval"
CONF_TEMPERATURE_SENSOR = "temperature_sensor"
CONF_MULTI_CHANNEL_RELAY = "multi_channel_relay"
CONF_USE_WHITE_LED = "use_white_led_in_color_mode"
CONF_COLOR_MODE = "color_mode"
CONF_TEMPERATURE_KEY = "temperature_key"
CONF_DEBUG = "debug"

# ── Device metadata ────────────────────────────────────────────────
SCHEMA_CONTEXT = "https://iot.mozilla.org/schemas/"
TYPE_LIGHT = "Light"
TYPE_SMART_PLUG = "SmartPlug"
TYPE_TEMPERATURE_SENSOR = "TemperatureSensor"

# ── Tasmota command vocabulary ─────────────────────────────────────
CMD_POWER = "Power"
CMD_DIMMER = "Dimmer"
CMD_COLOR = "Color"
CMD_CT = "CT"

STATE_ON = "ON"
STATE_OFF = "OFF"

# Relay channels are numbered 1..9 on the command endpoint.
MAX_RELAY_CHANNELS = 9

# ── Color temperature ──────────────────────────────────────────────
MIN_KELVIN = 2700
MAX_KELVIN = 6500
# Tasmota CT range (mired-like): 153 is coldest, 500 is warmest.
MIN_TASMOTA_CT = 153
MAX_TASMOTA_CT = 500

# ── Color modes ────────────────────────────────────────────────────
COLOR_MODE_COLOR = "color"
COLOR_MODE_TEMPERATURE = "temperature"

BLACK = "000000"

# ── Telemetry keys on the web UI status table ─────────────────────
DATA_VOLTAGE = "Voltage"
DATA_CURRENT = "Current"
DATA_POWER = "Power"
DATA_TEMPERATURE_MARKER = "Temperature"
