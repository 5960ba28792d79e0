"""Exceptions for Tasmota device communication."""

from __future__ import annotations


class TasmotaError(Exception):
    """Base Tasmota exception."""


class TasmotaAuthenticationError(TasmotaError):
    """Tasmota authentication exception (wrong web admin password)."""


class TasmotaCommandError(TasmotaError):
    """Tasmota command exception (rejected request or unreadable body)."""


class TasmotaConnectionError(TasmotaError):
    """Tasmota connection exception (unreachable device)."""
