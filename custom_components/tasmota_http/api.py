"""Tasmota HTTP API: command endpoint and web UI status table."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp
from aiohttp import client_exceptions

from .const import DEFAULT_PORT, DEFAULT_REQUEST_TIMEOUT
from .exceptions import (
    TasmotaAuthenticationError,
    TasmotaCommandError,
    TasmotaConnectionError,
)
from .models import CommandResponse, PollSample
from .telemetry import parse_telemetry

_LOGGER = logging.getLogger(__name__)

# Tasmota's web admin user name is fixed.
WEB_USER = "admin"


class TasmotaClient:
    """Async client for a single Tasmota device (local HTTP)."""

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        password: str | None = None,
        request_timeout: int = DEFAULT_REQUEST_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._password = password or None
        self._request_timeout = request_timeout
        self._logger = logger or _LOGGER

        self._session = session
        self._close_session = False

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    # ------------------------------------------------------------------
    #  Commands
    # ------------------------------------------------------------------

    async def get_status(self, command: str) -> dict[str, Any]:
        """Query ``command`` without an argument and return the JSON body."""
        status, reason, text = await self._request(
            "/cm", self._command_params(command)
        )
        self._raise_for_status(command, status, reason)
        return self._parse_json(command, text)

    async def set_status(self, command: str, payload: str) -> CommandResponse:
        """Send ``command payload``.

        A non-200 answer is returned rather than raised so callers can
        report the status line themselves.
        """
        status, reason, text = await self._request(
            "/cm", self._command_params(f"{command} {payload}")
        )
        if status != 200:
            return CommandResponse(status=status, reason=reason, body=None)
        return CommandResponse(
            status=status,
            reason=reason,
            body=self._parse_json(command, text),
        )

    async def get_data(self) -> PollSample:
        """Fetch and parse the sensor table of the web UI."""
        status, reason, text = await self._request("/", {"m": "1"})
        self._raise_for_status("status table", status, reason)
        return parse_telemetry(text)

    # ------------------------------------------------------------------
    #  HTTP transport
    # ------------------------------------------------------------------

    def _command_params(self, command: str) -> dict[str, str]:
        params = {"cmnd": command}
        if self._password:
            params["user"] = WEB_USER
            params["password"] = self._password
        return params

    async def _request(
        self, path: str, params: dict[str, str]
    ) -> tuple[int, str | None, str]:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._close_session = True

        url = f"http://{self._host}:{self._port}{path}"
        auth = (
            aiohttp.BasicAuth(WEB_USER, self._password)
            if self._password
            else None
        )

        try:
            async with asyncio.timeout(self._request_timeout):
                resp = await self._session.get(url, params=params, auth=auth)
                text = await resp.text()
        except TimeoutError as exc:
            self._logger.debug("Timeout talking to %s: %s", self._host, exc)
            raise TasmotaConnectionError(
                f"Timeout communicating with {self._host}"
            ) from exc
        except client_exceptions.ClientError as exc:
            self._logger.debug(
                "Request to %s failed: %s / %s",
                self._host,
                type(exc).__name__,
                exc,
            )
            raise TasmotaConnectionError(
                f"Cannot reach {self._host}, check host and port"
            ) from exc

        self._logger.debug(
            "%s %s -> %s %s", url, params.get("cmnd", ""), resp.status, text
        )
        return resp.status, resp.reason, text

    def _raise_for_status(
        self, what: str, status: int, reason: str | None
    ) -> None:
        if status == 200:
            return
        self._logger.debug(
            "%s on %s failed: %s (%s)", what, self._host, reason, status
        )
        if status == 401:
            raise TasmotaAuthenticationError(
                f"{self._host} rejected the web admin password"
            )
        raise TasmotaCommandError(
            f"{self._host} answered '{what}' with {status} {reason}"
        )

    def _parse_json(self, command: str, text: str) -> dict[str, Any]:
        try:
            result = json.loads(text)
        except ValueError as exc:
            self._logger.debug(
                "Malformed answer to %s from %s: %r", command, self._host, text
            )
            raise TasmotaCommandError(
                f"Malformed answer to '{command}' from {self._host}"
            ) from exc

        if not isinstance(result, dict):
            raise TasmotaCommandError(
                f"Unexpected answer to '{command}' from {self._host}: {text}"
            )
        return result

    # ------------------------------------------------------------------
    #  Session lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP session if we own it."""
        if self._session and self._close_session:
            await self._session.close()

    async def __aenter__(self) -> TasmotaClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
