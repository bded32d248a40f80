# backend/liveeditor/explorer/bridge.py
"""
BridgeClient - HTTP client for the server mod's reflection bridge.

Every bridge response is double-encoded: an outer JSON envelope
{"success": bool, "message": str} whose `message` is itself a JSON document.
Decoding is always two explicit steps; an already-structured `message` is
rejected as an invalid response.

Failures are raised as BridgeError subclasses:
- BridgeTransportError: no response, network error, unusable HTTP status
- BridgeReportedError: the bridge answered {"success": false}
- BridgeDecodeError: the envelope or its embedded payload is malformed
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from .. import config
from .models import BridgeEnvelope, FunctionDump, ProbeResult, PropertyDump
from .path import ExplorerPath

logger = logging.getLogger(__name__)

DUMP_ENDPOINT = "/api/dump"
PROBE_ENDPOINT = "/api/discovery/probe"
DISCOVERY_ENDPOINT = "/api/discovery"


# ============================================================================
# Errors
# ============================================================================

class BridgeError(Exception):
    """A bridge request failed; `message` is safe to show to the operator."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BridgeTransportError(BridgeError):
    """No usable response came back."""


class BridgeReportedError(BridgeError):
    """The bridge answered, but reported failure."""


class BridgeDecodeError(BridgeError):
    """The response could not be decoded."""


# ============================================================================
# Request Bodies
# ============================================================================

def build_dump_body(
    path: ExplorerPath,
    max_items: int,
    *,
    functions: bool = False,
    name_filter: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Request body for /api/dump.

    `property_path` is left out entirely at the root: the bridge distinguishes
    "no path" from an empty path.
    """
    body: Dict[str, Any] = {
        "class_name": path.root_type,
        "instance_index": path.instance_index,
        "max_items": max_items,
    }
    request_path = path.to_request_path()
    if request_path is not None:
        body["property_path"] = request_path
    if functions:
        body["mode"] = "functions"
        if name_filter:
            body["filter"] = name_filter
    return body


def decode_envelope(raw: Any) -> Dict[str, Any]:
    """
    Decode an already-parsed outer envelope into its inner payload.

    Step one validates the {success, message} wrapper; step two parses the
    `message` string as JSON.
    """
    try:
        envelope = BridgeEnvelope.model_validate(raw)
    except ValidationError as e:
        raise BridgeDecodeError(f"Invalid response envelope: {e.error_count()} error(s)") from e

    if not envelope.success:
        message = envelope.message
        if message is None or message == "":
            message = "Bridge reported failure"
        raise BridgeReportedError(message if isinstance(message, str) else json.dumps(message))

    if not isinstance(envelope.message, str):
        raise BridgeDecodeError("Invalid response: message is not an encoded payload")

    try:
        inner = json.loads(envelope.message)
    except json.JSONDecodeError as e:
        raise BridgeDecodeError(f"Invalid response: {e.msg} in message payload") from e

    if not isinstance(inner, dict):
        raise BridgeDecodeError("Invalid response: message payload is not an object")
    return inner


# ============================================================================
# Client
# ============================================================================

class BridgeClient:
    """
    Async client for the reflection bridge.

    Usage:
        async with BridgeClient("http://127.0.0.1:8212") as bridge:
            dump = await bridge.dump_properties(ExplorerPath.root("PalPlayerState"), 50)
    """

    def __init__(
        self,
        base_url: str = config.BRIDGE_URL,
        timeout: float = config.BRIDGE_TIMEOUT,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "BridgeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ---------- Operations ----------

    async def dump_properties(self, path: ExplorerPath, max_items: int) -> PropertyDump:
        """Properties reachable at `path`."""
        inner = await self._post(DUMP_ENDPOINT, build_dump_body(path, max_items))
        return self._validate(PropertyDump, inner)

    async def dump_functions(
        self,
        path: ExplorerPath,
        max_items: int,
        name_filter: Optional[str] = None,
    ) -> FunctionDump:
        """Callable operations at `path`, optionally filtered by name (case-insensitive)."""
        body = build_dump_body(path, max_items, functions=True, name_filter=name_filter)
        inner = await self._post(DUMP_ENDPOINT, body)
        return self._validate(FunctionDump, inner)

    async def probe(self, force: bool = False) -> ProbeResult:
        """Run the bridge's auto-discovery battery."""
        inner = await self._post(PROBE_ENDPOINT, {"force": force})
        return self._validate(ProbeResult, inner)

    async def load_persisted_probe(self) -> ProbeResult:
        """Fetch the probe result the bridge saved from an earlier run."""
        raw = await self._request("GET", DISCOVERY_ENDPOINT)
        if isinstance(raw, dict) and "success" in raw and "properties" not in raw:
            raw = decode_envelope(raw)
        return self._validate(ProbeResult, raw)

    # ---------- Internals ----------

    async def _post(self, url: str, body: Dict[str, Any]) -> Dict[str, Any]:
        raw = await self._request("POST", url, json=body)
        return decode_envelope(raw)

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        logger.debug("Bridge %s %s %s", method, url, kwargs.get("json"))
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Bridge request %s %s failed: %r", method, url, e)
            raise BridgeTransportError(f"No response from server: {e}") from e

        try:
            raw = response.json()
        except ValueError as e:
            if response.is_error:
                raise BridgeTransportError(f"No response from server: HTTP {response.status_code}") from e
            raise BridgeDecodeError("Invalid response: body is not JSON") from e

        # A failing status is always a failure; a {success: false} envelope keeps its reason
        if response.is_error:
            reason = raw.get("message") if isinstance(raw, dict) and raw.get("success") is False else None
            if isinstance(reason, str) and reason:
                raise BridgeReportedError(reason)
            raise BridgeTransportError(f"No response from server: HTTP {response.status_code}")
        return raw

    @staticmethod
    def _validate(model, inner: Any):
        try:
            return model.model_validate(inner)
        except ValidationError as e:
            raise BridgeDecodeError(f"Invalid response: {e.error_count()} malformed field(s)") from e
