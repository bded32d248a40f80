"""
Tests for BridgeClient against an httpx.MockTransport.

Covers request body shape, the two-step envelope decode and the error taxonomy.
"""

import httpx
import pytest

from liveeditor.explorer.bridge import (BridgeDecodeError, BridgeReportedError,
                                        BridgeTransportError, build_dump_body,
                                        decode_envelope)
from liveeditor.explorer.path import ExplorerPath
from tests.fixtures.bridge import (envelope, functions_payload, player_state_payload,
                                   probe_payload, request_json)

# ============================================================================
# Request Body Tests
# ============================================================================


@pytest.mark.unit
def test_root_dump_body_omits_property_path():
    """Test that the root is sent without a property_path field (not "")."""
    body = build_dump_body(ExplorerPath.root("PalPlayerState", 0), 50)

    assert body == {"class_name": "PalPlayerState", "instance_index": 0, "max_items": 50}
    assert "property_path" not in body


@pytest.mark.unit
def test_nested_dump_body():
    body = build_dump_body(ExplorerPath.parse("PalPlayerState", 1, "Foo.Bar"), 25)

    assert body["property_path"] == "Foo.Bar"
    assert body["instance_index"] == 1
    assert "mode" not in body


@pytest.mark.unit
def test_functions_dump_body():
    body = build_dump_body(ExplorerPath.root("PalPlayerCharacter"), 50, functions=True, name_filter="Heal")

    assert body["mode"] == "functions"
    assert body["filter"] == "Heal"


@pytest.mark.unit
def test_functions_dump_body_without_filter():
    body = build_dump_body(ExplorerPath.root("PalPlayerCharacter"), 50, functions=True)

    assert "filter" not in body


# ============================================================================
# Envelope Decode Tests
# ============================================================================


@pytest.mark.unit
def test_decode_envelope_parses_message_string():
    inner = decode_envelope(envelope({"class": "X", "properties": []}))

    assert inner == {"class": "X", "properties": []}


@pytest.mark.unit
def test_decode_envelope_reports_failure_verbatim():
    with pytest.raises(BridgeReportedError) as exc_info:
        decode_envelope({"success": False, "message": "Class not found: Nope"})

    assert exc_info.value.message == "Class not found: Nope"


@pytest.mark.unit
def test_decode_envelope_rejects_prestructured_message():
    """Test that an already-decoded message is not accepted as a payload."""
    with pytest.raises(BridgeDecodeError):
        decode_envelope({"success": True, "message": {"class": "X"}})


@pytest.mark.unit
@pytest.mark.parametrize("message", ["{not json", "[1, 2]", "42"])
def test_decode_envelope_rejects_malformed_inner_payload(message):
    with pytest.raises(BridgeDecodeError) as exc_info:
        decode_envelope({"success": True, "message": message})

    assert exc_info.value.message.startswith("Invalid response")


@pytest.mark.unit
def test_decode_envelope_rejects_non_object_envelope():
    with pytest.raises(BridgeDecodeError):
        decode_envelope(["success", True])


# ============================================================================
# Client Round-Trip Tests
# ============================================================================


@pytest.mark.systems
@pytest.mark.asyncio
async def test_dump_properties_round_trip(mock_bridge_client):
    client, requests = mock_bridge_client(
        lambda request: httpx.Response(200, json=envelope(player_state_payload()))
    )

    async with client:
        dump = await client.dump_properties(ExplorerPath.root("PalPlayerState", 0), 50)

    assert dump.item_count == 3
    assert requests[0].method == "POST"
    assert requests[0].url.path == "/api/dump"
    assert request_json(requests[0]) == {"class_name": "PalPlayerState", "instance_index": 0, "max_items": 50}


@pytest.mark.systems
@pytest.mark.asyncio
async def test_dump_functions_sends_mode_and_filter(mock_bridge_client):
    client, requests = mock_bridge_client(
        lambda request: httpx.Response(200, json=envelope(functions_payload([])))
    )

    async with client:
        dump = await client.dump_functions(ExplorerPath.parse("PalPlayerState", 0, "PlayerId"), 10, "heal")

    assert dump.functions == []
    body = request_json(requests[0])
    assert body["mode"] == "functions"
    assert body["filter"] == "heal"
    assert body["property_path"] == "PlayerId"


@pytest.mark.systems
@pytest.mark.asyncio
async def test_bridge_failure_surfaces_message(mock_bridge_client):
    client, _ = mock_bridge_client(
        lambda request: httpx.Response(200, json={"success": False, "message": "No instances of Nope"})
    )

    async with client:
        with pytest.raises(BridgeReportedError) as exc_info:
            await client.dump_properties(ExplorerPath.root("Nope"), 50)

    assert exc_info.value.message == "No instances of Nope"


@pytest.mark.systems
@pytest.mark.asyncio
async def test_error_status_with_envelope_keeps_reason(mock_bridge_client):
    client, _ = mock_bridge_client(
        lambda request: httpx.Response(500, json={"success": False, "message": "Mod not loaded"})
    )

    async with client:
        with pytest.raises(BridgeReportedError, match="Mod not loaded"):
            await client.dump_properties(ExplorerPath.root("PalPlayerState"), 50)


@pytest.mark.systems
@pytest.mark.asyncio
async def test_error_status_with_success_envelope_still_fails(mock_bridge_client):
    """Test that a non-2xx status is never committed, even with success: true."""
    client, _ = mock_bridge_client(
        lambda request: httpx.Response(500, json=envelope(player_state_payload()))
    )

    async with client:
        with pytest.raises(BridgeTransportError) as exc_info:
            await client.dump_properties(ExplorerPath.root("PalPlayerState"), 50)

    assert "HTTP 500" in exc_info.value.message


@pytest.mark.systems
@pytest.mark.asyncio
async def test_error_status_without_envelope_is_transport_error(mock_bridge_client):
    client, _ = mock_bridge_client(lambda request: httpx.Response(502, text="Bad Gateway"))

    async with client:
        with pytest.raises(BridgeTransportError) as exc_info:
            await client.dump_properties(ExplorerPath.root("PalPlayerState"), 50)

    assert "HTTP 502" in exc_info.value.message


@pytest.mark.systems
@pytest.mark.asyncio
async def test_network_error_is_transport_error(mock_bridge_client):
    def _refuse(request):
        raise httpx.ConnectError("Connection refused", request=request)

    client, _ = mock_bridge_client(_refuse)

    async with client:
        with pytest.raises(BridgeTransportError) as exc_info:
            await client.dump_properties(ExplorerPath.root("PalPlayerState"), 50)

    assert exc_info.value.message.startswith("No response from server")


@pytest.mark.systems
@pytest.mark.asyncio
async def test_non_json_body_is_decode_error(mock_bridge_client):
    client, _ = mock_bridge_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    async with client:
        with pytest.raises(BridgeDecodeError):
            await client.dump_properties(ExplorerPath.root("PalPlayerState"), 50)


@pytest.mark.systems
@pytest.mark.asyncio
async def test_malformed_inner_fields_are_decode_error(mock_bridge_client):
    client, _ = mock_bridge_client(
        lambda request: httpx.Response(200, json=envelope({"properties": [{"type": "IntProperty"}]}))
    )

    async with client:
        with pytest.raises(BridgeDecodeError):
            await client.dump_properties(ExplorerPath.root("PalPlayerState"), 50)


@pytest.mark.systems
@pytest.mark.asyncio
async def test_probe_round_trip(mock_bridge_client):
    client, requests = mock_bridge_client(
        lambda request: httpx.Response(200, json=envelope(probe_payload({"level": "PawnPrivate.Level"})))
    )

    async with client:
        result = await client.probe(force=True)

    assert result.resolve("level") == "PawnPrivate.Level"
    assert requests[0].url.path == "/api/discovery/probe"
    assert request_json(requests[0]) == {"force": True}


@pytest.mark.systems
@pytest.mark.asyncio
async def test_load_persisted_probe_plain_json(mock_bridge_client):
    client, requests = mock_bridge_client(
        lambda request: httpx.Response(200, json=probe_payload({"hp": "PawnPrivate.Hp"}))
    )

    async with client:
        result = await client.load_persisted_probe()

    assert requests[0].method == "GET"
    assert requests[0].url.path == "/api/discovery"
    assert result.properties == {"hp": "PawnPrivate.Hp"}


@pytest.mark.systems
@pytest.mark.asyncio
async def test_load_persisted_probe_missing(mock_bridge_client):
    client, _ = mock_bridge_client(lambda request: httpx.Response(404, text="Not Found"))

    async with client:
        with pytest.raises(BridgeTransportError):
            await client.load_persisted_probe()


@pytest.mark.systems
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "operation,payload",
    [
        ("probe", {"properties": ["level"]}),
        ("probe", {"properties": "level"}),
        ("functions", functions_payload([{"name": "Heal", "flags": 5}])),
        ("functions", functions_payload([{"name": "Heal", "flags": {"Native": True}}])),
    ],
)
async def test_malformed_shapes_are_decode_errors(mock_bridge_client, operation, payload):
    """Test that wrongly-typed inner fields surface as invalid responses."""
    client, _ = mock_bridge_client(lambda request: httpx.Response(200, json=envelope(payload)))

    async with client:
        with pytest.raises(BridgeDecodeError) as exc_info:
            if operation == "probe":
                await client.probe()
            else:
                await client.dump_functions(ExplorerPath.root("PalPlayerCharacter"), 50)

    assert exc_info.value.message.startswith("Invalid response")
