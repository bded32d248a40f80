"""
Global pytest configuration and shared fixtures.

Provides common test infrastructure for all test suites including:
- FakeBridge instances pre-loaded with sample reflection payloads
- Explorer session and discovery probe factories
- BridgeClient instances wired to an httpx.MockTransport
"""

import sys
from pathlib import Path
from typing import Callable, List

import httpx
import pytest

# Add backend to path
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

from liveeditor.explorer.bridge import BridgeClient  # noqa: E402
from liveeditor.explorer.discovery import DiscoveryProbe  # noqa: E402
from liveeditor.explorer.session import ExplorerSession  # noqa: E402
from tests.fixtures.bridge import (FakeBridge, mixed_payload,  # noqa: E402
                                   player_id_payload, player_state_payload)

# ============================================================================
# Fake Bridge Fixtures
# ============================================================================


@pytest.fixture
def fake_bridge() -> FakeBridge:
    """FakeBridge serving PalPlayerState[0], its PlayerId struct and a mixed row set."""
    bridge = FakeBridge()
    bridge.on_properties(None, player_state_payload())
    bridge.on_properties("PlayerId", player_id_payload())
    return bridge


@pytest.fixture
def mixed_bridge() -> FakeBridge:
    """FakeBridge whose root dump contains every classification edge case."""
    bridge = FakeBridge()
    bridge.on_properties(None, mixed_payload())
    bridge.on_properties("CharacterParameterComponent", player_id_payload())
    return bridge


@pytest.fixture
def explorer_session(fake_bridge: FakeBridge) -> ExplorerSession:
    """ExplorerSession bound to the default fake bridge."""
    return ExplorerSession(fake_bridge, default_class="PalPlayerState", max_items=50)


@pytest.fixture
def discovery(fake_bridge: FakeBridge) -> DiscoveryProbe:
    return DiscoveryProbe(fake_bridge)


# ============================================================================
# HTTP Transport Fixtures
# ============================================================================


@pytest.fixture
def mock_bridge_client():
    """
    Factory for BridgeClient instances backed by httpx.MockTransport.

    Usage:
        client, requests = mock_bridge_client(lambda request: httpx.Response(200, json=...))
    """

    def _create(handler: Callable[[httpx.Request], httpx.Response]):
        requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = BridgeClient("http://bridge.test", 5, transport=httpx.MockTransport(_record))
        return client, requests

    return _create
