# backend/liveeditor/explorer/discovery.py
"""
DiscoveryProbe - auto-discovery of semantic property paths.

The bridge runs a fixed battery of well-known lookups ("player level",
"inventory slots", ...) and reports which concrete property path answered each
role. Other dashboard panels resolve fields through this cache instead of
hardcoding property names that change between game builds.

Rules:
- only one probe may be in flight at a time
- a successful probe replaces the cache wholesale (roles absent from the new
  result are dropped, since the remote schema may have changed)
- a failed probe leaves the previous cache untouched
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .bridge import BridgeError
from .models import ProbeResult

if TYPE_CHECKING:
    from .bridge import BridgeClient

logger = logging.getLogger(__name__)


class ProbeState(Enum):
    IDLE = "idle"
    PROBING = "probing"


class ProbeInProgressError(Exception):
    """Raised when a probe is requested while another one is running."""


@dataclass(frozen=True)
class DiscoveryIndicator:
    """Header chip summarising discovery coverage, e.g. "DISC 7/9"."""
    status: str  # pending | full | partial | none | unknown | failed
    text: str
    title: str
    found: Optional[int] = None
    total: Optional[int] = None
    error: Optional[str] = None


class DiscoveryProbe:
    """
    Owns the cached ProbeResult for one dashboard.

    Usage:
        discovery = DiscoveryProbe(bridge)
        await discovery.load_persisted()      # warm cache, best effort
        await discovery.probe(force=True)     # re-run the battery
        discovery.resolve("level")            # "PawnPrivate.Level" or None
    """

    def __init__(self, bridge: "BridgeClient") -> None:
        self.bridge = bridge
        self.state = ProbeState.IDLE
        self.result: Optional[ProbeResult] = None
        self.last_error: Optional[str] = None
        self.last_probe_at: Optional[datetime] = None

    @property
    def probing(self) -> bool:
        return self.state is ProbeState.PROBING

    async def probe(self, force: bool = False) -> Optional[ProbeResult]:
        """
        Run the discovery battery on the bridge.

        Returns the new result, or None if the probe failed (the reason is kept
        in `last_error` and the previous cache survives).

        Raises:
            ProbeInProgressError: another probe has not finished yet
        """
        if self.state is ProbeState.PROBING:
            raise ProbeInProgressError("A discovery probe is already running")

        self.state = ProbeState.PROBING
        try:
            result = await self.bridge.probe(force)
        except BridgeError as e:
            logger.warning("Discovery probe failed: %s", e.message)
            self.last_error = e.message
            return None
        finally:
            self.state = ProbeState.IDLE

        self.result = result
        self.last_error = None
        self.last_probe_at = datetime.now()
        logger.info(
            "Discovery probe found %d of %d roles",
            len(result.found_roles()),
            len(result.properties),
        )
        return result

    async def load_persisted(self) -> Optional[ProbeResult]:
        """
        Load the result saved by an earlier probe, if the bridge has one.

        Absence and errors are expected at session start and are not reported.
        A cache filled by a probe in the meantime is never overwritten.
        """
        try:
            result = await self.bridge.load_persisted_probe()
        except BridgeError as e:
            logger.debug("No persisted discovery result: %s", e.message)
            return None

        if self.result is None and not self.probing:
            self.result = result
        return result

    def resolve(self, role: str) -> Optional[str]:
        """Discovered property path for a semantic role, or None."""
        if self.result is None:
            return None
        return self.result.resolve(role)

    def indicator(self) -> DiscoveryIndicator:
        if self.probing:
            return DiscoveryIndicator(
                status="pending",
                text="DISC ...",
                title="Auto-discovery in progress - waiting for property scan",
            )

        if self.result is None:
            if self.last_error:
                return DiscoveryIndicator(
                    status="failed",
                    text="DISC !",
                    title=f"Auto-discovery failed: {self.last_error}",
                    error=self.last_error,
                )
            return DiscoveryIndicator(status="unknown", text="DISC ?", title="Discovery status unknown")

        total = len(self.result.properties)
        found = len(self.result.found_roles())
        error = self.last_error

        if total == 0:
            return DiscoveryIndicator(
                status="unknown", text="DISC ?", title="Discovery status unknown", error=error
            )
        if found == total:
            status, title = "full", f"Auto-discovery complete - all {total} properties found"
        elif found > 0:
            status, title = "partial", f"Auto-discovery partial - {found} of {total} properties found"
        else:
            status, title = "none", "Auto-discovery found no matching properties"

        if error:
            title += f" (last probe failed: {error})"
        return DiscoveryIndicator(
            status=status,
            text=f"DISC {found}/{total}",
            title=title,
            found=found,
            total=total,
            error=error,
        )
