# backend/liveeditor/explorer/session.py
"""
ExplorerSession - the dump request/response cycle and navigation state.

Holds two paths:
- `selected`: the target of the most recent request (what the controls show)
- `path`: the committed path, i.e. the target of the last fully successful dump

The committed path, breadcrumb and result only change when a request completes
and decodes cleanly. A response that arrives after the operator has already
navigated elsewhere is dropped without touching state.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Union

from .. import config
from .breadcrumb import BreadcrumbEntry, build_breadcrumb
from .bridge import BridgeError
from .models import FunctionDump, PropertyDump
from .path import ExplorerPath

if TYPE_CHECKING:
    from .bridge import BridgeClient

logger = logging.getLogger(__name__)


class DumpMode(Enum):
    PROPERTIES = "properties"
    FUNCTIONS = "functions"


class DumpOutcome(Enum):
    APPLIED = "applied"      # response decoded and committed
    FAILED = "failed"        # error state shown, nothing committed
    DISCARDED = "discarded"  # superseded by a newer navigation
    REJECTED = "rejected"    # invalid input, no request issued


class StatusKind(Enum):
    IDLE = ""
    LOADING = "loading"
    OK = "ok"
    ERROR = "err"


@dataclass(frozen=True)
class DumpTarget:
    """Identity of one dump request."""
    path: ExplorerPath
    mode: DumpMode = DumpMode.PROPERTIES
    name_filter: Optional[str] = None
    max_items: int = config.DEFAULT_MAX_ITEMS


@dataclass(frozen=True)
class StatusLine:
    text: str
    kind: StatusKind = StatusKind.IDLE


class ExplorerSession:
    """
    One operator's Explorer panel.

    Usage:
        session = ExplorerSession(bridge)
        await session.submit("PalPlayerState", 0)
        await session.drill("PlayerCharacter")
        await session.navigate_breadcrumb(0)
    """

    def __init__(
        self,
        bridge: "BridgeClient",
        *,
        default_class: str = config.DEFAULT_CLASS,
        max_items: int = config.DEFAULT_MAX_ITEMS,
    ) -> None:
        self.bridge = bridge
        self.selected = DumpTarget(ExplorerPath.root(default_class), max_items=max_items)

        # Committed state (last successful round trip)
        self.path: Optional[ExplorerPath] = None
        self.breadcrumb: List[BreadcrumbEntry] = []
        self.result: Optional[Union[PropertyDump, FunctionDump]] = None
        self.result_target: Optional[DumpTarget] = None

        # Indicators
        self.status = StatusLine("Ready")
        self.error: Optional[str] = None
        self.loading = False
        self.elapsed: Optional[float] = None
        self.updated_at: Optional[datetime] = None

        self._request_seq = 0

    # ---------- Operator Actions ----------

    async def submit(
        self,
        class_name: str,
        instance_index: int = 0,
        property_path: str = "",
        *,
        max_items: Optional[int] = None,
        mode: DumpMode = DumpMode.PROPERTIES,
        name_filter: Optional[str] = None,
    ) -> DumpOutcome:
        """Dump whatever the controls describe (manual submit)."""
        if not (class_name or "").strip():
            return self._reject("Enter a class name")
        try:
            path = ExplorerPath.parse(class_name, instance_index, property_path)
        except ValueError as e:
            return self._reject(str(e))

        return await self.navigate(path, mode=mode, name_filter=name_filter, max_items=max_items)

    async def navigate(
        self,
        path: ExplorerPath,
        *,
        mode: DumpMode = DumpMode.PROPERTIES,
        name_filter: Optional[str] = None,
        max_items: Optional[int] = None,
    ) -> DumpOutcome:
        """Make `path` the selected target and dump it."""
        if max_items is None or max_items <= 0:
            max_items = self.selected.max_items
        name_filter = (name_filter or "").strip() or None
        if mode is not DumpMode.FUNCTIONS:
            name_filter = None

        target = DumpTarget(path=path, mode=mode, name_filter=name_filter, max_items=max_items)
        return await self._dump(target)

    async def drill(self, property_name: str) -> DumpOutcome:
        """Descend into a property of the currently displayed result."""
        base = self.path or self.selected.path

        if isinstance(self.result, PropertyDump):
            record = self.result.find(property_name)
            if record is not None and not record.drillable:
                return self._reject(f"Cannot drill into {property_name}: not a live object reference")

        try:
            target_path = base.descend(property_name)
        except ValueError as e:
            return self._reject(str(e))
        if target_path is base:
            return self._reject("Property name is empty")

        return await self.navigate(target_path, mode=DumpMode.PROPERTIES)

    async def navigate_breadcrumb(self, depth: int) -> DumpOutcome:
        """Jump back to an earlier breadcrumb entry."""
        if self.path is None:
            return self._reject("Nothing to navigate yet")
        if depth < 0 or depth >= len(self.breadcrumb):
            return self._reject(f"No breadcrumb at depth {depth}")
        entry = self.breadcrumb[depth]
        if entry.current:
            return self._reject("Already here")

        target = self.result_target or self.selected
        return await self.navigate(
            entry.resolved_path,
            mode=target.mode,
            name_filter=target.name_filter,
        )

    async def refresh(self) -> DumpOutcome:
        """Re-issue the selected request."""
        return await self._dump(self.selected)

    def use_preset(self, class_name: str) -> None:
        """Point the controls at a preset class (instance 0, no path) without dumping."""
        self.selected = replace(
            self.selected,
            path=ExplorerPath.root(class_name),
            mode=DumpMode.PROPERTIES,
            name_filter=None,
        )

    # ---------- Dump Cycle ----------

    async def _dump(self, target: DumpTarget) -> DumpOutcome:
        self._request_seq += 1
        seq = self._request_seq
        self.selected = target
        self.loading = True
        self.status = StatusLine(f"Dumping {target.path}...", StatusKind.LOADING)

        started = time.perf_counter()
        result = None
        failure: Optional[BridgeError] = None
        try:
            if target.mode is DumpMode.FUNCTIONS:
                result = await self.bridge.dump_functions(
                    target.path, target.max_items, target.name_filter
                )
            else:
                result = await self.bridge.dump_properties(target.path, target.max_items)
        except BridgeError as e:
            failure = e
        elapsed = time.perf_counter() - started

        if seq != self._request_seq or target != self.selected:
            logger.debug("Discarding stale %s dump for %s", target.mode.value, target.path)
            if seq == self._request_seq:
                # Controls moved (e.g. a preset) but nothing newer is in flight
                self.loading = False
                self.status = StatusLine("Ready")
            return DumpOutcome.DISCARDED

        self.loading = False

        if failure is not None:
            logger.info("Dump of %s failed: %s", target.path, failure.message)
            self.error = failure.message
            self.status = StatusLine(f"Error: {failure.message}", StatusKind.ERROR)
            return DumpOutcome.FAILED

        self.path = target.path
        self.breadcrumb = build_breadcrumb(target.path)
        self.result = result
        self.result_target = target
        self.error = None
        self.elapsed = elapsed
        self.updated_at = datetime.now()

        noun = "functions" if target.mode is DumpMode.FUNCTIONS else "properties"
        self.status = StatusLine(
            f"OK - {result.item_count} {noun} in {elapsed:.2f}s", StatusKind.OK
        )
        return DumpOutcome.APPLIED

    def _reject(self, message: str) -> DumpOutcome:
        self.status = StatusLine(message, StatusKind.ERROR)
        return DumpOutcome.REJECTED
