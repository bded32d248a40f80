"""
UObject Explorer - drill-down navigation over the live server's object graph.

The remote graph is never mirrored locally: an ExplorerPath is only an address,
and every view is re-requested from the reflection bridge by path string.
"""

from .breadcrumb import BreadcrumbEntry, build_breadcrumb
from .bridge import (BridgeClient, BridgeDecodeError, BridgeError,
                     BridgeReportedError, BridgeTransportError)
from .classify import Classification, ValueCategory, classify, is_drillable
from .discovery import DiscoveryProbe, ProbeInProgressError, ProbeState
from .models import (NOT_FOUND, FunctionDump, FunctionRecord, ProbeResult,
                     PropertyDump, PropertyRecord)
from .path import ExplorerPath
from .session import DumpMode, DumpOutcome, ExplorerSession

__all__ = [
    "BreadcrumbEntry",
    "BridgeClient",
    "BridgeDecodeError",
    "BridgeError",
    "BridgeReportedError",
    "BridgeTransportError",
    "Classification",
    "DiscoveryProbe",
    "DumpMode",
    "DumpOutcome",
    "ExplorerPath",
    "ExplorerSession",
    "FunctionDump",
    "FunctionRecord",
    "NOT_FOUND",
    "ProbeInProgressError",
    "ProbeResult",
    "ProbeState",
    "PropertyDump",
    "PropertyRecord",
    "ValueCategory",
    "build_breadcrumb",
    "classify",
    "is_drillable",
]
