# backend/liveeditor/routes/explorer.py
"""
Explorer API Routes

Browser-facing endpoints for the UObject Explorer panel:
- Current explorer view (controls, status, breadcrumb, rows)
- Dump submission, drill-down and breadcrumb navigation
- Class presets
- Auto-discovery cache, probe trigger and role lookup

Every navigation endpoint returns the refreshed ExplorerView; a failed dump is
reported inside the view (status + error), not as an HTTP error.
"""

import logging
from dataclasses import asdict
from typing import Dict, List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from .. import config
from ..explorer.discovery import DiscoveryProbe, ProbeInProgressError
from ..explorer.render import ExplorerView, build_view
from ..explorer.session import DumpMode, ExplorerSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["explorer"])


# ============================================================================
# Dependencies
# ============================================================================

def get_session_from_request(request: Request) -> ExplorerSession:
    """Get the ExplorerSession from app.state."""
    session = getattr(request.app.state, "explorer_session", None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Explorer not initialized"
        )
    return session


def get_discovery_from_request(request: Request) -> DiscoveryProbe:
    """Get the DiscoveryProbe from app.state."""
    discovery = getattr(request.app.state, "discovery", None)
    if discovery is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Discovery not initialized"
        )
    return discovery


# ============================================================================
# Request Models
# ============================================================================

class DumpRequest(BaseModel):
    """Explorer controls submitted by the operator."""
    class_name: str = Field("", description="Root class to dump, e.g. PalPlayerState")
    instance_index: int = Field(0, ge=0, description="Which live instance of the class")
    property_path: str = Field("", description="Dotted property path below the instance")
    max_items: int = Field(config.DEFAULT_MAX_ITEMS, ge=1, le=10000, description="Row limit")
    mode: DumpMode = Field(DumpMode.PROPERTIES, description="properties or functions")
    filter: Optional[str] = Field(None, description="Function name filter (functions mode)")


class DrillRequest(BaseModel):
    name: str = Field(..., description="Property to descend into")


class BreadcrumbRequest(BaseModel):
    depth: int = Field(..., ge=0, description="Breadcrumb depth (0 = root instance)")


class PresetRequest(BaseModel):
    class_name: str = Field(..., min_length=1)


class ProbeRequest(BaseModel):
    force: bool = Field(False, description="Re-run lookups even if cached on the bridge")


# ============================================================================
# Response Models
# ============================================================================

class DiscoveryIndicatorResponse(BaseModel):
    status: str
    text: str
    title: str
    found: Optional[int] = None
    total: Optional[int] = None
    error: Optional[str] = None


class DiscoveryResponse(BaseModel):
    """Cached auto-discovery map plus its header indicator."""
    state: str
    properties: Dict[str, str] = {}
    timestamp: Optional[Union[float, str]] = None
    found: List[str] = []
    missing: List[str] = []
    indicator: DiscoveryIndicatorResponse


class RoleResponse(BaseModel):
    role: str
    path: str


def _discovery_response(discovery: DiscoveryProbe) -> DiscoveryResponse:
    result = discovery.result
    indicator = discovery.indicator()
    return DiscoveryResponse(
        state=discovery.state.value,
        properties=dict(result.properties) if result else {},
        timestamp=result.timestamp if result else None,
        found=result.found_roles() if result else [],
        missing=result.missing_roles() if result else [],
        indicator=DiscoveryIndicatorResponse(**asdict(indicator)),
    )


# ============================================================================
# Explorer Endpoints
# ============================================================================

@router.get("/explorer", response_model=ExplorerView)
async def get_explorer_view(session: ExplorerSession = Depends(get_session_from_request)):
    """Current explorer state."""
    return build_view(session)


@router.post("/explorer/dump", response_model=ExplorerView)
async def dump(
    request: DumpRequest,
    session: ExplorerSession = Depends(get_session_from_request),
):
    """Dump the path described by the submitted controls."""
    await session.submit(
        request.class_name,
        request.instance_index,
        request.property_path,
        max_items=request.max_items,
        mode=request.mode,
        name_filter=request.filter,
    )
    return build_view(session)


@router.post("/explorer/drill", response_model=ExplorerView)
async def drill(
    request: DrillRequest,
    session: ExplorerSession = Depends(get_session_from_request),
):
    """Descend into a drillable property of the current result."""
    await session.drill(request.name)
    return build_view(session)


@router.post("/explorer/breadcrumb", response_model=ExplorerView)
async def navigate_breadcrumb(
    request: BreadcrumbRequest,
    session: ExplorerSession = Depends(get_session_from_request),
):
    """Jump back to an earlier breadcrumb entry."""
    await session.navigate_breadcrumb(request.depth)
    return build_view(session)


@router.get("/explorer/presets", response_model=List[str])
async def list_presets():
    return config.PRESETS


@router.post("/explorer/preset", response_model=ExplorerView)
async def use_preset(
    request: PresetRequest,
    session: ExplorerSession = Depends(get_session_from_request),
):
    """Load a preset class into the controls without dumping."""
    session.use_preset(request.class_name)
    return build_view(session)


# ============================================================================
# Discovery Endpoints
# ============================================================================

@router.get("/discovery", response_model=DiscoveryResponse)
async def get_discovery(discovery: DiscoveryProbe = Depends(get_discovery_from_request)):
    """Cached discovery map (may be empty until the first probe)."""
    return _discovery_response(discovery)


@router.post("/discovery/probe", response_model=DiscoveryResponse)
async def run_probe(
    request: ProbeRequest,
    discovery: DiscoveryProbe = Depends(get_discovery_from_request),
):
    """Re-run the bridge's discovery battery and replace the cache."""
    try:
        result = await discovery.probe(force=request.force)
    except ProbeInProgressError as e:
        logger.info("Rejected probe request: %s", e)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=discovery.last_error or "Discovery probe failed",
        )
    return _discovery_response(discovery)


@router.get("/discovery/roles/{role}", response_model=RoleResponse)
async def resolve_role(
    role: str,
    discovery: DiscoveryProbe = Depends(get_discovery_from_request),
):
    """Concrete property path discovered for a semantic role."""
    path = discovery.resolve(role)
    if path is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Role '{role}' has not been discovered"
        )
    return RoleResponse(role=role, path=path)
