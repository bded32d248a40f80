# backend/liveeditor/explorer/render.py
"""
View model for the Explorer panel.

Turns an ExplorerSession into plain, serializable rows for the browser. This
module only reads session state; clicks come back through the session's
`drill` and `navigate_breadcrumb` actions.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .classify import ValueCategory
from .models import FunctionDump, FunctionRecord, PropertyDump, PropertyRecord
from .session import ExplorerSession

VALUE_PREVIEW_LENGTH = 120


# ============================================================================
# View Models
# ============================================================================

class StatusView(BaseModel):
    text: str
    kind: str
    loading: bool = False
    updated: Optional[str] = None
    elapsed_seconds: Optional[float] = None


class BreadcrumbItem(BaseModel):
    label: str
    depth: int
    property_path: Optional[str] = None
    clickable: bool = True


class ResultsInfo(BaseModel):
    visible: bool = False
    class_path: str = "?"
    instances: str = "?"
    shown: int = 0
    noun: str = "Properties"


class PropertyRow(BaseModel):
    offset: str
    type: str
    name: str
    value: str
    full_value: str
    value_class: str
    drillable: bool
    error: bool


class FunctionRow(BaseModel):
    name: str
    signature: str
    return_type: Optional[str] = None
    flags: List[str] = []
    error: bool = False


class ControlsView(BaseModel):
    class_name: str
    instance_index: int
    property_path: str = ""
    max_items: int
    mode: str
    filter: Optional[str] = None


class ExplorerView(BaseModel):
    controls: ControlsView
    status: StatusView
    breadcrumb: List[BreadcrumbItem] = []
    results_info: ResultsInfo = Field(default_factory=ResultsInfo)
    properties: List[PropertyRow] = []
    functions: List[FunctionRow] = []
    empty_message: Optional[str] = None
    error: Optional[str] = None


# ============================================================================
# Formatting Helpers
# ============================================================================

def format_offset(offset: Optional[int]) -> str:
    if offset is None:
        return "0x????"
    return f"0x{offset:04X}"


def truncate(text: Optional[str], limit: int = VALUE_PREVIEW_LENGTH) -> str:
    if not text:
        return ""
    return text[:limit] + "..." if len(text) > limit else text


def property_row(record: PropertyRecord) -> PropertyRow:
    classification = record.classify()
    return PropertyRow(
        offset=format_offset(record.byte_offset),
        type=record.declared_type,
        name=record.name,
        value=truncate(record.raw_value_text),
        full_value=record.raw_value_text,
        value_class=classification.category.value,
        drillable=classification.drillable,
        error=classification.category is ValueCategory.ERROR,
    )


def function_row(record: FunctionRecord) -> FunctionRow:
    return FunctionRow(
        name=record.name,
        signature=record.signature(),
        return_type=record.return_type,
        flags=list(record.flags),
        error=record.is_error,
    )


# ============================================================================
# View Builder
# ============================================================================

def build_view(session: ExplorerSession) -> ExplorerView:
    """Snapshot the session as an ExplorerView."""
    selected = session.selected
    view = ExplorerView(
        controls=ControlsView(
            class_name=selected.path.root_type,
            instance_index=selected.path.instance_index,
            property_path=selected.path.to_request_path() or "",
            max_items=selected.max_items,
            mode=selected.mode.value,
            filter=selected.name_filter,
        ),
        status=StatusView(
            text=session.status.text,
            kind=session.status.kind.value,
            loading=session.loading,
            updated=session.updated_at.strftime("%H:%M:%S") if session.updated_at else None,
            elapsed_seconds=round(session.elapsed, 2) if session.elapsed is not None else None,
        ),
        breadcrumb=[
            BreadcrumbItem(
                label=entry.label,
                depth=entry.depth,
                property_path=entry.resolved_path.to_request_path(),
                clickable=not entry.current,
            )
            for entry in session.breadcrumb
        ],
    )

    if session.error is not None:
        view.error = session.error
        view.empty_message = session.error
        return view

    result = session.result
    if isinstance(result, PropertyDump):
        view.results_info = ResultsInfo(
            visible=True,
            class_path=result.resolved_class_path or "?",
            instances=str(result.instance_count or "?"),
            shown=result.item_count,
            noun="Properties",
        )
        view.properties = [property_row(record) for record in result.properties]
        if not view.properties:
            view.empty_message = "No properties found at this path."

    elif isinstance(result, FunctionDump):
        view.functions = [function_row(record) for record in result.functions]
        if view.functions:
            view.results_info = ResultsInfo(
                visible=True,
                class_path=result.resolved_class_path or "?",
                instances=str(result.instance_count or "?"),
                shown=result.item_count,
                noun="Functions",
            )
        else:
            name_filter = session.result_target.name_filter if session.result_target else None
            if name_filter:
                view.empty_message = f"No functions found matching filter '{name_filter}'."
            else:
                view.empty_message = "No functions found at this path."

    return view
