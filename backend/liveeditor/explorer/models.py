# backend/liveeditor/explorer/models.py
"""
Wire models for reflection bridge payloads.

Everything here is produced by the bridge and read-only to the dashboard.
Field names follow the bridge's JSON ("type", "value", "class"); the Python
attribute names are the descriptive ones.
"""

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .classify import ERROR_TAG, Classification, classify

# Probe value for a role the bridge could not resolve
NOT_FOUND = "NOT_FOUND"


class BridgeEnvelope(BaseModel):
    """Outer {success, message} wrapper shared by every bridge response."""
    success: bool = False
    message: Optional[Union[str, dict, list]] = None


# ============================================================================
# Property Dumps
# ============================================================================

class PropertyRecord(BaseModel):
    """One reflected property at the dumped path."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    declared_type: str = Field("", alias="type")
    raw_value_text: str = Field("", alias="value")
    byte_offset: Optional[int] = Field(None, alias="offset")

    @field_validator("raw_value_text", "declared_type", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def classify(self) -> Classification:
        return classify(self.declared_type, self.raw_value_text)

    @property
    def drillable(self) -> bool:
        return self.classify().drillable


class PropertyDump(BaseModel):
    """Decoded inner payload of a properties dump."""
    model_config = ConfigDict(populate_by_name=True)

    resolved_class_path: Optional[str] = Field(None, alias="class")
    instance_count: Optional[int] = None
    property_count: int = 0
    properties: List[PropertyRecord] = Field(default_factory=list)

    @property
    def item_count(self) -> int:
        return self.property_count or len(self.properties)

    def find(self, name: str) -> Optional[PropertyRecord]:
        for record in self.properties:
            if record.name == name:
                return record
        return None


# ============================================================================
# Function Dumps
# ============================================================================

class FunctionParam(BaseModel):
    name: str = ""
    type: str = ""
    direction: Literal["in", "out"] = "in"

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, value):
        return "out" if str(value or "").lower() == "out" else "in"


class FunctionRecord(BaseModel):
    """One callable operation reflected at the dumped path."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    parameters: List[FunctionParam] = Field(default_factory=list, alias="params")
    return_type: Optional[str] = None
    flags: List[str] = Field(default_factory=list)

    @field_validator("flags", mode="before")
    @classmethod
    def _split_flags(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split("|")
        if not isinstance(value, (list, tuple)):
            raise ValueError("flags must be a string or a list")
        return sorted({str(flag).strip() for flag in value if str(flag).strip()})

    @property
    def is_error(self) -> bool:
        return self.name.startswith(ERROR_TAG) or (self.return_type or "").startswith(ERROR_TAG)

    def signature(self) -> str:
        """Readable signature, e.g. "Heal(float Amount, out bool bOk) -> void"."""
        params = ", ".join(
            ("out " if p.direction == "out" else "") + f"{p.type} {p.name}".strip()
            for p in self.parameters
        )
        return f"{self.name}({params}) -> {self.return_type or 'void'}"


class FunctionDump(BaseModel):
    """Decoded inner payload of a functions dump."""
    model_config = ConfigDict(populate_by_name=True)

    resolved_class_path: Optional[str] = Field(None, alias="class")
    instance_count: Optional[int] = None
    function_count: int = 0
    functions: List[FunctionRecord] = Field(default_factory=list)

    @property
    def item_count(self) -> int:
        return self.function_count or len(self.functions)


# ============================================================================
# Auto-Discovery
# ============================================================================

class ProbeResult(BaseModel):
    """Role -> discovered property path map produced by one probe run."""
    properties: Dict[str, str] = Field(default_factory=dict)
    timestamp: Optional[Union[float, str]] = None

    @field_validator("properties", mode="before")
    @classmethod
    def _coerce_paths(cls, value):
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("properties must be an object")
        return {str(role): (NOT_FOUND if path is None else str(path)) for role, path in value.items()}

    def resolve(self, role: str) -> Optional[str]:
        """Concrete property path for `role`, or None when it was not found."""
        path = self.properties.get(role)
        if not path or path == NOT_FOUND:
            return None
        return path

    def found_roles(self) -> List[str]:
        return [role for role, path in self.properties.items() if path and path != NOT_FOUND]

    def missing_roles(self) -> List[str]:
        return [role for role, path in self.properties.items() if not path or path == NOT_FOUND]
