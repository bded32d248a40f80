# backend/liveeditor/explorer/classify.py
"""
Value classification for reflected properties.

Maps a property's declared type and its serialized value to a render category
and decides whether the property may be drilled into. The remote type universe
is open-ended, so unknown types degrade to an opaque, non-drillable value.
"""

from dataclasses import dataclass
from enum import Enum

# Prefix the bridge puts on values it failed to read
ERROR_TAG = "ERROR:"

# Serialized form of a null reference
NULL_SENTINEL = "nil"

NUMERIC_TYPES = frozenset({
    "IntProperty",
    "Int8Property",
    "Int16Property",
    "Int64Property",
    "UInt16Property",
    "UInt32Property",
    "UInt64Property",
    "ByteProperty",
    "FloatProperty",
    "DoubleProperty",
})

BOOL_TYPE = "BoolProperty"

TEXT_TYPES = frozenset({"StrProperty", "NameProperty", "TextProperty"})

OBJECT_TYPES = frozenset({"ObjectProperty", "ClassProperty", "StructProperty"})


class ValueCategory(Enum):
    """Render category of a property value (values double as CSS classes)."""
    NUMERIC = "numeric"
    BOOL_TRUE = "bool-true"
    BOOL_FALSE = "bool-false"
    TEXT = "text"
    ERROR = "error"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class Classification:
    category: ValueCategory
    drillable: bool


def is_error_value(raw_value: str | None) -> bool:
    return bool(raw_value) and raw_value.startswith(ERROR_TAG)


def is_drillable(declared_type: str, raw_value: str | None) -> bool:
    """
    True only for object/struct/class references with a usable value.

    Both conditions are required: a dangling, null or unreadable reference is
    never offered as a navigation target.
    """
    if declared_type not in OBJECT_TYPES:
        return False
    if not raw_value or raw_value == NULL_SENTINEL:
        return False
    return not is_error_value(raw_value)


def classify(declared_type: str, raw_value: str | None) -> Classification:
    """Classify one property row. Never raises."""
    drillable = is_drillable(declared_type, raw_value)

    if not raw_value:
        return Classification(ValueCategory.OPAQUE, drillable)
    if is_error_value(raw_value):
        return Classification(ValueCategory.ERROR, drillable)

    if declared_type in NUMERIC_TYPES:
        category = ValueCategory.NUMERIC
    elif declared_type == BOOL_TYPE:
        category = ValueCategory.BOOL_TRUE if raw_value == "true" else ValueCategory.BOOL_FALSE
    elif declared_type in TEXT_TYPES:
        category = ValueCategory.TEXT
    else:
        category = ValueCategory.OPAQUE

    return Classification(category, drillable)
