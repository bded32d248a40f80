# backend/liveeditor/explorer/path.py
"""
ExplorerPath - the address of the current position in the remote object graph.

A path is a root class name, an instance selector and a chain of property
names. It is a pure value: navigation always builds a new path, and the bridge
resolves it from scratch on every request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

PATH_SEPARATOR = "."


@dataclass(frozen=True)
class ExplorerPath:
    """
    Immutable address inside the remote object graph.

    Usage:
        path = ExplorerPath.root("PalPlayerState", 0)
        path = path.descend("PlayerCharacter").descend("CharacterParameterComponent")
        path.to_request_path()  # "PlayerCharacter.CharacterParameterComponent"
    """

    root_type: str
    instance_index: int = 0
    segments: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.instance_index < 0:
            raise ValueError(f"Instance index must be >= 0, got {self.instance_index}")
        for segment in self.segments:
            if not segment or PATH_SEPARATOR in segment:
                raise ValueError(f"Invalid path segment: {segment!r}")

    # ---------- Construction ----------

    @classmethod
    def root(cls, root_type: str, instance_index: int = 0) -> "ExplorerPath":
        """Path pointing at an instance itself (no property segments)."""
        return cls(root_type=root_type.strip(), instance_index=instance_index)

    @classmethod
    def parse(
        cls, root_type: str, instance_index: int = 0, property_path: str = ""
    ) -> "ExplorerPath":
        """
        Build a path from operator-entered controls.

        The dotted property path is split on "." and empty pieces are dropped,
        so "Foo..Bar." and "Foo.Bar" address the same property.
        """
        segments = tuple(
            piece.strip()
            for piece in (property_path or "").split(PATH_SEPARATOR)
            if piece.strip()
        )
        return cls(
            root_type=root_type.strip(),
            instance_index=instance_index,
            segments=segments,
        )

    # ---------- Navigation ----------

    def descend(self, property_name: str) -> "ExplorerPath":
        """
        Path one level deeper, through `property_name`.

        A blank name is rejected before anything is built: the same path comes
        back unchanged.
        """
        name = (property_name or "").strip()
        if not name:
            return self
        return ExplorerPath(
            root_type=self.root_type,
            instance_index=self.instance_index,
            segments=self.segments + (name,),
        )

    def resolve_breadcrumb(self, depth: int) -> "ExplorerPath":
        """Truncate to the first `depth` segments (0 = the root instance)."""
        depth = max(0, min(depth, len(self.segments)))
        return ExplorerPath(
            root_type=self.root_type,
            instance_index=self.instance_index,
            segments=self.segments[:depth],
        )

    # ---------- Serialization ----------

    def to_request_path(self) -> Optional[str]:
        """
        Dotted property path for the bridge, or None at the root.

        None means "omit the field": the bridge treats a missing property_path
        as "dump the instance" and an empty one differently.
        """
        if not self.segments:
            return None
        return PATH_SEPARATOR.join(self.segments)

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def label(self) -> str:
        """Short "<root>[<index>]" label used for the first breadcrumb."""
        return f"{self.root_type}[{self.instance_index}]"

    def __str__(self) -> str:
        request_path = self.to_request_path()
        if request_path is None:
            return self.label
        return f"{self.label}.{request_path}"
