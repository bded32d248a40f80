# backend/liveeditor/explorer/breadcrumb.py
from dataclasses import dataclass
from typing import List

from .path import ExplorerPath


@dataclass(frozen=True)
class BreadcrumbEntry:
    """One waypoint of the trail; `resolved_path` jumps straight back to it."""
    label: str
    resolved_path: ExplorerPath
    current: bool = False

    @property
    def depth(self) -> int:
        return self.resolved_path.depth


def build_breadcrumb(path: ExplorerPath) -> List[BreadcrumbEntry]:
    """
    Derive the breadcrumb trail for `path`.

    The first entry is the root instance ("PalPlayerState[0]"), followed by one
    entry per segment labelled with that segment's name alone. The trail always
    has `path.depth + 1` entries and only the last one is current.
    """
    entries = [BreadcrumbEntry(label=path.label, resolved_path=path.resolve_breadcrumb(0))]
    for i, segment in enumerate(path.segments):
        entries.append(
            BreadcrumbEntry(label=segment, resolved_path=path.resolve_breadcrumb(i + 1))
        )

    last = entries[-1]
    entries[-1] = BreadcrumbEntry(label=last.label, resolved_path=last.resolved_path, current=True)
    return entries
