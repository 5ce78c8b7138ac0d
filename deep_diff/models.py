"""
Deep Diff Models v1.0.0
=======================
Data classes for edit operations, tracked markers and deep diff results.
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import List, Dict, Tuple, Any


class OpKind(IntEnum):
    """Classification of a diff span, using diff-match-patch's codes."""
    DELETED = -1
    KEPT = 0
    INSERTED = 1


@dataclass(frozen=True)
class EditOp:
    """
    One classified span from a pairwise comparison of two revisions.

    In an ordered sequence for (old, new), the KEPT + INSERTED texts
    concatenate to the new revision and the KEPT + DELETED texts
    concatenate to the old one.
    """
    kind: OpKind
    text: str

    @property
    def length(self) -> int:
        return len(self.text)

    @classmethod
    def from_tuple(cls, diff: Tuple[int, str]) -> 'EditOp':
        """Build from a diff-match-patch ``(op, text)`` tuple."""
        op, text = diff
        return cls(OpKind(op), text)


@dataclass(frozen=True)
class Marker:
    """
    A tracked region of one revision's text.

    Bounds are inclusive. As later revisions insert or delete text, a
    marker is shifted, expanded or contracted to keep tracking "the same"
    logical region; once a deletion swallows it the marker is disabled
    for good.

    Attributes:
        start: First tracked character offset
        end: Last tracked character offset (inclusive)
        enabled: False once the region has been fully deleted
    """
    start: int
    end: int
    enabled: bool = True

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def shift(self, delta: int) -> 'Marker':
        """Move both bounds by ``delta``."""
        return replace(self, start=self.start + delta, end=self.end + delta)

    def expand(self, delta: int) -> 'Marker':
        """Grow the marker at its end."""
        return replace(self, end=self.end + delta)

    def contract(self, delta: int) -> 'Marker':
        """Shrink the marker at its end, disabling it when nothing is left."""
        shrunk = replace(self, end=self.end - delta)
        if shrunk.length <= 0:
            return shrunk.disable()
        return shrunk

    def disable(self) -> 'Marker':
        return replace(self, enabled=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'start': self.start,
            'end': self.end,
            'enabled': self.enabled,
            'length': self.length
        }


@dataclass
class DeepDiffResult:
    """
    Final revision text together with its surviving markers.

    Attributes:
        text: The last usable revision (trimmed)
        markers: Enabled markers, inclusive offsets into ``text``
        revision_count: Number of revisions that took part in the diff
    """
    text: str
    markers: List[Marker] = field(default_factory=list)
    revision_count: int = 0

    def marked_segments(self) -> List[Tuple[Marker, str]]:
        """Pair each marker with the slice of text it covers."""
        return [(m, self.text[m.start:m.end + 1]) for m in self.markers]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'text': self.text,
            'markers': [m.to_dict() for m in self.markers],
            'marker_count': len(self.markers),
            'revision_count': self.revision_count
        }
