"""
Deep Diff Module v1.0.0
=======================
Cumulative change visualisation across multiple text revisions.

Regions that were edited in one revision are tracked as markers through
every later revision; regions edited again gain further markers. The
final text is rendered with one nested tag per marker, so nesting depth
shows how often a passage was reworked.

Features:
- Marker tracking through diff-match-patch edit operations
- Nested <ins> rendering with optional strict (always well-formed) nesting
- Default CSS with intensity increasing per nesting level
- Flask blueprint and command line front ends
"""

from .models import OpKind, EditOp, Marker, DeepDiffResult
from .differ import RevisionDiffer, diff_and_clean
from .tracker import (
    transform_marker,
    transform_markers,
    generate_insertion_markers,
    normalize_revisions,
    compute_deep_diff
)
from .renderer import (
    escape_html,
    render_with_markers,
    deep_diff_html,
    get_default_styles,
    render_page
)

__version__ = "1.0.0"
__all__ = [
    'OpKind',
    'EditOp',
    'Marker',
    'DeepDiffResult',
    'RevisionDiffer',
    'diff_and_clean',
    'transform_marker',
    'transform_markers',
    'generate_insertion_markers',
    'normalize_revisions',
    'compute_deep_diff',
    'escape_html',
    'render_with_markers',
    'deep_diff_html',
    'get_default_styles',
    'render_page'
]
