"""
Marker Renderer v1.0.0
======================
Turns a text and its markers into HTML with nested tags.

Markers become open/close boundary events that are swept left to right.
Overlapping markers produce nested tags; CSS then styles each nesting
level with increasing intensity (see get_default_styles).

The default sweep has no nesting stack, so it is only well-formed for
laminar marker sets (any two markers are disjoint or one contains the
other). Partially crossing markers produce interleaved tags. Pass
strict=True to split crossing tags so the output always nests.
"""

import html
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from config_logging import get_logger, get_config, ValidationError
from .models import Marker
from .tracker import compute_deep_diff

logger = get_logger('deep_diff.renderer')

_CLOSE = 0
_OPEN = 1

# Class names end up in CSS selectors as well as attributes
CLASS_NAME_RE = re.compile(r'^[A-Za-z0-9_-]+$')

BASE_COLOR = (144, 238, 144)  # Light green

MarkerLike = Union[Marker, Mapping[str, Any]]


def escape_html(text: str) -> str:
    """Escape &, <, > and double quotes for HTML text content."""
    return html.escape(text, quote=False).replace('"', '&quot;')


def _check_class_name(class_name: str) -> None:
    if class_name and not CLASS_NAME_RE.match(class_name):
        raise ValidationError(f"Invalid class name: {class_name!r}", field='class_name')


def coerce_marker(value: MarkerLike) -> Marker:
    """
    Accept a Marker or a mapping with start/end/enabled keys.

    Raises:
        ValidationError: If the mapping lacks integer bounds
    """
    if isinstance(value, Marker):
        return value
    if not isinstance(value, Mapping):
        raise ValidationError(f"Cannot use {type(value).__name__} as a marker", field='markers')

    start = value.get('start')
    end = value.get('end')
    if isinstance(start, bool) or isinstance(end, bool) \
            or not isinstance(start, int) or not isinstance(end, int):
        raise ValidationError("Marker start and end must be integers", field='markers')

    enabled = value.get('enabled', True)
    if not isinstance(enabled, bool):
        raise ValidationError("Marker enabled must be a boolean", field='markers')
    return Marker(start, end, enabled)


def _tags(tag_name: str, class_name: str) -> Tuple[str, str]:
    if not tag_name or not tag_name.isalnum():
        raise ValidationError(f"Invalid tag name: {tag_name!r}", field='tag_name')
    _check_class_name(class_name)
    if class_name:
        open_tag = f'<{tag_name} class="{class_name}">'
    else:
        open_tag = f'<{tag_name}>'
    return open_tag, f'</{tag_name}>'


def _sweep(text: str, markers: List[Marker], open_tag: str, close_tag: str) -> str:
    events = []
    for marker in markers:
        events.append((marker.start, _OPEN))
        events.append((marker.end + 1, _CLOSE))

    # Closes sort before opens at the same position
    events.sort()

    parts = []
    pos = 0
    for index, kind in events:
        if index > pos:
            parts.append(escape_html(text[pos:index]))
            pos = index
        parts.append(open_tag if kind == _OPEN else close_tag)

    if pos < len(text):
        parts.append(escape_html(text[pos:]))

    return ''.join(parts)


def _sweep_strict(text: str, markers: List[Marker], open_tag: str, close_tag: str) -> str:
    events = []
    for ident, marker in enumerate(markers):
        # Outer markers (later end) open first; the latest opened closes first
        events.append((marker.start, _OPEN, -marker.end, ident, ident))
        events.append((marker.end + 1, _CLOSE, -marker.start, -ident, ident))
    events.sort()

    parts = []
    stack: List[int] = []
    pos = 0
    for index, kind, _, _, ident in events:
        if index > pos:
            parts.append(escape_html(text[pos:index]))
            pos = index

        if kind == _OPEN:
            stack.append(ident)
            parts.append(open_tag)
            continue

        # Close the tags opened inside this one, then reopen them
        depth = stack.index(ident)
        reopened = stack[depth + 1:]
        parts.append(close_tag * (len(reopened) + 1))
        parts.append(open_tag * len(reopened))
        del stack[depth]

    if pos < len(text):
        parts.append(escape_html(text[pos:]))

    return ''.join(parts)


def render_with_markers(
    text: str,
    markers: Iterable[MarkerLike],
    tag_name: Optional[str] = None,
    class_name: Optional[str] = None,
    strict: Optional[bool] = None
) -> str:
    """
    Render text with markers as HTML with nested tags.

    Args:
        text: The final revision text
        markers: Markers over text; disabled ones are ignored
        tag_name: HTML tag wrapping each marker (default 'ins')
        class_name: CSS class for the tags; empty string omits the attribute
        strict: Split crossing markers so tags always nest properly

    Returns:
        HTML string
    """
    config = get_config()
    tag_name = config.tag_name if tag_name is None else tag_name
    class_name = config.class_name if class_name is None else class_name
    strict = config.strict_nesting if strict is None else strict

    open_tag, close_tag = _tags(tag_name, class_name)

    active = [m for m in (coerce_marker(v) for v in markers)
              if m.enabled and m.length > 0]
    if not active:
        return escape_html(text)

    if strict:
        return _sweep_strict(text, active, open_tag, close_tag)
    return _sweep(text, active, open_tag, close_tag)


def deep_diff_html(
    revisions: Sequence[str],
    skip_empty: Optional[bool] = None,
    timeout: Optional[float] = None,
    tag_name: Optional[str] = None,
    class_name: Optional[str] = None,
    strict: Optional[bool] = None
) -> str:
    """Compute the deep diff of revisions and render it as HTML."""
    result = compute_deep_diff(revisions, skip_empty=skip_empty, timeout=timeout)
    return render_with_markers(result.text, result.markers, tag_name=tag_name,
                               class_name=class_name, strict=strict)


def get_default_styles(
    max_depth: Optional[int] = None,
    class_name: Optional[str] = None,
    base_color: Tuple[int, int, int] = BASE_COLOR
) -> str:
    """
    CSS giving nested markers increasing background intensity.

    Depth 1 uses alpha 0.3; each further level adds 0.15, capped at 0.9.
    """
    config = get_config()
    max_depth = config.max_style_depth if max_depth is None else max_depth
    class_name = config.class_name if class_name is None else class_name
    _check_class_name(class_name)

    selector = f'.{class_name}' if class_name else config.tag_name
    rgb = ','.join(str(c) for c in base_color)

    lines = [f'{selector} {{ background-color: rgba({rgb}, 0.3); }}']
    for depth in range(2, max_depth + 1):
        intensity = round(min(0.3 + (depth - 1) * 0.15, 0.9), 2)
        nested = ' '.join([selector] * depth)
        lines.append(f'{nested} {{ background-color: rgba({rgb}, {intensity}); }}')

    return '\n'.join(lines) + '\n'


PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: sans-serif; line-height: 1.5; white-space: pre-wrap; }}
{styles}</style>
</head>
<body>
{body}
</body>
</html>
"""


def render_page(
    revisions: Sequence[str],
    title: str = "Deep diff",
    skip_empty: Optional[bool] = None,
    timeout: Optional[float] = None,
    tag_name: Optional[str] = None,
    class_name: Optional[str] = None,
    strict: Optional[bool] = None,
    max_depth: Optional[int] = None
) -> str:
    """Standalone HTML document: deep diff body plus default styles."""
    body = deep_diff_html(revisions, skip_empty=skip_empty, timeout=timeout,
                          tag_name=tag_name, class_name=class_name, strict=strict)
    styles = get_default_styles(max_depth=max_depth, class_name=class_name)
    logger.debug(f"Rendered page '{title}' ({len(body)} chars)")
    return PAGE_TEMPLATE.format(title=escape_html(title), styles=styles, body=body)
