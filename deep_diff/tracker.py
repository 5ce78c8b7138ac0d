"""
Marker Tracker v1.0.0
=====================
Carries edited regions ("markers") through a chain of revisions.

Every pass diffs two consecutive revisions, restates the markers that
survived so far in the newer revision's coordinates, then adds one new
marker per inserted span. Regions that keep being edited end up covered
by several overlapping markers, which is what the renderer turns into
nesting depth.

Each marker replays the whole op sequence on its own, so the cost of a
pass is O(markers x ops); for long revision chains the marker count,
and with it this product, is the dominant cost.
"""

from typing import Callable, Iterable, List, Optional, Sequence

from config_logging import get_logger, get_config, ValidationError
from .differ import RevisionDiffer
from .models import DeepDiffResult, EditOp, Marker, OpKind

logger = get_logger('deep_diff.tracker')

DiffFunction = Callable[[str, str], List[EditOp]]


def transform_marker(marker: Marker, ops: Iterable[EditOp]) -> Marker:
    """
    Restate one marker in the coordinates of the revision ops produce.

    The cursor walks the new text: kept and inserted spans advance it,
    deleted spans do not. Each comparison uses the bounds as already
    updated by earlier ops in the same walk.

    Args:
        marker: Marker in the old revision's coordinates
        ops: Edit operations from the old revision to the new one

    Returns:
        The transformed marker (disabled if a deletion swallowed it)
    """
    if not marker.enabled:
        return marker

    index = 0
    for op in ops:
        length = op.length

        if op.kind == OpKind.INSERTED:
            if index <= marker.start:
                marker = marker.shift(length)
            elif index <= marker.end:
                marker = marker.expand(length)
            index += length

        elif op.kind == OpKind.DELETED:
            del_end = index + length - 1

            if del_end < marker.start:
                marker = marker.shift(-length)
            elif index > marker.end:
                pass
            elif index <= marker.start and del_end >= marker.end:
                return marker.disable()
            elif index <= marker.start:
                # Deletion clips the head of the marker
                overlap = del_end - marker.start + 1
                marker = marker.shift(-(marker.start - index)).contract(overlap)
            elif del_end >= marker.end:
                # Deletion clips the tail of the marker
                marker = marker.contract(marker.end - index + 1)
            else:
                marker = marker.contract(length)

            if not marker.enabled:
                return marker

        else:
            index += length

    return marker


def transform_markers(markers: List[Marker], ops: Sequence[EditOp]) -> List[Marker]:
    """
    Transform every marker of a marker set in place.

    The set is reordered by ascending start for deterministic output;
    each marker's walk is independent of the others.

    Returns:
        The same list object, for chaining
    """
    markers.sort(key=lambda m: m.start)
    for i, marker in enumerate(markers):
        markers[i] = transform_marker(marker, ops)
    return markers


def generate_insertion_markers(ops: Iterable[EditOp]) -> List[Marker]:
    """
    Create one marker per inserted span, in the new revision's coordinates.

    Deleted spans do not exist in the new text and do not move the cursor.
    """
    new_markers = []
    index = 0
    for op in ops:
        if op.kind == OpKind.INSERTED:
            new_markers.append(Marker(index, index + op.length - 1))
            index += op.length
        elif op.kind == OpKind.KEPT:
            index += op.length
    return new_markers


def normalize_revisions(revisions: Sequence[str], skip_empty: bool = True) -> List[str]:
    """Trim every revision and optionally drop the ones left empty."""
    texts = [r.strip() for r in revisions]
    if skip_empty:
        texts = [t for t in texts if t]
    return texts


def _validate_revisions(revisions) -> None:
    if isinstance(revisions, (str, bytes)) or not isinstance(revisions, (list, tuple)):
        raise ValidationError("revisions must be a list of strings", field='revisions')
    for position, revision in enumerate(revisions):
        if not isinstance(revision, str):
            raise ValidationError(
                f"Revision {position} is {type(revision).__name__}, expected str",
                field='revisions', position=position
            )


def compute_deep_diff(
    revisions: Sequence[str],
    skip_empty: Optional[bool] = None,
    timeout: Optional[float] = None,
    diff_fn: Optional[DiffFunction] = None
) -> DeepDiffResult:
    """
    Compute cumulative change markers across revisions.

    Args:
        revisions: Revision texts, oldest first
        skip_empty: Drop revisions that are empty once trimmed
            (blanked pages are usually vandalism, not edits)
        timeout: Seconds allowed per pairwise diff
        diff_fn: Replacement diff engine taking (old, new) and returning
            EditOps; defaults to diff-match-patch

    Returns:
        DeepDiffResult with the last revision and its enabled markers

    Raises:
        ValidationError: If revisions is not a list of strings or the
            timeout is negative
    """
    config = get_config()
    skip_empty = config.skip_empty if skip_empty is None else skip_empty
    timeout = config.timeout if timeout is None else timeout

    _validate_revisions(revisions)
    if timeout < 0:
        raise ValidationError("timeout must not be negative", field='timeout')

    texts = normalize_revisions(revisions, skip_empty)
    if len(texts) < 2:
        logger.debug(f"Only {len(texts)} usable revision(s), nothing to diff")
        return DeepDiffResult(text=texts[0] if texts else '', markers=[],
                              revision_count=len(texts))

    if diff_fn is None:
        diff_fn = RevisionDiffer(timeout=timeout).diff

    markers: List[Marker] = []

    with logger.log_operation('compute_deep_diff', revisions=len(texts)):
        for i in range(1, len(texts)):
            ops = diff_fn(texts[i - 1], texts[i])

            transform_markers(markers, ops)
            born = generate_insertion_markers(ops)
            markers.extend(born)

            logger.debug(
                f"Pass {i}: {len(ops)} ops, {len(born)} new markers, "
                f"{sum(1 for m in markers if m.enabled)} enabled",
                revision_pass=i, op_count=len(ops), new_markers=len(born)
            )

    return DeepDiffResult(
        text=texts[-1],
        markers=[m for m in markers if m.enabled],
        revision_count=len(texts)
    )
