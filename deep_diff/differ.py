"""
Revision Differ v1.0.0
======================
Character-level edit operations between two revisions.

Uses diff-match-patch with semantic and efficiency cleanup so that
trivial interleaved edits are merged into human-sized spans before the
marker tracker sees them.
"""

from typing import List, Optional

import diff_match_patch as dmp_module

from config_logging import get_logger, get_config
from .models import EditOp

logger = get_logger('deep_diff.differ')


class RevisionDiffer:
    """
    Thin wrapper over diff-match-patch producing EditOp sequences.

    The timeout is a cooperative budget inside diff-match-patch: when it
    runs out the library returns a coarser but still valid diff instead
    of raising.
    """

    def __init__(self, timeout: Optional[float] = None, edit_cost: Optional[int] = None):
        """
        Initialize the differ.

        Args:
            timeout: Seconds allowed per diff (0 means unbounded)
            edit_cost: Cost of an empty edit for efficiency cleanup
        """
        config = get_config()
        self.timeout = config.timeout if timeout is None else timeout
        self.edit_cost = config.edit_cost if edit_cost is None else edit_cost

        self.dmp = dmp_module.diff_match_patch()
        self.dmp.Diff_Timeout = self.timeout
        self.dmp.Diff_EditCost = self.edit_cost

    def diff(self, old_text: str, new_text: str) -> List[EditOp]:
        """
        Compute cleaned-up edit operations turning old_text into new_text.

        Args:
            old_text: Previous revision
            new_text: Next revision

        Returns:
            Ordered list of EditOp
        """
        diffs = self.dmp.diff_main(old_text, new_text)
        self.dmp.diff_cleanupSemantic(diffs)
        self.dmp.diff_cleanupEfficiency(diffs)

        ops = [EditOp.from_tuple(d) for d in diffs if d[1]]
        logger.debug(f"Diffed {len(old_text)} -> {len(new_text)} chars into {len(ops)} ops",
                     old_length=len(old_text), new_length=len(new_text), op_count=len(ops))
        return ops


# Convenience function
def diff_and_clean(
    old_text: str,
    new_text: str,
    timeout: Optional[float] = None,
    edit_cost: Optional[int] = None
) -> List[EditOp]:
    """
    Compute edit operations between two texts.

    Args:
        old_text: Previous revision
        new_text: Next revision
        timeout: Seconds allowed for the diff
        edit_cost: Efficiency cleanup edit cost

    Returns:
        Ordered list of EditOp
    """
    return RevisionDiffer(timeout=timeout, edit_cost=edit_cost).diff(old_text, new_text)
