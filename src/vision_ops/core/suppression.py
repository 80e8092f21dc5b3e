"""
Greedy Non-Maximum Suppression over decoded candidates.
"""

import logging
from collections.abc import Sequence

from ..models import Candidate, Rect

logger = logging.getLogger(__name__)


def iou(a: Rect, b: Rect) -> float:
    """
    Calculate Intersection over Union (IoU) between two rectangles.

    Args:
        a: First rectangle
        b: Second rectangle

    Returns:
        IoU in [0, 1]; 0 when the rectangles do not intersect or either
        has no area
    """
    if a.is_degenerate or b.is_degenerate:
        return 0.0

    inter_w = min(a.right, b.right) - max(a.left, b.left)
    inter_h = min(a.bottom, b.bottom) - max(a.top, b.top)
    if inter_w <= 0 or inter_h <= 0:
        return 0.0

    intersection = inter_w * inter_h
    union = a.area + b.area - intersection
    return intersection / union


def suppress(candidates: Sequence[Candidate], overlap_threshold: float) -> list[int]:
    """
    Greedy NMS: keep the best remaining candidate, drop everything that
    overlaps it by more than overlap_threshold, repeat.

    Args:
        candidates: Candidates to suppress
        overlap_threshold: IoU above which the lower-confidence box is dropped

    Returns:
        Indices into candidates of the kept subset, highest confidence first
    """
    # Confidence descending, original index ascending on ties
    remaining = sorted(
        range(len(candidates)), key=lambda i: (-candidates[i].confidence, i)
    )

    kept: list[int] = []
    while remaining:
        best = remaining.pop(0)
        kept.append(best)
        best_box = candidates[best].box
        remaining = [
            i
            for i in remaining
            if _overlap(best_box, candidates[i].box) <= overlap_threshold
        ]

    logger.debug(f"NMS kept {len(kept)} of {len(candidates)} candidates")
    return kept


def _overlap(kept: Rect, other: Rect) -> float:
    """IoU, except a degenerate box only overlaps its exact duplicate."""
    if kept.is_degenerate or other.is_degenerate:
        return 1.0 if kept == other else 0.0
    return iou(kept, other)
