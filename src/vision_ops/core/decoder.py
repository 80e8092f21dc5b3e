"""
Detection Decoder - turns raw network output tensors into candidates.

Each tensor row is one proposal laid out as
[center_x, center_y, width, height, objectness, class_scores...]
in network-input coordinates. The winning class score is the row's
confidence; rows at or below the threshold are dropped.
"""

import logging
from collections.abc import Sequence

import numpy as np

from ..errors import ConfigurationError
from ..models import Candidate, Rect
from ..utils.constants import BOX_FIELD_COUNT

logger = logging.getLogger(__name__)


def decode(
    tensors: Sequence[np.ndarray],
    image_width: int,
    image_height: int,
    input_width: int,
    input_height: int,
    confidence_threshold: float,
) -> list[Candidate]:
    """
    Decode raw detection tensors into candidates in image pixel space.

    Args:
        tensors: Raw output tensors from one forward pass
        image_width: Width of the original image
        image_height: Height of the original image
        input_width: Network input width the tensors are expressed in
        input_height: Network input height the tensors are expressed in
        confidence_threshold: Rows with confidence <= this are rejected

    Returns:
        Candidates in tensor order, then row order

    Raises:
        ConfigurationError: If any dimension is not positive
    """
    if min(image_width, image_height, input_width, input_height) <= 0:
        raise ConfigurationError(
            f"Invalid decode dimensions: image {image_width}x{image_height}, "
            f"network input {input_width}x{input_height}"
        )

    scale_x = image_width / input_width
    scale_y = image_height / input_height

    candidates: list[Candidate] = []
    for tensor in tensors:
        candidates.extend(
            _decode_tensor(tensor, scale_x, scale_y, confidence_threshold)
        )

    logger.debug(f"Decoded {len(candidates)} candidates from {len(tensors)} tensors")
    return candidates


def _decode_tensor(
    tensor: np.ndarray, scale_x: float, scale_y: float, threshold: float
) -> list[Candidate]:
    """Decode one tensor. Degenerate tensors yield nothing."""
    rows = np.asarray(tensor, dtype=np.float32)
    if rows.ndim == 0 or rows.size == 0:
        return []
    if rows.ndim != 2:
        rows = rows.reshape(-1, rows.shape[-1])
    if rows.shape[1] <= BOX_FIELD_COUNT:
        return []

    scores = rows[:, BOX_FIELD_COUNT:]
    class_ids = np.argmax(scores, axis=1)  # first index wins ties
    confidences = scores[np.arange(len(rows)), class_ids]

    keep = np.flatnonzero(confidences > threshold)

    candidates = []
    for i in keep:
        center_x, center_y, width, height = rows[i, :4]
        candidates.append(
            Candidate(
                box=_to_rect(
                    center_x * scale_x,
                    center_y * scale_y,
                    width * scale_x,
                    height * scale_y,
                ),
                class_id=int(class_ids[i]),
                confidence=float(confidences[i]),
            )
        )
    return candidates


def _to_rect(center_x: float, center_y: float, width: float, height: float) -> Rect:
    """Convert center+size to top-left+size, truncating to whole pixels."""
    return Rect(
        left=int(center_x - width / 2),
        top=int(center_y - height / 2),
        width=max(0, int(width)),
        height=max(0, int(height)),
    )
