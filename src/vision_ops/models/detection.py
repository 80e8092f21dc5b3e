"""
Detection data models - rectangles, candidates, and final results.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle in original-image pixel space.

    Attributes:
        left: X coordinate of the top-left corner
        top: Y coordinate of the top-left corner
        width: Width in pixels (>= 0)
        height: Height in pixels (>= 0)
    """

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def area(self) -> int:
        if self.is_degenerate:
            return 0
        return self.width * self.height

    @property
    def is_degenerate(self) -> bool:
        """True when the rectangle has no spatial extent."""
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class Candidate:
    """
    One proposed detection before suppression.

    Attributes:
        box: Bounding box in original-image pixels
        class_id: Index of the winning class score
        confidence: Winning class score, in (0, 1]
    """

    box: Rect
    class_id: int
    confidence: float


@dataclass(frozen=True)
class DetectionResult:
    """Surviving candidates after suppression, highest confidence first."""

    candidates: tuple[Candidate, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.candidates)

    def __iter__(self):
        return iter(self.candidates)

    def __getitem__(self, index: int) -> Candidate:
        return self.candidates[index]

    def to_records(self, class_names: list[str]) -> list[dict[str, Any]]:
        """
        Render detections as JSON-ready dicts.

        Args:
            class_names: Class names indexed by class id

        Returns:
            One dict per detection with class, confidence and box
        """
        return [
            {
                "class_id": c.class_id,
                "class_name": class_names[c.class_id],
                "confidence": round(c.confidence, 4),
                "box": {
                    "left": c.box.left,
                    "top": c.box.top,
                    "width": c.box.width,
                    "height": c.box.height,
                },
            }
            for c in self.candidates
        ]
