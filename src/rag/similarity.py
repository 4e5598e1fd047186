from __future__ import annotations

"""Vector similarity scoring."""

import math
from typing import Sequence

from src.rag.types import SimilarityMeasure


class InvalidInputError(ValueError):
    """Raised when vectors cannot be compared."""
    pass


def score(x: Sequence[float], y: Sequence[float], measure: SimilarityMeasure) -> float:
    """Score two vectors under the selected measure.

    Cosine similarity against a zero-norm vector is defined as 0.0.
    """
    if len(x) != len(y):
        raise InvalidInputError(f"Vector length mismatch: {len(x)} != {len(y)}")
    dot = sum(a * b for a, b in zip(x, y))
    if measure == "dot":
        return dot
    if measure != "cosine":
        raise InvalidInputError(f"Unsupported similarity measure: {measure}")
    norm_x = math.sqrt(sum(a * a for a in x))
    norm_y = math.sqrt(sum(b * b for b in y))
    if norm_x == 0.0 or norm_y == 0.0:
        return 0.0
    return dot / (norm_x * norm_y)
