"""
Similarity utilities — cosine similarity over sparse genre vectors.
"""

from typing import Dict

import numpy as np


def cosine_similarity(v1: Dict[int, float], v2: Dict[int, float]) -> float:
    """
    Cosine similarity between two sparse genre vectors over the union of keys.

    Absent keys count as 0. Returns 0 if either vector has zero magnitude.
    """
    if not v1 or not v2:
        return 0.0
    keys = sorted(set(v1) | set(v2))
    a = np.array([v1.get(k, 0.0) for k in keys], dtype=float)
    b = np.array([v2.get(k, 0.0) for k in keys], dtype=float)
    norm_product = np.linalg.norm(a) * np.linalg.norm(b)
    if norm_product == 0:
        return 0.0
    # Rounding can push identical vectors a hair past 1.
    return float(np.clip(np.dot(a, b) / norm_product, -1.0, 1.0))
