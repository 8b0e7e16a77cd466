"""
Greedy embedding clustering.

Single pass in seed order rather than an optimal partition; inputs are tens of
entries. Callers take the clusterer as a parameter so a union-find or k-NN
index can replace it.
"""

from typing import Callable, List, Optional, Sequence

import numpy as np

from reflector.models import EnrichedEntry

DEFAULT_THRESHOLD = 0.8

Clusterer = Callable[[Sequence[EnrichedEntry]], List[List[EnrichedEntry]]]


def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """
    Cosine similarity of two vectors.

    Missing vectors, mismatched lengths and zero-norm vectors all give 0.
    """
    if a is None or b is None or len(a) != len(b) or len(a) == 0:
        return 0.0

    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if not norm_a or not norm_b:
        return 0.0
    # rounding absorbs float error so identical vectors score exactly 1.0
    similarity = round(float(np.dot(va, vb) / (norm_a * norm_b)), 12)
    return max(-1.0, min(1.0, similarity))


def cluster_by_similarity(
    entries: Sequence[EnrichedEntry],
    threshold: float = DEFAULT_THRESHOLD,
) -> List[List[EnrichedEntry]]:
    """Group entries whose embeddings are at least `threshold` similar to a seed."""
    clusters: List[List[EnrichedEntry]] = []
    used = set()

    for i, seed in enumerate(entries):
        if getattr(seed, "embedding", None) is None or i in used:
            continue
        cluster = [seed]
        used.add(i)
        for j in range(i + 1, len(entries)):
            other = entries[j]
            if getattr(other, "embedding", None) is None or j in used:
                continue
            if cosine_similarity(seed.embedding, other.embedding) >= threshold:
                cluster.append(other)
                used.add(j)
        if len(cluster) > 1:
            clusters.append(cluster)

    return clusters
