from __future__ import annotations

import math
from collections import Counter
from typing import Iterable

from evrec_vectors.sparse_vector import SparseVector


def idf(document_frequency: int, num_documents: int) -> float:
    """
    Smoothed inverse document frequency: ln((1 + N) / (1 + df)) + 1.

    Strictly decreasing in df for a fixed N and always positive for df >= 1.
    A term that no document carries (df <= 0) weighs 0.
    """
    if document_frequency <= 0:
        return 0.0
    return math.log((1 + num_documents) / (1 + document_frequency)) + 1.0


def label_idf_vector(
    labels_per_item: Iterable[Iterable[str]], num_documents: int
) -> SparseVector[str]:
    """Corpus-wide IDF table for tags or categories, L2-normalised."""
    counts: Counter[str] = Counter()
    for labels in labels_per_item:
        counts.update({label.lower() for label in labels})
    keys = list(counts.keys())
    return SparseVector(keys, [idf(counts[k], num_documents) for k in keys]).normalised()
