"""Test utilities and helper functions for Synaptic RAG tests."""

import hashlib
import math
from collections import Counter
from types import SimpleNamespace
from typing import Any, Dict, Iterable, List, Optional, Sequence

VECTOR_SIZE = 32


class HashEmbedder:
    """Deterministic embedding client averaging hashed word vectors."""

    def __init__(self, dimension: int = VECTOR_SIZE, fail_indices: Iterable[int] = ()):
        self.dimension = dimension
        self.fail_indices = set(fail_indices)
        self.calls: List[List[str]] = []

    def _word_vector(self, word: str) -> List[float]:
        digest = hashlib.md5(word.encode("utf-8")).digest()
        return [digest[i % len(digest)] / 255.0 for i in range(self.dimension)]

    def vector_for(self, text: str) -> List[float]:
        counts = Counter(word.lower() for word in text.split() if word.strip())
        vector = [0.0] * self.dimension
        total = sum(counts.values()) or 1
        for word, count in counts.items():
            for idx, value in enumerate(self._word_vector(word)):
                vector[idx] += value * count / total
        norm = math.sqrt(sum(value * value for value in vector)) or 1.0
        return [value / norm for value in vector]

    async def embed(self, texts: List[str]) -> List[Optional[List[float]]]:
        self.calls.append(list(texts))
        return [
            None if index in self.fail_indices else self.vector_for(text)
            for index, text in enumerate(texts)
        ]


def make_record(point_id: str, payload: Dict[str, Any], vector: Optional[Sequence[float]] = None):
    """Stand-in for a qdrant ``Record`` returned by scroll."""
    return SimpleNamespace(id=point_id, payload=payload, vector=list(vector) if vector else None)


def make_scored_point(point_id: str, score: float, payload: Optional[Dict[str, Any]]):
    """Stand-in for a qdrant ``ScoredPoint`` returned by query_points."""
    return SimpleNamespace(id=point_id, score=score, payload=payload, vector=None)


def make_collections_response(*names: str):
    """Stand-in for the response of ``get_collections``."""
    return SimpleNamespace(collections=[SimpleNamespace(name=name) for name in names])


def text_of_length(length: int) -> str:
    """Text whose characters encode their own position modulo 10."""
    return "".join(str(i % 10) for i in range(length))
