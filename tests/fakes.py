from __future__ import annotations

import hashlib
import math
import random
from typing import Any, Dict, List, Sequence

from text_vector_service.errors import EmbeddingError, VectorIndexError
from text_vector_service.services.index_client import QueryMatch, Record


class FakeEmbedder:
    """Deterministic pseudo-embeddings: the same text always gives the same vector."""

    model_name = "all-MiniLM-L6-v2"

    def __init__(self, dimension: int = 384) -> None:
        self.dimension = dimension
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if not isinstance(text, str) or not text.strip():
            raise EmbeddingError("Cannot embed empty text")

        seed = int(hashlib.sha256(text.encode("utf-8")).hexdigest(), 16)
        rng = random.Random(seed)
        return [rng.gauss(0.0, 1.0) for _ in range(self.dimension)]


def _cosine(a: Sequence[float], b: Sequence[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    na = math.sqrt(sum(x * x for x in a))
    nb = math.sqrt(sum(y * y for y in b))
    return dot / (na * nb) if na and nb else 0.0


class FakeIndexClient:
    """In-memory index service that fails the way Pinecone does."""

    backend_name = "fake"

    def __init__(self) -> None:
        self.collections: Dict[str, Dict[str, Any]] = {}
        self.calls: List[tuple] = []

    def _get(self, name: str) -> Dict[str, Any]:
        if name not in self.collections:
            raise VectorIndexError(f"Resource {name} not found")
        return self.collections[name]

    def list_collections(self) -> List[Dict[str, Any]]:
        self.calls.append(("list_collections",))
        return [
            {"name": name, "dimension": c["dimension"], "metric": c["metric"]}
            for name, c in self.collections.items()
        ]

    def create_collection(self, name: str, dimension: int, metric: str) -> None:
        self.calls.append(("create_collection", name, dimension, metric))
        if not name:
            raise VectorIndexError("Index name is required")
        if name in self.collections:
            raise VectorIndexError(f"Resource {name} already exists")
        self.collections[name] = {"dimension": dimension, "metric": metric, "records": {}}

    def upsert(self, collection_name: str, records: Sequence[Record]) -> None:
        self.calls.append(("upsert", collection_name, list(records)))
        collection = self._get(collection_name)
        for record in records:
            if len(record.vector) != collection["dimension"]:
                raise VectorIndexError(
                    f"Vector dimension {len(record.vector)} does not match "
                    f"the dimension of the index {collection['dimension']}"
                )
            collection["records"][record.id] = record

    def query(self, collection_name, vector, top_k, include_metadata=True) -> List[QueryMatch]:
        self.calls.append(("query", collection_name, top_k, include_metadata))
        collection = self._get(collection_name)
        if len(vector) != collection["dimension"]:
            raise VectorIndexError("Vector dimension does not match the dimension of the index")

        scored = sorted(
            (
                QueryMatch(
                    id=r.id,
                    score=_cosine(vector, r.vector),
                    metadata=dict(r.metadata) if include_metadata else {},
                )
                for r in collection["records"].values()
            ),
            key=lambda m: m.score,
            reverse=True,
        )
        return scored[:top_k]

    def describe_stats(self, collection_name: str) -> Dict[str, Any]:
        self.calls.append(("describe_stats", collection_name))
        collection = self._get(collection_name)
        count = len(collection["records"])
        return {"dimension": collection["dimension"], "total_vector_count": count}

    def delete_collection(self, name: str) -> None:
        self.calls.append(("delete_collection", name))
        self._get(name)
        del self.collections[name]


class UnreachableIndexClient(FakeIndexClient):
    backend_name = "fake"

    def list_collections(self):
        raise VectorIndexError("Unauthorized: invalid API key")
