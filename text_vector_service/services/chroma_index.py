import logging
from threading import Lock
from typing import Any, Dict, List, Sequence

import chromadb
from chromadb.config import Settings as ChromaSettings

from ..errors import VectorIndexError
from .index_client import QueryMatch, Record, backend_errors
from .utils import normalize_metadata, utc_timestamp

# index metric -> HNSW space
METRIC_SPACES = {"cosine": "cosine", "euclidean": "l2", "dotproduct": "ip"}
SPACE_METRICS = {space: metric for metric, space in METRIC_SPACES.items()}


class ChromaIndexClient:
    """
    Local ChromaDB store behind the same operations as the Pinecone client.

    Notes:
    - Each index is a Chroma collection; its dimension is kept in the
      collection metadata and enforced on upsert/query like Pinecone does.
    - Chroma returns distances; cosine/dotproduct scores are `1 - distance`,
      euclidean scores are the raw distance.
    - Metadata values must be primitives, so lists/dicts are flattened.
    """

    backend_name = "chroma"

    def __init__(self, persist_dir: str = "./chroma_store", client=None):
        self.persist_dir = persist_dir
        self._client = client
        self._lock = Lock()

    @property
    def client(self):
        with self._lock:
            if self._client is None:
                with backend_errors():
                    self._client = chromadb.PersistentClient(
                        path=str(self.persist_dir),
                        settings=ChromaSettings(anonymized_telemetry=False),
                    )
                logging.info(f"🔒 Chroma store opened at {self.persist_dir}")
        return self._client

    def _collection(self, name: str):
        with backend_errors():
            return self.client.get_collection(name=name)

    @staticmethod
    def _describe(collection) -> Dict[str, Any]:
        meta = collection.metadata or {}
        return {
            "name": collection.name,
            "dimension": meta.get("dimension"),
            "metric": meta.get("metric") or SPACE_METRICS.get(meta.get("hnsw:space", "l2"), "euclidean"),
            "created_at": meta.get("created_at"),
        }

    @staticmethod
    def _check_dimension(collection, vector: List[float]) -> None:
        expected = (collection.metadata or {}).get("dimension")
        if expected is not None and len(vector) != int(expected):
            raise VectorIndexError(
                f"Vector dimension {len(vector)} does not match the dimension of the index {expected}"
            )

    # -------------------------
    # INDEXES
    # -------------------------

    def list_collections(self) -> List[Dict[str, Any]]:
        with backend_errors():
            described = []
            for c in self.client.list_collections():
                # older Chroma releases list names instead of collections
                collection = self.client.get_collection(name=c) if isinstance(c, str) else c
                described.append(self._describe(collection))
            return described

    def create_collection(self, name: str, dimension: int, metric: str) -> None:
        if not name:
            raise VectorIndexError("Index name is required")
        if metric not in METRIC_SPACES:
            raise VectorIndexError(
                f"Unsupported metric '{metric}'. Expected one of {sorted(METRIC_SPACES)}"
            )

        with backend_errors():
            self.client.create_collection(
                name=name,
                metadata={
                    "hnsw:space": METRIC_SPACES[metric],
                    "metric": metric,
                    "dimension": int(dimension),
                    "created_at": utc_timestamp(),
                },
            )

        logging.info(f"✅ Collection '{name}' created (dimension={dimension}, metric={metric})")

    def describe_stats(self, collection_name: str) -> Dict[str, Any]:
        collection = self._collection(collection_name)
        with backend_errors():
            count = collection.count()

        return {
            "dimension": (collection.metadata or {}).get("dimension"),
            "index_fullness": 0.0,
            "namespaces": {"": {"vector_count": count}} if count else {},
            "total_vector_count": count,
        }

    def delete_collection(self, name: str) -> None:
        with backend_errors():
            self.client.delete_collection(name=name)

        logging.info(f"🗑️ Collection '{name}' deleted")

    # -------------------------
    # RECORDS
    # -------------------------

    def upsert(self, collection_name: str, records: Sequence[Record]) -> None:
        collection = self._collection(collection_name)

        ids, embeddings, metadatas, documents = [], [], [], []
        for record in records:
            self._check_dimension(collection, record.vector)

            metadata = normalize_metadata(record.metadata or {})
            # Chroma rejects empty metadata dicts
            if not metadata:
                metadata = {"source": "external_vector"}

            ids.append(record.id)
            embeddings.append(record.vector)
            metadatas.append(metadata)
            documents.append(str(metadata.get("text", "")))

        with backend_errors():
            collection.upsert(
                ids=ids,
                embeddings=embeddings,
                metadatas=metadatas,
                documents=documents,
            )

        logging.info(f"✅ {len(ids)} vector(s) upserted into '{collection_name}'")

    def query(
        self,
        collection_name: str,
        vector: List[float],
        top_k: int,
        include_metadata: bool = True,
    ) -> List[QueryMatch]:
        collection = self._collection(collection_name)
        self._check_dimension(collection, vector)

        include = ["distances", "metadatas"] if include_metadata else ["distances"]
        with backend_errors():
            results = collection.query(
                query_embeddings=[vector],
                n_results=top_k,
                include=include,
            )

        ids = (results.get("ids") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]
        metadatas = (results.get("metadatas") or [[]])[0] if include_metadata else []
        metric = self._describe(collection)["metric"]

        matches = []
        for i, doc_id in enumerate(ids):
            dist = float(distances[i]) if i < len(distances) else 0.0
            score = dist if metric == "euclidean" else 1.0 - dist
            meta = dict(metadatas[i]) if i < len(metadatas) and metadatas[i] else {}
            matches.append(QueryMatch(id=str(doc_id), score=score, metadata=meta))

        return matches
