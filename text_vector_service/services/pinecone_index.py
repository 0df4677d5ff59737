import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Sequence

from pinecone import Pinecone, ServerlessSpec

from ..errors import VectorIndexError
from .index_client import QueryMatch, Record, backend_errors


def _as_dict(obj: Any) -> Dict[str, Any]:
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return obj
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return dict(obj)


class PineconeIndexClient:
    """
    Pinecone serverless indexes. The SDK client is created on first use, so a
    missing API key only fails the requests that reach Pinecone.
    """

    backend_name = "pinecone"

    def __init__(
        self,
        api_key: Optional[str],
        cloud: str = "aws",
        region: str = "us-east-1",
        client: Optional[Pinecone] = None,
    ):
        self.api_key = api_key
        self.cloud = cloud
        self.region = region
        self._client = client
        self._lock = Lock()

    @property
    def client(self) -> Pinecone:
        with self._lock:
            if self._client is None:
                with backend_errors():
                    self._client = Pinecone(api_key=self.api_key)
        return self._client

    # -------------------------
    # INDEXES
    # -------------------------

    def list_collections(self) -> List[Dict[str, Any]]:
        with backend_errors():
            return [_as_dict(index) for index in self.client.list_indexes()]

    def create_collection(self, name: str, dimension: int, metric: str) -> None:
        if not name:
            raise VectorIndexError("Index name is required")

        with backend_errors():
            self.client.create_index(
                name=name,
                dimension=dimension,
                metric=metric,
                spec=ServerlessSpec(cloud=self.cloud, region=self.region),
            )

        logging.info(f"[Pinecone] Created index '{name}' (dimension={dimension}, metric={metric})")

    def describe_stats(self, collection_name: str) -> Dict[str, Any]:
        with backend_errors():
            return _as_dict(self.client.Index(collection_name).describe_index_stats())

    def delete_collection(self, name: str) -> None:
        with backend_errors():
            self.client.delete_index(name)

        logging.info(f"[Pinecone] Deleted index '{name}'")

    # -------------------------
    # RECORDS
    # -------------------------

    def upsert(self, collection_name: str, records: Sequence[Record]) -> None:
        vectors = [
            {"id": r.id, "values": r.vector, "metadata": r.metadata}
            for r in records
        ]
        with backend_errors():
            self.client.Index(collection_name).upsert(vectors=vectors)

    def query(
        self,
        collection_name: str,
        vector: List[float],
        top_k: int,
        include_metadata: bool = True,
    ) -> List[QueryMatch]:
        with backend_errors():
            response = self.client.Index(collection_name).query(
                vector=vector,
                top_k=top_k,
                include_metadata=include_metadata,
            )

        return [
            QueryMatch(
                id=match.id,
                score=float(match.score or 0.0),
                metadata=dict(match.metadata or {}),
            )
            for match in (response.matches or [])
        ]
