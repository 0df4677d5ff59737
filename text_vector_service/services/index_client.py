from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Sequence

from ..config import Settings
from ..errors import VectorIndexError


@contextmanager
def backend_errors():
    """Re-raise anything a backend SDK throws (auth, network, not found...) as VectorIndexError."""
    try:
        yield
    except VectorIndexError:
        raise
    except Exception as e:
        raise VectorIndexError(str(e)) from e


@dataclass
class Record:
    id: str
    vector: List[float]
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class QueryMatch:
    id: str
    score: float
    metadata: Dict[str, Any] = field(default_factory=dict)


class IndexClient(Protocol):
    """
    Pass-through to a vector index service. Every backend failure is raised
    as VectorIndexError carrying the backend's message.
    """

    backend_name: str

    def list_collections(self) -> List[Dict[str, Any]]: ...

    def create_collection(self, name: str, dimension: int, metric: str) -> None: ...

    def upsert(self, collection_name: str, records: Sequence[Record]) -> None: ...

    def query(
        self,
        collection_name: str,
        vector: List[float],
        top_k: int,
        include_metadata: bool = True,
    ) -> List[QueryMatch]: ...

    def describe_stats(self, collection_name: str) -> Dict[str, Any]: ...

    def delete_collection(self, name: str) -> None: ...


def make_index_client(settings: Settings) -> IndexClient:
    backend = settings.index_backend

    if backend == "pinecone":
        from .pinecone_index import PineconeIndexClient

        return PineconeIndexClient(
            api_key=settings.pinecone_api_key,
            cloud=settings.pinecone_cloud,
            region=settings.pinecone_region,
        )

    if backend == "chroma":
        from .chroma_index import ChromaIndexClient

        return ChromaIndexClient(persist_dir=settings.persist_dir)

    raise ValueError(f"Unknown INDEX_BACKEND: {backend!r}")
