"""
Services module for the Text Vector Service.

- embedder: Embedder implementations (worker process, in-process model, HTTP service)
- embed_worker: the process run by the subprocess embedder
- index_client: IndexClient protocol, records and backend selection
- pinecone_index / chroma_index: index backends (imported on demand)
- pipeline: record building, batch embedding and result formatting
- utils: text cleaning, metadata flattening, ids and timestamps
"""

from .embedder import Embedder, LocalEmbedder, RemoteEmbedder, SubprocessEmbedder, make_embedder
from .index_client import IndexClient, QueryMatch, Record, make_index_client
from .pipeline import build_record, embed_batch, format_matches

__all__ = [
    "Embedder",
    "LocalEmbedder",
    "RemoteEmbedder",
    "SubprocessEmbedder",
    "make_embedder",
    "IndexClient",
    "QueryMatch",
    "Record",
    "make_index_client",
    "build_record",
    "embed_batch",
    "format_matches",
]
