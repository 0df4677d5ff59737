import os
import sys
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

INDEX_BACKENDS = {"pinecone", "chroma"}
EMBEDDING_MODES = {"process", "local", "remote"}


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, built once at startup and handed to the app."""

    pinecone_api_key: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # Vector index backend
    index_backend: str = "pinecone"
    pinecone_cloud: str = "aws"
    pinecone_region: str = "us-east-1"
    persist_dir: str = "./chroma_store"

    # Embeddings
    embedding_mode: str = "process"
    embedding_model: str = "all-MiniLM-L6-v2"
    device: str = "cpu"
    normalize: bool = False
    embedder_url: str = "http://127.0.0.1:8000/embed"
    embedding_python: str = sys.executable

    # create-index defaults
    default_dimension: int = 384
    default_metric: str = "cosine"

    def __post_init__(self):
        if self.index_backend not in INDEX_BACKENDS:
            raise ValueError(
                f"Unknown INDEX_BACKEND: {self.index_backend!r}. "
                f"Valid values are: {sorted(INDEX_BACKENDS)}"
            )
        if self.embedding_mode not in EMBEDDING_MODES:
            raise ValueError(
                f"Unknown EMBEDDING_MODE: {self.embedding_mode!r}. "
                f"Valid values are: {sorted(EMBEDDING_MODES)}"
            )

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        return cls(
            pinecone_api_key=os.getenv("PINECONE_API_KEY"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 3000)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            index_backend=os.getenv("INDEX_BACKEND", "pinecone").strip().lower(),
            pinecone_cloud=os.getenv("PINECONE_CLOUD", "aws"),
            pinecone_region=os.getenv("PINECONE_REGION", "us-east-1"),
            persist_dir=os.getenv("PERSIST_DIR", "./chroma_store"),
            embedding_mode=os.getenv("EMBEDDING_MODE", "process").strip().lower(),
            embedding_model=os.getenv("EMBEDDING_MODEL", "all-MiniLM-L6-v2"),
            device=os.getenv("DEVICE", "cpu"),
            normalize=_env_flag("NORMALIZE", "false"),
            embedder_url=os.getenv("EMBEDDER_URL", "http://127.0.0.1:8000/embed"),
            embedding_python=os.getenv("EMBEDDING_PYTHON", sys.executable),
            default_dimension=int(os.getenv("DEFAULT_DIMENSION", 384)),
            default_metric=os.getenv("DEFAULT_METRIC", "cosine"),
        )
