import json
import logging
import subprocess
import sys
from threading import Lock
from typing import Any, List, Optional, Protocol

import numpy as np
import requests

from ..config import Settings
from ..errors import EmbeddingError
from .utils import clean_user_text

WORKER_MODULE = "text_vector_service.services.embed_worker"


class Embedder(Protocol):
    model_name: str

    def embed(self, text: str) -> List[float]: ...


def _prepare(text: Any) -> str:
    if not isinstance(text, str):
        raise EmbeddingError("Text must be a string")
    if not clean_user_text(text):
        raise EmbeddingError("Cannot embed empty text")
    return text.strip()


def parse_vector(raw: Any) -> List[float]:
    """Validate a decoded embedding: a non-empty list of numbers."""
    if not isinstance(raw, list) or not raw:
        raise EmbeddingError("Embedding output is not a non-empty list")
    if not all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in raw):
        raise EmbeddingError("Embedding output contains non-numeric values")
    return [float(x) for x in raw]


# -------------------------
# EXTERNAL PROCESS
# -------------------------

class SubprocessEmbedder:
    """
    Runs the embedding worker in a fresh Python process for every call.

    The text goes in on stdin; the worker prints the vector as a JSON list on
    stdout, or `{"error": ...}` on stderr with a non-zero exit status.
    """

    def __init__(
        self,
        model_name: str,
        python: str = sys.executable,
        device: str = "cpu",
        normalize: bool = False,
    ):
        self.model_name = model_name
        self.python = python
        self.device = device
        self.normalize = normalize

    def command(self) -> List[str]:
        cmd = [self.python, "-m", WORKER_MODULE, "--model", self.model_name, "--device", self.device]
        if self.normalize:
            cmd.append("--normalize")
        return cmd

    def embed(self, text: str) -> List[float]:
        cleaned = _prepare(text)

        try:
            proc = subprocess.run(
                self.command(),
                input=cleaned,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise EmbeddingError(f"Could not start embedding process: {e}") from e

        if proc.returncode != 0:
            raise EmbeddingError(f"Embedding process failed: {_worker_error(proc.stderr)}")

        lines = [line for line in (proc.stdout or "").splitlines() if line.strip()]
        if not lines:
            raise EmbeddingError("Embedding process produced no output")

        try:
            raw = json.loads(lines[-1])
        except json.JSONDecodeError as e:
            raise EmbeddingError(f"Failed to parse embedding result: {e}") from e

        return parse_vector(raw)


def _worker_error(stderr: Optional[str]) -> str:
    lines = [line for line in (stderr or "").splitlines() if line.strip()]
    if not lines:
        return "no error output"
    try:
        payload = json.loads(lines[-1])
    except json.JSONDecodeError:
        return "\n".join(lines)
    if isinstance(payload, dict) and "error" in payload:
        return str(payload["error"])
    return lines[-1]


# -------------------------
# IN-PROCESS MODEL
# -------------------------

class LocalEmbedder:
    """SentenceTransformer loaded once, on first use."""

    def __init__(self, model_name: str, device: str = "cpu", normalize: bool = False, model=None):
        self.model_name = model_name
        self.device = device
        self.normalize = normalize
        self.dimension: Optional[int] = None
        self._model = model
        self._lock = Lock()

    def _load(self):
        with self._lock:
            if self._model is None:
                try:
                    from sentence_transformers import SentenceTransformer
                except ImportError as e:
                    raise EmbeddingError(
                        "Please install sentence-transformers: pip install sentence-transformers"
                    ) from e

                logging.info(f"[Embedder] Loading model: {self.model_name} on device {self.device}")
                try:
                    self._model = SentenceTransformer(self.model_name, device=self.device)
                except Exception as e:
                    raise EmbeddingError(f"Could not load model {self.model_name}: {e}") from e

            if self.dimension is None:
                # Lock the dimension to what the model actually produces
                try:
                    probe = self._model.encode(["dimension check"], convert_to_numpy=True)
                except Exception as e:
                    raise EmbeddingError(f"Embedding model failed: {e}") from e
                self.dimension = int(probe.shape[1])
                logging.info(f"[Embedder] Vector dimension locked at {self.dimension}")

        return self._model

    def embed(self, text: str) -> List[float]:
        cleaned = _prepare(text)
        model = self._load()

        try:
            raw_vectors = np.asarray(model.encode([cleaned], convert_to_numpy=True), dtype=float)
        except Exception as e:
            raise EmbeddingError(f"Embedding model failed: {e}") from e

        if raw_vectors.ndim != 2 or raw_vectors.shape[1] != self.dimension:
            raise EmbeddingError(
                f"Embedding dimension mismatch. Expected {self.dimension}, got {raw_vectors.shape[-1]}"
            )

        if self.normalize:
            norms = np.linalg.norm(raw_vectors, axis=1, keepdims=True)
            norms[norms == 0] = 1
            raw_vectors = raw_vectors / norms

        return raw_vectors[0].tolist()


# -------------------------
# REMOTE INFERENCE SERVICE
# -------------------------

class RemoteEmbedder:
    """Client for an HTTP embedding service taking `{"texts": [...]}`."""

    def __init__(self, url: str, model_name: str):
        self.url = url
        self.model_name = model_name

    def embed(self, text: str) -> List[float]:
        cleaned = _prepare(text)

        try:
            resp = requests.post(self.url, json={"texts": [cleaned]})
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.RequestException as e:
            logging.error(f"[Embedder] HTTP error: {e}")
            raise EmbeddingError(f"Embedder error: {e}") from e
        except ValueError as e:
            raise EmbeddingError(f"Embedder returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise EmbeddingError("Embedder returned an unexpected payload")

        if data.get("vectors"):
            return parse_vector(data["vectors"][0])
        if data.get("items"):
            return parse_vector(data["items"][0].get("vector"))
        raise EmbeddingError("No embeddings returned")


def make_embedder(settings: Settings) -> Embedder:
    mode = settings.embedding_mode

    if mode == "process":
        return SubprocessEmbedder(
            settings.embedding_model,
            python=settings.embedding_python,
            device=settings.device,
            normalize=settings.normalize,
        )
    if mode == "local":
        return LocalEmbedder(settings.embedding_model, device=settings.device, normalize=settings.normalize)
    if mode == "remote":
        return RemoteEmbedder(settings.embedder_url, settings.embedding_model)

    raise ValueError(f"Unknown EMBEDDING_MODE: {mode!r}")
