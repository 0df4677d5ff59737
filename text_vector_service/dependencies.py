from fastapi import Request

from .config import Settings
from .services.embedder import Embedder
from .services.index_client import IndexClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_embedder(request: Request) -> Embedder:
    return request.app.state.embedder


def get_index_client(request: Request) -> IndexClient:
    return request.app.state.index_client
