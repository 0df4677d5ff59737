import pytest
from fastapi.testclient import TestClient

from fakes import FakeEmbedder, FakeIndexClient
from text_vector_service.config import Settings
from text_vector_service.main import create_app


@pytest.fixture
def settings():
    return Settings(pinecone_api_key="test-key")


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def index():
    return FakeIndexClient()


@pytest.fixture
def client(settings, embedder, index):
    app = create_app(settings, embedder=embedder, index_client=index)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def dogs_index(index):
    index.create_collection("t", 384, "cosine")
    index.calls.clear()
    return index
