"""
Text Vector Service.

A FastAPI service that turns text into embeddings and stores/searches them
in a vector index (Pinecone, or a local ChromaDB store).

Main components:
- main: app factory, error handlers and the uvicorn entry point
- config: Settings built from environment variables
- models: Pydantic request models
- routes: API endpoint handlers
- services: embedders, index clients and the text -> record pipeline
"""

__version__ = "1.0.0"
