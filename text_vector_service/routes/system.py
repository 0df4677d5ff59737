from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .. import __version__
from ..dependencies import get_embedder, get_index_client
from ..services.embedder import Embedder
from ..services.index_client import IndexClient
from ..services.utils import utc_timestamp

router = APIRouter(tags=["system"])


@router.get("/")
def root():
    """API documentation."""
    return {
        "message": "Text Vector Service with Text-to-Vector Conversion",
        "version": __version__,
        "features": [
            "Direct text-to-vector conversion using SentenceTransformers",
            "Automatic embedding generation",
            "Complete vector index CRUD operations",
        ],
        "endpoints": {
            "GET /": "API documentation",
            "GET /health": "Health check",
            "GET /test-pinecone": "Test vector index connection",
            "POST /add-text": "Add text directly (auto-generates embedding)",
            "POST /query-text": "Query using text (auto-generates embedding)",
            "POST /add-multiple-texts": "Add multiple texts at once",
            "GET /list-indexes": "List all indexes",
            "POST /create-index": "Create new index",
            "GET /index-stats/{indexName}": "Get index statistics",
            "DELETE /delete-index/{indexName}": "Delete an index",
        },
        "usage": {
            "addText": 'POST /add-text with {"indexName": "my-index", "text": "Your text here", "metadata": {...}}',
            "queryText": 'POST /query-text with {"indexName": "my-index", "text": "Search query", "topK": 5}',
        },
    }


@router.get("/health")
def health(embedder: Embedder = Depends(get_embedder)):
    return {
        "status": "success",
        "message": "Text vector server is running",
        "timestamp": utc_timestamp(),
        "model": embedder.model_name,
    }


@router.get("/test-pinecone")
async def test_pinecone(index: IndexClient = Depends(get_index_client)):
    """Checks that the index backend answers a listing call."""
    try:
        indexes = await run_in_threadpool(index.list_collections)
    except Exception as e:
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": f"Failed to connect to {index.backend_name}",
                "error": str(e),
            },
        )

    return {
        "status": "success",
        "message": f"{index.backend_name} connection successful",
        "indexCount": len(indexes),
        "indexes": indexes,
    }
