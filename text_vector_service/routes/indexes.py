import logging
from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from ..config import Settings
from ..errors import InvalidRequestError
from ..dependencies import get_index_client, get_settings
from ..models import CreateIndexRequest
from ..services.index_client import IndexClient

router = APIRouter(tags=["indexes"])


@router.get("/list-indexes")
async def list_indexes(index: IndexClient = Depends(get_index_client)):
    try:
        indexes = await run_in_threadpool(index.list_collections)
    except Exception as e:
        logging.error(f"[list-indexes] Failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "success", "indexes": indexes}


@router.post("/create-index")
async def create_index(
    req: CreateIndexRequest,
    index: IndexClient = Depends(get_index_client),
    settings: Settings = Depends(get_settings),
):
    if not req.index_name:
        raise InvalidRequestError("Missing required field: indexName")

    dimension = req.dimension if req.dimension is not None else settings.default_dimension
    metric = req.metric or settings.default_metric

    try:
        await run_in_threadpool(index.create_collection, req.index_name, dimension, metric)
    except Exception as e:
        logging.error(f"[create-index] Failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "status": "success",
        "message": f"Index '{req.index_name}' created successfully",
        "indexName": req.index_name,
        "dimension": dimension,
        "metric": metric,
    }


@router.get("/index-stats/{index_name}")
async def index_stats(index_name: str, index: IndexClient = Depends(get_index_client)):
    try:
        stats = await run_in_threadpool(index.describe_stats, index_name)
    except Exception as e:
        logging.error(f"[index-stats] Failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "success", "indexName": index_name, "stats": stats}


@router.delete("/delete-index/{index_name}")
async def delete_index(index_name: str, index: IndexClient = Depends(get_index_client)):
    # Deleting an index that does not exist is reported as a failure
    try:
        await run_in_threadpool(index.delete_collection, index_name)
    except Exception as e:
        logging.error(f"[delete-index] Failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "success", "message": f"Index '{index_name}' deleted successfully"}
