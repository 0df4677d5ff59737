import logging
from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from ..errors import InvalidRequestError
from ..dependencies import get_embedder, get_index_client
from ..models import MultipleTextsRequest, QueryTextRequest, TextRequest
from ..services.embedder import Embedder
from ..services.index_client import IndexClient
from ..services.pipeline import build_record, embed_batch, format_matches
from ..services.utils import preview

router = APIRouter(tags=["texts"])


# -------------------------
# ADD TEXT
# -------------------------
@router.post("/add-text")
async def add_text(
    req: TextRequest,
    embedder: Embedder = Depends(get_embedder),
    index: IndexClient = Depends(get_index_client),
):
    """Embed one text and upsert it with enriched metadata."""
    if not req.index_name or not req.text:
        raise InvalidRequestError("Missing required fields: indexName and text")

    try:
        logging.info(f"🔄 Generating embedding for: \"{preview(req.text)}\"")
        vector = await run_in_threadpool(embedder.embed, req.text)
        logging.info(f"✅ Generated {len(vector)}-dimensional vector")

        record = build_record(
            req.text,
            vector,
            embedder.model_name,
            metadata=req.metadata,
            record_id=req.id,
        )
        await run_in_threadpool(index.upsert, req.index_name, [record])
        logging.info(f"✅ Text added to index '{req.index_name}' with ID: {record.id}")

    except Exception as e:
        logging.error(f"[add-text] Failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to add text: {e}")

    return {
        "status": "success",
        "message": f"Text successfully converted to vector and added to index '{req.index_name}'",
        "data": {
            "id": record.id,
            "text": req.text,
            "indexName": req.index_name,
            "vectorDimension": len(vector),
            "metadata": record.metadata,
        },
    }


# -------------------------
# QUERY TEXT (EMBED + SEARCH)
# -------------------------
@router.post("/query-text")
async def query_text(
    req: QueryTextRequest,
    embedder: Embedder = Depends(get_embedder),
    index: IndexClient = Depends(get_index_client),
):
    if not req.index_name or not req.text:
        raise InvalidRequestError("Missing required fields: indexName and text")

    try:
        logging.info(f"🔍 Searching for: \"{preview(req.text)}\"")
        query_vec = await run_in_threadpool(embedder.embed, req.text)

        matches = await run_in_threadpool(
            index.query,
            req.index_name,
            query_vec,
            req.top_k,
            req.include_metadata,
        )
        logging.info(f"✅ Found {len(matches)} similar results")

    except Exception as e:
        logging.error(f"[query-text] Failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to query text: {e}")

    results = format_matches(matches)
    return {
        "status": "success",
        "query": req.text,
        "resultsCount": len(results),
        "results": results,
    }


# -------------------------
# ADD MULTIPLE TEXTS
# -------------------------
@router.post("/add-multiple-texts")
async def add_multiple_texts(
    req: MultipleTextsRequest,
    embedder: Embedder = Depends(get_embedder),
    index: IndexClient = Depends(get_index_client),
):
    """
    Embed each text in order and upsert the ones that worked in a single call.

    A text that cannot be embedded is reported as `failed` in `results`; the
    request itself still succeeds, even if every text failed.
    """
    if not req.index_name or not req.texts:
        raise InvalidRequestError("Missing required fields: indexName and texts (array)")

    total = len(req.texts)

    try:
        logging.info(f"📚 Processing {total} texts for index '{req.index_name}'")
        records, results = await run_in_threadpool(embed_batch, embedder, req.texts)

        if records:
            logging.info(f"📤 Upserting {len(records)} vectors...")
            await run_in_threadpool(index.upsert, req.index_name, records)
            logging.info(f"✅ Successfully upserted {len(records)} vectors")

    except Exception as e:
        logging.error(f"[add-multiple-texts] Failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to add multiple texts: {e}")

    return {
        "status": "success",
        "message": f"Processed {total} texts, successfully added {len(records)} vectors",
        "indexName": req.index_name,
        "totalTexts": total,
        "successfullyAdded": len(records),
        "failed": total - len(records),
        "results": results,
    }
