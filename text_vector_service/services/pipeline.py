"""
Text -> record pipeline shared by the text endpoints.

- build_record: wraps a vector with its id and enriched metadata
- embed_batch: embeds a list of texts one by one, collecting failures
- format_matches: turns index matches into ranked, readable results
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..errors import InvalidRequestError
from .embedder import Embedder
from .index_client import QueryMatch, Record
from .utils import generate_record_id, preview, utc_timestamp

NO_TEXT = "No text available"


def enrich_metadata(
    metadata: Optional[Dict[str, Any]],
    text: str,
    model_name: str,
    dimension: int,
    batch_index: Optional[int] = None,
) -> Dict[str, Any]:
    enriched = {
        **(metadata or {}),
        "text": text,
        "model": model_name,
        "dimension": dimension,
        "timestamp": utc_timestamp(),
    }
    if batch_index is not None:
        enriched["batch_index"] = batch_index
    return enriched


def build_record(
    text: str,
    vector: List[float],
    model_name: str,
    metadata: Optional[Dict[str, Any]] = None,
    record_id: Optional[str] = None,
    batch_index: Optional[int] = None,
) -> Record:
    return Record(
        id=record_id or generate_record_id(batch_index),
        vector=vector,
        metadata=enrich_metadata(metadata, text, model_name, len(vector), batch_index),
    )


def _item_text(item: Any) -> Any:
    return item.get("text") if isinstance(item, dict) else item


def _unpack(item: Any) -> Tuple[str, Dict[str, Any], Optional[str]]:
    if isinstance(item, str):
        return item, {}, None
    if not isinstance(item, dict):
        raise InvalidRequestError("Each item must be a string or an object with a text field")

    text, metadata, record_id = item.get("text"), item.get("metadata"), item.get("id")
    if not isinstance(text, str):
        raise InvalidRequestError("Item text must be a string")
    if metadata is not None and not isinstance(metadata, dict):
        raise InvalidRequestError("Item metadata must be an object")
    if record_id is not None and not isinstance(record_id, str):
        raise InvalidRequestError("Item id must be a string")
    return text, metadata or {}, record_id


def embed_batch(embedder: Embedder, texts: Sequence[Any]) -> Tuple[List[Record], List[Dict[str, Any]]]:
    """
    Embed `texts` in order. An item that fails is reported in the results
    list and skipped; it never stops the rest of the batch.

    Items are plain strings or `{text, metadata?, id?}` objects.
    """
    records: List[Record] = []
    results: List[Dict[str, Any]] = []

    for i, item in enumerate(texts):
        try:
            text, metadata, record_id = _unpack(item)
            logging.info(f"🔄 Processing text {i + 1}/{len(texts)}: \"{preview(text, 30)}\"")
            vector = embedder.embed(text)
            record = build_record(
                text,
                vector,
                embedder.model_name,
                metadata=metadata,
                record_id=record_id,
                batch_index=i,
            )
        except Exception as e:
            logging.error(f"❌ Failed to process text {i + 1}: {e}")
            results.append({"text": _item_text(item), "status": "failed", "error": str(e)})
            continue

        records.append(record)
        results.append({"id": record.id, "text": text, "status": "processed"})

    return records, results


def format_matches(matches: Sequence[QueryMatch]) -> List[Dict[str, Any]]:
    return [
        {
            "rank": i + 1,
            "id": match.id,
            "score": round(float(match.score), 4),
            "text": (match.metadata or {}).get("text") or NO_TEXT,
            "metadata": match.metadata or {},
        }
        for i, match in enumerate(matches)
    ]
