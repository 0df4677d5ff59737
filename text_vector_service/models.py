from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

# Request bodies use the camelCase names of the public API (indexName, topK, ...).
# Required fields are Optional here so the handlers can answer 400 themselves.


class TextRequest(BaseModel):
    model_config = {"populate_by_name": True}

    index_name: Optional[str] = Field(None, alias="indexName")
    text: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    id: Optional[str] = None


class QueryTextRequest(BaseModel):
    model_config = {"populate_by_name": True}

    index_name: Optional[str] = Field(None, alias="indexName")
    text: Optional[str] = None
    top_k: int = Field(5, alias="topK")
    include_metadata: bool = Field(True, alias="includeMetadata")


class MultipleTextsRequest(BaseModel):
    model_config = {"populate_by_name": True}

    index_name: Optional[str] = Field(None, alias="indexName")
    # Items are checked one by one while embedding, so a bad entry fails alone
    texts: Optional[List[Any]] = None


class CreateIndexRequest(BaseModel):
    model_config = {"populate_by_name": True}

    index_name: Optional[str] = Field(None, alias="indexName")
    dimension: Optional[int] = None
    metric: Optional[str] = None
