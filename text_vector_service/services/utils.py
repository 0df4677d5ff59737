import json
import random
import string
import time
from datetime import datetime, timezone

_ID_ALPHABET = string.digits + string.ascii_lowercase


def clean_user_text(raw_text: str) -> str:
    if not raw_text:
        return ""
    return " ".join(raw_text.split())


def normalize_metadata(meta: dict) -> dict:
    """Flatten values Chroma cannot store (lists, dicts) into strings."""
    normalized = {}
    for k, v in meta.items():
        if isinstance(v, list):
            normalized[k] = ", ".join(map(str, v))
        elif isinstance(v, dict):
            normalized[k] = json.dumps(v)
        else:
            normalized[k] = v
    return normalized


def generate_record_id(batch_index: int | None = None) -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    millis = int(time.time() * 1000)
    if batch_index is None:
        return f"doc_{millis}_{suffix}"
    return f"doc_{millis}_{batch_index}_{suffix}"


def utc_timestamp() -> str:
    # 2024-05-01T12:00:00.123Z
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def preview(text: str, limit: int = 50) -> str:
    return text[:limit] + "..." if len(text) > limit else text
