"""
Reading and writing the index file.

The index is stored as a single JSON document:

    {"rfc_details": {"<rfc number>": {"title": "..."}},
     "term_scores": {"<term>": {"<rfc number>": <score>}}}

RFC numbers become JSON object keys and are therefore written as
decimal strings.
"""
import json
import logging
from pathlib import Path

from rfsee.common.errors import ParseError, RfseeIOError
from rfsee.common.models import Index

logger = logging.getLogger(__name__)


def _reject_duplicate_keys(pairs):
    obj = {}
    for key, value in pairs:
        if key in obj:
            raise ParseError(f"Duplicate key {key!r} in index document")
        obj[key] = value
    return obj


def save_index(index, path):
    """Write ``index`` to ``path`` as JSON, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(index.to_dict(), f, ensure_ascii=False, separators=(',', ':'))
    except OSError as e:
        raise RfseeIOError(f"Unable to write index to {path}: {e}") from e
    logger.info(f"Saved index with {len(index.term_scores)} terms to {path}")


def load_index(path):
    """Read an index previously written by ``save_index``."""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as e:
        raise ParseError(f"Index file {path} is not valid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise ParseError(f"Index file {path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise RfseeIOError(f"Unable to read index from {path}: {e}") from e

    index = Index.from_dict(data)
    logger.info(f"Loaded index with {len(index.term_scores)} terms from {path}")
    return index

