"""Split large specs into model-sized chunks and pick the one matching a question.

Token counts are estimated at four UTF-16 code units per token. The estimate
is injectable so a real tokenizer can replace it without touching the
chunking logic.
"""

import json
import logging
import math
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 3000

TokenEstimator = Callable[[str], int]


def estimate_tokens(text: str) -> int:
    """Approximate token count: ceil(utf16_length / 4)."""
    # surrogatepass: lone surrogates from decoded JSON count as one code unit
    utf16_length = len(text.encode("utf-16-le", "surrogatepass")) // 2
    return math.ceil(utf16_length / 4)


def to_json(value: Any, indent: int | None = None) -> str:
    """Serialize like ``JSON.stringify``: compact unless ``indent`` is given."""
    if indent is None:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return json.dumps(value, ensure_ascii=False, indent=indent, default=str)


def split_for_budget(
    doc: dict,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    *,
    estimate: TokenEstimator = estimate_tokens,
) -> list[dict]:
    """Partition ``doc["paths"]`` into chunks that fit ``max_tokens``.

    Every chunk carries all non-``paths`` fields of ``doc``. A single path
    larger than the budget still gets a chunk of its own; nothing is dropped
    or truncated. Concatenating the chunks' paths in order gives back
    ``doc["paths"]``.
    """
    if estimate(to_json(doc, indent=2)) <= max_tokens:
        return [doc]

    paths = doc.get("paths")
    if not isinstance(paths, dict) or not paths:
        return [doc]

    base = {key: value for key, value in doc.items() if key != "paths"}
    base_tokens = estimate(to_json(base))

    chunks = []
    current: dict = {}
    current_size = base_tokens

    for path, methods in paths.items():
        entry_tokens = estimate(to_json({path: methods}))

        if current_size + entry_tokens > max_tokens and current:
            chunks.append({**base, "paths": current})
            current = {}
            current_size = base_tokens

        current[path] = methods
        current_size += entry_tokens

    if current:
        chunks.append({**base, "paths": current})

    logger.debug("Split %d paths into %d chunks (budget %d)", len(paths), len(chunks), max_tokens)
    return chunks


def question_keywords(question: str) -> list[str]:
    """Lower-cased whitespace tokens longer than two characters."""
    return [word for word in question.lower().split() if len(word) > 2]


def score_chunk(chunk: Any, keywords: list[str]) -> int:
    """Sum of non-overlapping substring matches of each keyword."""
    text = to_json(chunk).lower()
    return sum(text.count(keyword) for keyword in keywords)


def select_best_chunk(chunks: list[dict], question: str) -> dict:
    """Return the chunk sharing the most keywords with ``question``.

    Ties and all-zero scores keep the earliest chunk.

    Raises:
        ValueError: if ``chunks`` is empty.
    """
    if not chunks:
        raise ValueError("select_best_chunk() requires at least one chunk")

    keywords = question_keywords(question)

    best_chunk = chunks[0]
    best_score = 0
    for chunk in chunks:
        score = score_chunk(chunk, keywords)
        if score > best_score:
            best_score = score
            best_chunk = chunk

    return best_chunk
