from __future__ import annotations

"""
Text helpers shared by the index builder and the ranker.

Front matter in SKILL.md files is hand written and sometimes carries
stray markup, smart quotes or hard wraps; :func:`basic_clean` flattens
that into a single display line.  :func:`tokenize_query` defines what a
search term is for the relevance ranker.
"""

import re
import unicodedata
from typing import List

from bs4 import BeautifulSoup

from .config import MAX_INPUT_CHARS, MIN_TOKEN_LENGTH

_WS_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,!?;:])")

# Only the edges of a token are trimmed, so "thought-graph" or "ci/cd"
# keep their inner punctuation.
EDGE_PUNCT_RE = re.compile(r"^[^a-z0-9]+|[^a-z0-9]+$")


def clamp_text_length(text, max_chars: int = MAX_INPUT_CHARS) -> str:
    text = text if isinstance(text, str) else str(text)
    return text[:max_chars]


def normalize_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip() if text else ""


def strip_html(raw: str) -> str:
    """
    Drop markup from a front matter value.  Plain text skips the parser
    entirely; if lxml chokes, the value is kept as written.
    """
    if not raw or "<" not in raw:
        return raw or ""
    try:
        flat = BeautifulSoup(raw, "lxml").get_text(" ", strip=True)
    except Exception:
        return raw
    return _SPACE_BEFORE_PUNCT_RE.sub(r"\1", normalize_whitespace(flat))


def basic_clean(text) -> str:
    """Clamp, de-markup, NFC and whitespace-collapse one catalog field."""
    if text is None:
        return ""
    text = strip_html(clamp_text_length(text))
    return normalize_whitespace(unicodedata.normalize("NFC", text))


def tokenize_query(query: str, min_length: int = MIN_TOKEN_LENGTH) -> List[str]:
    """
    Split a free-text query into ranker terms.

    Whitespace split, lowercase, trim non-alphanumerics from both ends,
    then drop anything shorter than ``min_length``.  Duplicates are kept;
    each occurrence scores on its own.
    """
    if not query:
        return []
    terms = (EDGE_PUNCT_RE.sub("", t) for t in clamp_text_length(query).lower().split())
    return [t for t in terms if len(t) >= min_length]


if __name__ == "__main__":
    sample = "  Build a <b>secure</b> REST-API, (thought-graph) in TS!  "
    print("BASIC CLEAN:", basic_clean(sample))
    print("TOKENS:", tokenize_query(sample))
