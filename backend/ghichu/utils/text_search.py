"""Query helpers for the Postgres full-text indexes on note titles and contents.

Every term must match (terms are joined with ``&``) and each term matches as a
word prefix. The hosted search the app started on matched any term and ranked
by relevance; requiring all terms keeps results narrow without a ranking step.
"""
from __future__ import annotations

import re

_TERM_RE = re.compile(r"\w+", re.UNICODE)


def query_terms(query: str) -> list[str]:
    """Split free text into search terms, dropping punctuation and tsquery operators."""
    return _TERM_RE.findall(query or "")


def to_prefix_tsquery(query: str) -> str | None:
    """Build a Postgres tsquery that prefix-matches every term of ``query``.

    ``"Mua sắm"`` becomes ``"Mua:* & sắm:*"``. Returns None when the query has
    no usable terms.
    """
    terms = query_terms(query)
    if not terms:
        return None
    return " & ".join(f"{term}:*" for term in terms)
