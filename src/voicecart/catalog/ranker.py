"""
Lexical ranking of product search results.

Scores each candidate by how many tokens its name and the spoken query do
NOT share, relative to the name length, and keeps every candidate tied for
the best (lowest) score.
"""

import re
from typing import Any, Sequence

# Transient key written onto each result document by rank_products()
SCORE_FIELD = "match_score"

# ASCII \W, the same character class the transcripts are normalized with
_NON_WORD = re.compile(r"\W", re.ASCII)
_WHITESPACE = re.compile(r"\s+")


def tokenize(text: str) -> list[str]:
    """Lowercased word tokens. An empty text yields a single empty token,
    so token counts are never zero."""
    return _WHITESPACE.split(_NON_WORD.sub(" ", text).strip().lower())


def score_tokens(result_tokens: list[str], query_tokens: list[str]) -> float:
    """Size of the symmetric difference of both token sets divided by the
    number of result tokens. 0.0 means identical token sets."""
    return len(set(result_tokens) ^ set(query_tokens)) / len(result_tokens)


def rank_products(query_text: str, results: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    """Return the results tied for the best lexical score against `query_text`.

    Side effect: every input document gets its score written to
    `SCORE_FIELD`. Scores are only comparable within one call.
    """
    query_tokens = tokenize(query_text)

    for result in results:
        result_tokens = tokenize(result.get("name") or "")
        result[SCORE_FIELD] = score_tokens(result_tokens, query_tokens)

    ranked = sorted(results, key=lambda doc: doc[SCORE_FIELD])  # stable
    if not ranked:
        return []

    best = ranked[0][SCORE_FIELD]
    top: list[dict[str, Any]] = []
    for doc in ranked:
        if doc[SCORE_FIELD] != best:
            break
        top.append(doc)
    return top
