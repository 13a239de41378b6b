"""
Intent normalization: reduce free text to an action skeleton.

Two variants are exposed and deliberately kept apart:

1. normalize_structural - labels-aware, token-by-token verb canonicalization
   over slot-redacted text. Used to backfill ``intent_text`` on corpus records.
2. normalize_query - entity-aware, whole-text verb extraction with a
   content-stripping fallback. Used at query time and for records that carry
   no cached intent.

They disagree on edge cases (e.g. "进入微信" is fully redacted by the
structural variant but yields "微信 打开" from the query variant). Matching
behavior depends on that divergence, so do not merge them.
"""

import re
from typing import List, Optional, Sequence

from engine.errors import InvalidArgumentError
from engine.lexicon import DEFAULT_LEXICON, Lexicon, VerbTable
from engine.settings import DEFAULT_CONFIG
from engine.slots import split_on_slots, strip_delimited_spans

# Residual tokens starting with a grammatical filler are dropped
FILLER_PREFIXES = ("的", "了", "是", "在", "有", "个", "这", "那")

_PURE_CJK = re.compile(r"[一-龥]+")


def canonicalize_token(token: str, table: VerbTable) -> Optional[str]:
    """
    Map a token to its canonical action by substring containment.

    Keys are scanned in declaration order and the first key contained in the
    token wins, so "保存到本地" resolves through "保存" (declared earlier).
    """
    for surface, action in table:
        if surface in token:
            return action
    return None


def _dedupe(tokens: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(tokens))


def normalize_structural(
    text: str,
    labels: Optional[Sequence[str]] = None,
    lexicon: Lexicon = DEFAULT_LEXICON,
) -> str:
    """
    Build the intent skeleton used for corpus records.

    Args:
        text: Free text (query variants) of the record
        labels: Hierarchy labels, prepended verbatim in order
        lexicon: Lookup tables

    Returns:
        Space-joined, duplicate-free skeleton; may be empty.
    """
    tokens = [label.strip() for label in labels or () if label and label.strip()]

    for word in split_on_slots(text or ""):
        action = canonicalize_token(word, lexicon.verb_canon)
        if action:
            tokens.append(action)
        elif len(word) >= 2 and not word.startswith(FILLER_PREFIXES):
            tokens.append(word)

    return " ".join(_dedupe(tokens)).strip()


def extract_entity(text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> Optional[str]:
    """Return the first known entity (declaration order) contained in text."""
    if not text:
        return None
    for entity in lexicon.known_entities:
        if entity in text:
            return entity
    return None


def extract_actions(text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> List[str]:
    """Canonical actions whose surface form occurs anywhere in text."""
    actions: List[str] = []
    if not text:
        return actions
    for surface, action in lexicon.query_verb_canon:
        if surface in text and action not in actions:
            actions.append(action)
    return actions


def remove_content_params(text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> str:
    """Strip known content keywords and delimited spans from text."""
    cleaned = text
    for keyword in lexicon.excluded_content_terms:
        cleaned = cleaned.replace(keyword, "", 1)

    cleaned = strip_delimited_spans(cleaned)

    kept = []
    for word in cleaned.split():
        if word in lexicon.query_actions or word in lexicon.known_entities:
            kept.append(word)
        elif 3 <= len(word) <= 8 and _PURE_CJK.fullmatch(word):
            if word not in lexicon.excluded_content_terms:
                kept.append(word)
        else:
            kept.append(word)
    return " ".join(kept)


def normalize_query(
    text: str,
    lexicon: Lexicon = DEFAULT_LEXICON,
    fallback_prefix: int = DEFAULT_CONFIG.fallback_prefix_length,
) -> str:
    """
    Build the entity-aware intent used at query time.

    The result is ``[entity] action...``. When the text names neither a known
    entity nor any action, the content-stripped text truncated to
    ``fallback_prefix`` characters is returned instead.
    """
    if text is None or not isinstance(text, str):
        raise InvalidArgumentError(f"Query text must be a string, got {type(text).__name__}")
    if not text:
        return ""

    parts: List[str] = []
    entity = extract_entity(text, lexicon)
    if entity:
        parts.append(entity)
    parts.extend(extract_actions(text, lexicon))

    if not parts:
        return remove_content_params(text, lexicon)[:fallback_prefix].strip()

    return " ".join(parts).strip()
