"""Two-signal similarity: intent-set overlap plus lexical TF-IDF cosine."""

from engine.lexicon import DEFAULT_LEXICON, Lexicon
from engine.normalizer import extract_entity
from engine.schemas import SimilarityScore
from engine.settings import DEFAULT_CONFIG
from engine.tfidf import SparseVector, cosine_similarity


def jaccard(a: str, b: str) -> float:
    """Jaccard index of the case-folded whitespace token sets of a and b."""
    tokens_a = set(a.lower().split()) if a else set()
    tokens_b = set(b.lower().split()) if b else set()
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


def intent_similarity(
    query_intent: str,
    record_intent: str,
    lexicon: Lexicon = DEFAULT_LEXICON,
    dampening: float = DEFAULT_CONFIG.entity_dampening,
) -> float:
    """
    Jaccard overlap of two intent skeletons, dampened when both name a
    different known entity (same verbs on another app is not a duplicate).
    """
    similarity = jaccard(query_intent, record_intent)
    if not similarity:
        return 0.0

    query_entity = extract_entity(query_intent, lexicon)
    record_entity = extract_entity(record_intent, lexicon)
    if query_entity and record_entity and query_entity != record_entity:
        similarity *= dampening

    return similarity


def score(
    query_intent: str,
    record_intent: str,
    query_vector: SparseVector,
    record_vector: SparseVector,
    lexicon: Lexicon = DEFAULT_LEXICON,
    dampening: float = DEFAULT_CONFIG.entity_dampening,
) -> SimilarityScore:
    return SimilarityScore(
        intent_similarity=intent_similarity(
            query_intent, record_intent, lexicon, dampening
        ),
        lexical_similarity=cosine_similarity(query_vector, record_vector),
    )
