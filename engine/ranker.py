"""
Duplicate classification and ranking of scored corpus records.

score_and_rank is the query-time entry point: it normalizes the query,
builds a TF-IDF snapshot over records + query, scores every record and
returns the top candidates with duplicate flags.
"""

from functools import cmp_to_key
from typing import Iterable, List, Mapping

from engine.errors import InvalidArgumentError
from engine.lexicon import DEFAULT_LEXICON, Lexicon
from engine.normalizer import normalize_query
from engine.scorer import score
from engine.schemas import RankingResult, Record, ScoredRecord, SimilarityScore
from engine.settings import DEFAULT_CONFIG, ScoringConfig
from engine.tfidf import build_model, preprocess_text
from utils.logger import get_logger

logger = get_logger(__name__)

def classify(
    similarity: SimilarityScore,
    intent_threshold: float = DEFAULT_CONFIG.intent_threshold,
    lexical_threshold: float = DEFAULT_CONFIG.lexical_threshold,
) -> bool:
    """A pair is a duplicate only when both signals clear their threshold."""
    return (
        similarity.intent_similarity >= intent_threshold
        and similarity.lexical_similarity >= lexical_threshold
    )


def _ranking_order(tolerance: float):
    def compare(a: ScoredRecord, b: ScoredRecord) -> int:
        if a.is_duplicate != b.is_duplicate:
            return -1 if a.is_duplicate else 1

        intent_gap = b.intent_similarity - a.intent_similarity
        if abs(intent_gap) > tolerance:
            return -1 if intent_gap < 0 else 1

        lexical_gap = b.lexical_similarity - a.lexical_similarity
        if lexical_gap:
            return -1 if lexical_gap < 0 else 1
        return 0

    return cmp_to_key(compare)


def rank(
    scored: Iterable[ScoredRecord],
    top_k: int = DEFAULT_CONFIG.top_k,
    tolerance: float = DEFAULT_CONFIG.tie_tolerance,
) -> List[ScoredRecord]:
    """
    Order by duplicate flag, then intent similarity (gaps within ``tolerance``
    count as ties), then lexical similarity; keep the first ``top_k``.
    """
    ordered = sorted(scored, key=_ranking_order(tolerance))
    return ordered[:top_k]


def _as_record(record: Record | Mapping) -> Record:
    if isinstance(record, Record):
        return record
    return Record.model_validate(record)


def score_and_rank(
    query: str,
    records: Iterable[Record | Mapping],
    lexicon: Lexicon = DEFAULT_LEXICON,
    config: ScoringConfig | None = None,
) -> RankingResult:
    """
    Score a query against every record and return the ranked candidates.

    Records without a cached ``intent_text`` get one computed on the fly with
    the query-time normalizer; the value is used for this call only.

    Raises:
        InvalidArgumentError: If ``query`` is missing or not a string.
    """
    if query is None or not isinstance(query, str):
        raise InvalidArgumentError("Query is required")

    config = config or DEFAULT_CONFIG
    records = [_as_record(r) for r in records]
    query_intent = normalize_query(query, lexicon, config.fallback_prefix_length)
    logger.debug(f"Query intent: '{query}' -> '{query_intent}'")

    if not records:
        return RankingResult(query_intent=query_intent)

    # The query joins the corpus as the last document of this snapshot only
    documents = [preprocess_text(r.raw_text) for r in records]
    documents.append(preprocess_text(query))
    model = build_model(documents)
    query_vector = model.vector(len(records))

    scored: List[ScoredRecord] = []
    for index, record in enumerate(records):
        record_intent = record.intent_text or normalize_query(
            record.raw_text, lexicon, config.fallback_prefix_length
        )
        similarity = score(
            query_intent,
            record_intent,
            query_vector,
            model.vector(index),
            lexicon,
            config.entity_dampening,
        )
        is_duplicate = classify(
            similarity, config.intent_threshold, config.lexical_threshold
        )
        logger.bind(
            record_id=record.identifier,
            intent_similarity=similarity.intent_similarity,
            lexical_similarity=similarity.lexical_similarity,
            is_duplicate=is_duplicate,
        ).debug(
            f"Record {record.identifier}: intent='{record_intent}' "
            f"({similarity.intent_similarity:.2f}) "
            f"text({similarity.lexical_similarity:.2f}) duplicate={is_duplicate}"
        )
        scored.append(
            ScoredRecord(
                record=record,
                intent_text=record_intent,
                intent_similarity=similarity.intent_similarity,
                lexical_similarity=similarity.lexical_similarity,
                is_duplicate=is_duplicate,
            )
        )

    ranked = rank(scored, config.top_k, config.tie_tolerance)
    has_duplicate = any(r.is_duplicate for r in ranked)
    logger.info(
        f"Scored {len(records)} records, returning {len(ranked)}, "
        f"has_duplicate={has_duplicate}"
    )

    return RankingResult(
        query_intent=query_intent,
        ranked=ranked,
        has_duplicate=has_duplicate,
        total_considered=len(records),
    )
