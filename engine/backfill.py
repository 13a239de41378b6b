"""
Helpers for callers that keep ``intent_text`` cached on stored records.

Nothing here writes anything: results are returned for the caller to persist.
Each record is normalized independently, so batches can be split across
workers freely.
"""

from typing import Dict, Iterable, List

from engine.lexicon import DEFAULT_LEXICON, Lexicon
from engine.normalizer import normalize_structural
from engine.schemas import Record
from utils.logger import get_logger

logger = get_logger(__name__)


def compute_intent(
    record: Record, lexicon: Lexicon = DEFAULT_LEXICON, fallback_to_raw: bool = False
) -> str:
    """
    Structural intent for a record.

    With ``fallback_to_raw`` an empty skeleton is replaced by the raw text,
    which is the policy ingestion applies before storing.
    """
    intent = normalize_structural(record.raw_text, record.structured_labels, lexicon)
    if not intent and fallback_to_raw:
        return record.raw_text
    return intent


def backfill_intents(
    records: Iterable[Record],
    lexicon: Lexicon = DEFAULT_LEXICON,
    fallback_to_raw: bool = False,
) -> Dict[str | int, str]:
    """Compute intents for records whose ``intent_text`` is missing or empty."""
    computed: Dict[str | int, str] = {}
    total = 0
    for record in records:
        total += 1
        if record.has_intent:
            continue
        computed[record.identifier] = compute_intent(record, lexicon, fallback_to_raw)

    logger.info(f"Computed intent_text for {len(computed)} of {total} records")
    return computed


def find_stale_intents(
    records: Iterable[Record],
    lexicon: Lexicon = DEFAULT_LEXICON,
    fallback_to_raw: bool = False,
) -> List[str | int]:
    """Identifiers of records whose cached intent no longer matches a fresh one."""
    stale = []
    for record in records:
        if not record.has_intent:
            continue
        fresh = compute_intent(record, lexicon, fallback_to_raw)
        if record.intent_text != fresh:
            stale.append(record.identifier)
    if stale:
        logger.warning(f"{len(stale)} records carry a stale intent_text")
    return stale
