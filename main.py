"""
Duplicate-feature finder - main entry point.

Ties together:
- Lexicon: verb tables, known entities, content keywords (loaded once)
- Normalizer: structural (backfill) and query-time intent skeletons
- Ranker: TF-IDF + intent scoring, duplicate flags, top-k candidates
- Backfill: intent_text values for records that lack them
"""

import json
import time
from pathlib import Path
from typing import Iterable, Mapping

from dotenv import load_dotenv

from engine.backfill import backfill_intents, find_stale_intents
from engine.lexicon import DEFAULT_LEXICON, Lexicon, load_lexicon
from engine.normalizer import normalize_query, normalize_structural
from engine.ranker import score_and_rank
from engine.schemas import RankingResult, Record
from engine.settings import ScoringConfig, get_lexicon_path
from utils.logger import get_logger

load_dotenv()

logger = get_logger(__name__)


class DuplicateFinder:
    """Holds one lexicon and one scoring config; every call is stateless."""

    def __init__(
        self,
        lexicon: Lexicon | None = None,
        config: ScoringConfig | None = None,
    ):
        if lexicon is None:
            lexicon_path = get_lexicon_path()
            lexicon = load_lexicon(lexicon_path) if lexicon_path else DEFAULT_LEXICON
        self.lexicon = lexicon
        self.config = config or ScoringConfig.from_env()

        logger.info(
            f"DuplicateFinder initialized (lexicon={self.lexicon.stats()}, "
            f"intent>={self.config.intent_threshold}, "
            f"lexical>={self.config.lexical_threshold})"
        )

    def normalize_structural(self, raw_text: str, labels: list[str] | None = None) -> str:
        return normalize_structural(raw_text, labels, self.lexicon)

    def normalize_query(self, raw_text: str) -> str:
        return normalize_query(raw_text, self.lexicon, self.config.fallback_prefix_length)

    def search(self, query: str, records: Iterable[Record | Mapping]) -> RankingResult:
        """Rank records against a query and flag duplicates."""
        start_time = time.perf_counter()
        result = score_and_rank(query, records, self.lexicon, self.config)
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"Search for '{query[:50]}' took {duration_ms:.2f}ms")
        return result

    def backfill(
        self, records: Iterable[Record], fallback_to_raw: bool = False
    ) -> dict:
        """Intent values for records missing one; persisting them is up to the caller."""
        return backfill_intents(records, self.lexicon, fallback_to_raw)

    def stale_records(
        self, records: Iterable[Record], fallback_to_raw: bool = False
    ) -> list:
        """Identifiers whose cached intent differs from a recomputation under the same policy."""
        return find_stale_intents(records, self.lexicon, fallback_to_raw)


def load_records(path: str) -> list[Record]:
    """Load records from a JSON file holding a list of record objects."""
    with open(Path(path), "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of records")
    return [Record.model_validate(item) for item in data]


def main():
    """Main entry point."""
    demo_records = [
        Record(identifier=1, raw_text="打开全民K歌搜索山楂树之恋", intent_text="打开 搜索"),
        Record(identifier=2, raw_text="打开微信", intent_text="打开"),
        Record(identifier=3, raw_text="打开 抖音 点赞 视频"),
    ]

    query = input("Enter a feature query (or press Enter for demo): ").strip()
    if not query:
        query = "打开全民K歌找一下山楂树之恋这首歌"

    finder = DuplicateFinder()
    result = finder.search(query, demo_records)

    print(f"\n{'=' * 50}")
    print(f"Query intent: {result.query_intent}")
    print(f"Has duplicate: {result.has_duplicate}")
    print("=" * 50)
    for item in result.ranked:
        flag = "DUPLICATE" if item.is_duplicate else "distinct"
        print(
            f"  [{item.identifier}] {item.record.raw_text} | intent='{item.intent_text}' "
            f"| intent={item.intent_similarity:.2f} text={item.lexical_similarity:.2f} | {flag}"
        )


if __name__ == "__main__":
    main()
