"""Scoring configuration, overridable through environment variables.

Entry points call load_dotenv() first, so a .env file is honored as well.
"""

import os

from pydantic import BaseModel, Field


class ScoringConfig(BaseModel):
    """Thresholds and limits for classification and ranking."""

    model_config = {"frozen": True}

    intent_threshold: float = Field(0.7, ge=0.0, le=1.0)
    lexical_threshold: float = Field(0.3, ge=0.0, le=1.0)
    entity_dampening: float = Field(
        0.3, ge=0.0, le=1.0, description="Multiplier when both sides name different entities"
    )
    tie_tolerance: float = Field(0.01, ge=0.0, le=1.0)
    top_k: int = Field(5, ge=1)
    fallback_prefix_length: int = Field(20, ge=1)

    @classmethod
    def from_env(cls) -> "ScoringConfig":
        """Build config from DEDUP_* environment variables, defaults otherwise."""
        env_map = {
            "intent_threshold": "DEDUP_INTENT_THRESHOLD",
            "lexical_threshold": "DEDUP_LEXICAL_THRESHOLD",
            "entity_dampening": "DEDUP_ENTITY_DAMPENING",
            "tie_tolerance": "DEDUP_TIE_TOLERANCE",
            "top_k": "DEDUP_TOP_K",
            "fallback_prefix_length": "DEDUP_FALLBACK_PREFIX",
        }
        values = {
            field: os.getenv(var) for field, var in env_map.items() if os.getenv(var)
        }
        return cls(**values)


DEFAULT_CONFIG = ScoringConfig()


def get_lexicon_path() -> str | None:
    return os.getenv("DEDUP_LEXICON_PATH") or None
