"""Pydantic schemas for records, scores and ranking results."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

LEGACY_LABEL_FIELDS = ("level_1", "function_point", "sub_function")


class Record(BaseModel):
    """A corpus entry as supplied by the record store."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    identifier: str | int = Field(
        ..., validation_alias=AliasChoices("identifier", "id")
    )
    structured_labels: list[str] = Field(
        default_factory=list, max_length=3, description="Hierarchy labels, outermost first"
    )
    raw_text: str = Field(
        ..., validation_alias=AliasChoices("raw_text", "search_text")
    )
    intent_text: str | None = Field(
        None, description="Cached structural intent; None when never computed"
    )

    @model_validator(mode="before")
    @classmethod
    def _labels_from_legacy_columns(cls, data: Any) -> Any:
        if isinstance(data, dict) and "structured_labels" not in data:
            labels = [data.get(key) for key in LEGACY_LABEL_FIELDS]
            labels = [label for label in labels if label]
            if labels:
                data = {**data, "structured_labels": labels}
        return data

    @classmethod
    def from_parts(
        cls,
        identifier: str | int,
        labels: list[str],
        queries: list[str],
        intent_text: str | None = None,
    ) -> "Record":
        """Compose raw_text from hierarchy labels and query variants."""
        labels = [label.strip() for label in labels if label and label.strip()]
        queries = [q.strip() for q in queries if q and q.strip()]
        return cls(
            identifier=identifier,
            structured_labels=labels,
            raw_text=" ".join(labels + queries),
            intent_text=intent_text,
        )

    @property
    def has_intent(self) -> bool:
        return bool(self.intent_text)


class SimilarityScore(BaseModel):
    intent_similarity: float = Field(..., ge=0.0, le=1.0)
    lexical_similarity: float = Field(..., ge=0.0, le=1.0)


class ScoredRecord(BaseModel):
    """A record paired with its scores against one query."""

    record: Record
    intent_text: str = Field(..., description="Intent actually used for scoring")
    intent_similarity: float
    lexical_similarity: float
    is_duplicate: bool

    @property
    def identifier(self) -> str | int:
        return self.record.identifier


class RankingResult(BaseModel):
    query_intent: str
    ranked: list[ScoredRecord] = Field(default_factory=list)
    has_duplicate: bool = False
    total_considered: int = 0
