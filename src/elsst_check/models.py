from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Verdict(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    INDETERMINATE = "indeterminate"


class LabelCacheScope(str, Enum):
    """Lifetime of the label set fetched from the ELSST API."""

    CALL = "call"
    INSTANCE = "instance"


class KeywordCandidate(BaseModel):
    """One DDI `<keyword>` occurrence.

    Missing attributes are None, so an absent `vocab` is distinguishable from
    `vocab=""`.
    """

    model_config = ConfigDict(frozen=True)

    text: str = ""  # trimmed; empty when the element has no text
    vocab: str | None = None
    vocab_uri: str | None = None


class Evaluation(BaseModel):
    url: str
    verdict: Verdict
    record_identifier: str | None = None
    language: str | None = None

    # Human-readable steps, in the order they happened
    trace: list[str] = Field(default_factory=list)
