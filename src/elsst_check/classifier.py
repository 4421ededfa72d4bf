from __future__ import annotations

import asyncio
import logging
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import httpx

from elsst_check.clients.elsst import ElsstLabelClient
from elsst_check.clients.oai_pmh import RecordFetcher
from elsst_check.context import EvaluationContext
from elsst_check.errors import KeywordQueryError
from elsst_check.http import HttpClientFactory
from elsst_check.keywords import extract_keywords
from elsst_check.matcher import LabelMatcher
from elsst_check.models import Evaluation, KeywordCandidate, LabelCacheScope, Verdict
from elsst_check.url_context import extract_language_code, extract_record_identifier

ELSST_VOCAB_NAME = "ELSST"
ELSST_URI_SUBSTRING = "elsst.cessda.eu"


class Decision(str, Enum):
    NO_KEYWORDS = "no_keywords"
    DECLARED_VOCAB = "declared_vocab"
    DECLARED_VOCAB_URI = "declared_vocab_uri"
    NO_MATCHABLE_TEXT = "no_matchable_text"
    NEEDS_LABEL_MATCH = "needs_label_match"


@dataclass(frozen=True)
class AttributeOutcome:
    decision: Decision
    keyword: KeywordCandidate | None = None  # the keyword that declared ELSST
    texts: tuple[str, ...] = ()  # texts to look up when no attribute decides


def decide_from_attributes(candidates: Sequence[KeywordCandidate]) -> AttributeOutcome:
    """Classify keywords by their vocabulary attributes alone.

    Candidates are inspected in document order and the first one declaring
    ELSST, by `vocab` name or by `vocabURI`, decides.
    """
    if not candidates:
        return AttributeOutcome(Decision.NO_KEYWORDS)

    texts: list[str] = []
    for kw in candidates:
        if kw.vocab == ELSST_VOCAB_NAME:
            return AttributeOutcome(Decision.DECLARED_VOCAB, keyword=kw)
        if kw.vocab_uri and ELSST_URI_SUBSTRING in kw.vocab_uri:
            return AttributeOutcome(Decision.DECLARED_VOCAB_URI, keyword=kw)
        text = kw.text.strip()
        if text:
            texts.append(text)

    if not texts:
        return AttributeOutcome(Decision.NO_MATCHABLE_TEXT)
    return AttributeOutcome(Decision.NEEDS_LABEL_MATCH, texts=tuple(texts))


class ElsstKeywordChecker:
    """Checks whether a CESSDA Data Catalogue record uses ELSST keywords.

    Pipeline: catalogue URL -> record identifier and language -> OAI-PMH
    GetRecord (oai_ddi25) -> DDI keywords -> vocabulary attributes, falling
    back to an exact label match against the ELSST API.

    Verdicts:
    - pass: a keyword declares ELSST or matches an ELSST label
    - fail: no keywords, or none of them match ELSST
    - indeterminate: the check could not be completed (bad URL, fetch or
      parse error, no language for the label lookup, cancellation)

    Use as an async context manager, or call aclose(), to release the HTTP
    client the checker created.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        fetcher: RecordFetcher | None = None,
        matcher: LabelMatcher | None = None,
        cache_scope: LabelCacheScope | str | None = None,
        logger: logging.Logger | None = None,
    ):
        self._owns_client = client is None
        self._client = client or HttpClientFactory.client()
        self._log = logger or logging.getLogger(__name__)
        self.fetcher = fetcher or RecordFetcher(self._client, logger=self._log)
        self.matcher = matcher or LabelMatcher(
            ElsstLabelClient(self._client, logger=self._log),
            cache_scope=cache_scope,
            logger=self._log,
        )

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> ElsstKeywordChecker:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def contains_elsst_keywords(self, url: str) -> Verdict:
        return (await self.evaluate(url)).verdict

    async def evaluate(self, url: str) -> Evaluation:
        """Run the whole check for one catalogue URL. Never raises."""
        context = EvaluationContext(url=url)
        try:
            context.record_identifier = extract_record_identifier(url)
            context.note(self._log, "Extracted record identifier: %s", context.record_identifier)

            context.language = extract_language_code(url)
            context.note(self._log, "Extracted language code: %s", context.language)

            doc = await self.fetcher.fetch(context.record_identifier)
            verdict = await self.validate_keywords(doc, context)
        except asyncio.CancelledError:
            # Reported as indeterminate instead of re-raised; callers never see the cancellation
            self._log.error("Cancelled while checking %s", url)
            context.trace.append("Cancelled before a verdict was reached")
            verdict = Verdict.INDETERMINATE
        except Exception as e:
            self._log.error("Error checking %s: %s", url, e)
            context.trace.append(f"Error: {e}")
            verdict = Verdict.INDETERMINATE

        context.note(self._log, "Result: %s", verdict.value)
        return Evaluation(
            url=url,
            verdict=verdict,
            record_identifier=context.record_identifier,
            language=context.language,
            trace=context.trace,
        )

    async def validate_keywords(self, doc: ET.ElementTree | ET.Element, context: EvaluationContext) -> Verdict:
        """Extract the DDI keywords of `doc` and classify them."""
        try:
            candidates = extract_keywords(doc)
            return await self.classify(candidates, context)
        except KeywordQueryError as e:
            self._log.error("Keyword query evaluation error: %s", e)
        except Exception as e:
            self._log.error("Error validating keywords: %s", e)
        return Verdict.INDETERMINATE

    async def classify(self, candidates: Sequence[KeywordCandidate], context: EvaluationContext) -> Verdict:
        outcome = decide_from_attributes(candidates)

        if outcome.decision is Decision.NO_KEYWORDS:
            context.note(self._log, "No keywords found")
            return Verdict.FAIL
        if outcome.decision is Decision.DECLARED_VOCAB:
            context.note(self._log, "Found ELSST vocabulary declaration in 'vocab' attribute")
            return Verdict.PASS
        if outcome.decision is Decision.DECLARED_VOCAB_URI:
            context.note(self._log, "Found ELSST vocabulary declaration in 'vocabURI' attribute")
            return Verdict.PASS
        if outcome.decision is Decision.NO_MATCHABLE_TEXT:
            context.note(self._log, "Keywords carry no text to look up")
            return Verdict.INDETERMINATE

        context.note(
            self._log,
            "Unable to determine from attributes, checking %d keywords via ELSST API",
            len(outcome.texts),
        )
        if context.language is None:
            context.language = extract_language_code(context.url)
        return await self.matcher.match(outcome.texts, context.language, context)


def check(
    url: str,
    *,
    cache_scope: LabelCacheScope | str | None = None,
    logger: logging.Logger | None = None,
) -> Evaluation:
    """Synchronously evaluate one catalogue URL with a fresh checker."""

    async def _run() -> Evaluation:
        async with ElsstKeywordChecker(cache_scope=cache_scope, logger=logger) as checker:
            return await checker.evaluate(url)

    return asyncio.run(_run())
