from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Iterator, Sequence
from itertools import chain

from elsst_check.clients.elsst import ElsstLabelClient
from elsst_check.context import EvaluationContext
from elsst_check.models import LabelCacheScope, Verdict
from elsst_check.settings import settings


class LabelSet:
    """Immutable set of `lang:"label"` entries returned by the ELSST API."""

    def __init__(self, entries: Iterable[str] = ()):
        self._entries = frozenset(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, entry: object) -> bool:
        return entry in self._entries

    def labels_for(self, language: str) -> set[str]:
        """Upper-cased labels of one language, composite prefix and quotes removed."""
        prefix = f"{language}:"
        return {
            e[len(prefix) :].replace('"', "").strip().upper()
            for e in self._entries
            if e.startswith(prefix)
        }


class LabelMatcher:
    """Matches keyword texts against ELSST labels in the record's language.

    Lookups fan out concurrently, one per keyword. The resulting LabelSet is
    cached either per evaluation (LabelCacheScope.CALL, stored on the
    EvaluationContext) or for the lifetime of the matcher
    (LabelCacheScope.INSTANCE). With INSTANCE scope later calls reuse the
    first label set even for different keywords.
    """

    def __init__(
        self,
        label_client: ElsstLabelClient,
        *,
        cache_scope: LabelCacheScope | str | None = None,
        max_concurrency: int | None = None,
        logger: logging.Logger | None = None,
    ):
        self._labels_api = label_client
        self.cache_scope = LabelCacheScope(cache_scope or settings.label_cache_scope)
        self._max_concurrency = max_concurrency or settings.max_concurrent_lookups
        self._cached: LabelSet | None = None
        self._log = logger or logging.getLogger(__name__)

    async def fetch_labels(self, keywords: Sequence[str], language: str) -> LabelSet:
        """Query the ELSST API for every non-blank keyword and merge the results."""
        queries = [k for k in keywords if k and k.strip()]
        if not queries:
            return LabelSet()

        limit = asyncio.Semaphore(min(len(queries), self._max_concurrency))

        async def bounded(keyword: str) -> set[str]:
            async with limit:
                return await self._labels_api.labels(keyword, language)

        # Merge only after every lookup has finished
        results = await asyncio.gather(*(bounded(k) for k in queries), return_exceptions=True)

        batches: list[set[str]] = []
        for keyword, result in zip(queries, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                # A failed lookup contributes no labels
                self._log.warning("ELSST lookup failed for %r: %s", keyword, result)
                continue
            batches.append(result)
        return LabelSet(chain.from_iterable(batches))

    async def label_set(
        self,
        keywords: Sequence[str],
        language: str,
        context: EvaluationContext | None = None,
    ) -> LabelSet:
        if self.cache_scope is LabelCacheScope.INSTANCE:
            if self._cached is None:
                self._cached = await self.fetch_labels(keywords, language)
            return self._cached

        if context is None:
            return await self.fetch_labels(keywords, language)
        if context.labels is None:
            context.labels = await self.fetch_labels(keywords, language)
        return context.labels

    async def match(
        self,
        keywords: Sequence[str],
        language: str | None,
        context: EvaluationContext | None = None,
    ) -> Verdict:
        if not language:
            self._note(context, "No language code available, cannot query ELSST labels")
            return Verdict.INDETERMINATE

        labels = await self.label_set(keywords, language, context)
        self._note(context, "Number of ELSST label entries: %d", len(labels))

        vocabulary = labels.labels_for(language)
        matches = [k for k in keywords if k.upper() in vocabulary]
        if matches:
            self._note(context, "pass: found %d keyword(s) matching ELSST vocabulary", len(matches))
            return Verdict.PASS
        self._note(context, "fail: no keywords match ELSST vocabulary")
        return Verdict.FAIL

    def _note(self, context: EvaluationContext | None, msg: str, *args) -> None:
        if context is None:
            self._log.info(msg, *args)
        else:
            context.note(self._log, msg, *args)
