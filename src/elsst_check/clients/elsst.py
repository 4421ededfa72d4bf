from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote_plus

import httpx

from elsst_check.http import HttpClientFactory, transient_retry
from elsst_check.settings import settings


def label_entry(language: str, label: str) -> str:
    """Composite LabelSet key; the quotes keep `:` inside labels unambiguous."""
    return f'{language}:"{label}"'


def parse_labels(payload: Any) -> set[str]:
    """Collect `lang:"label"` entries from an ELSST topics API response.

    Expected shape: {"results": [{"labels": {"en": "HOUSING", ...}}, ...]}
    """
    entries: set[str] = set()
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        return entries
    for r in results:
        labels = r.get("labels") if isinstance(r, dict) else None
        if not isinstance(labels, dict):
            continue
        for language, text in labels.items():
            if isinstance(text, (dict, list)) or text is None:
                continue
            entries.add(label_entry(language, str(text)))
    return entries


class ElsstLabelClient:
    """ELSST topics API client (CESSDA SKG-IF OpenAPI).

    Looks up candidate labels for one keyword in one language.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        base_url: str | None = None,
        logger: logging.Logger | None = None,
    ):
        self._owns_client = client is None
        self._client = client or HttpClientFactory.client()
        self._base_url = base_url or settings.elsst_api_url
        self._log = logger or logging.getLogger(__name__)

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    def query_url(self, keyword: str, language: str) -> str:
        return (
            f"{self._base_url}?filter=cf.search.labels:{quote_plus(keyword)}"
            f",cf.search.language:{quote_plus(language)}"
        )

    @transient_retry()
    async def _get(self, url: str) -> httpx.Response:
        return await self._client.get(url, headers={"Accept": "application/json"})

    async def labels(self, keyword: str, language: str) -> set[str]:
        """Return the label entries the API knows for `keyword`.

        A non-2xx response contributes no labels. Transport errors (after
        retries) and malformed JSON propagate to the caller.
        """
        url = self.query_url(keyword, language)
        r = await self._get(url)
        if not r.is_success:
            self._log.warning("ELSST API returned %s for: %s", r.status_code, url)
            return set()
        return parse_labels(r.json())
