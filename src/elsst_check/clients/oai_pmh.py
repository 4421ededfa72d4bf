from __future__ import annotations

import copy
import logging
import xml.etree.ElementTree as ET

import httpx

from elsst_check.errors import RecordUnavailableError
from elsst_check.http import HttpClientFactory
from elsst_check.keywords import CODEBOOK_TAG
from elsst_check.settings import settings

_XML_ACCEPT = "application/xml, text/xml, */*"
_PREVIEW_CHARS = 500


def isolate_codebook(content: bytes) -> ET.ElementTree:
    """Parse an OAI-PMH response and re-root its DDI codeBook into a new tree."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise RecordUnavailableError(f"Malformed XML: {e}") from e

    # iter() visits the root itself first, so a bare codeBook document also works
    codebook = next(root.iter(CODEBOOK_TAG), None)
    if codebook is None:
        raise RecordUnavailableError("No DDI codeBook found")
    return ET.ElementTree(copy.deepcopy(codebook))


class RecordFetcher:
    """Fetches DDI 2.5 records from the CESSDA Data Catalogue OAI-PMH endpoint.

    Requests are not retried: a failed fetch surfaces immediately as
    RecordUnavailableError.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        base_url: str | None = None,
        metadata_prefix: str | None = None,
        logger: logging.Logger | None = None,
    ):
        self._owns_client = client is None
        self._client = client or HttpClientFactory.client()
        self._base_url = base_url or settings.oai_pmh_url
        self._metadata_prefix = metadata_prefix or settings.metadata_prefix
        self._log = logger or logging.getLogger(__name__)

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    def record_url(self, identifier: str) -> str:
        # The identifier is used as found in the catalogue's own links
        return (
            f"{self._base_url}?verb=GetRecord&metadataPrefix={self._metadata_prefix}"
            f"&identifier={identifier}"
        )

    async def fetch(self, identifier: str) -> ET.ElementTree:
        url = self.record_url(identifier)
        try:
            r = await self._client.get(
                url,
                headers={"Accept": _XML_ACCEPT, "User-Agent": settings.user_agent},
            )
        except httpx.HTTPError as e:
            raise RecordUnavailableError(f"Failed to fetch document from {url}: {e}") from e

        if not r.is_success:
            raise RecordUnavailableError(f"Failed to fetch document: HTTP {r.status_code}")
        if not r.content:
            raise RecordUnavailableError("Empty response body")

        self._log.info("Parsing XML response from OAI-PMH endpoint at: %s", url)
        try:
            return isolate_codebook(r.content)
        except RecordUnavailableError:
            preview = r.content[:_PREVIEW_CHARS].decode("utf-8", errors="replace")
            self._log.error("Failed to parse XML. Preview: %s", preview)
            raise
