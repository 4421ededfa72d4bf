"""Shared pytest fixtures: DDI documents and stubbed HTTP services."""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import unquote_plus

import httpx
import pytest

from elsst_check.http import HttpClientFactory

OAI_HOST = "datacatalogue.cessda.eu"
ELSST_HOST = "skg-if-openapi.cessda.eu"


def ddi_record(*keywords: str, wrap_oai: bool = True) -> str:
    """Build a DDI 2.5 document with the given raw <ddi:keyword> elements."""
    body = "".join(keywords)
    codebook = f"""
        <ddi:codeBook xmlns:ddi="ddi:codebook:2_5">
            <ddi:stdyDscr><ddi:stdyInfo><ddi:subject>{body}</ddi:subject></ddi:stdyInfo></ddi:stdyDscr>
        </ddi:codeBook>
    """
    if not wrap_oai:
        return codebook
    return f"""<?xml version="1.0" encoding="UTF-8"?>
        <OAI-PMH xmlns="http://www.openarchives.org/OAI/2.0/">
            <GetRecord><record><metadata>{codebook}</metadata></record></GetRecord>
        </OAI-PMH>
    """


def elsst_payload(*labels: dict[str, str]) -> dict:
    return {"results": [{"labels": lbl} for lbl in labels]}


def keyword_filter(request: httpx.Request) -> tuple[str, str]:
    """Return (keyword, language) from an ELSST lookup request."""
    raw = request.url.query.decode()
    value = raw.split("filter=", 1)[1]
    labels_part, lang_part = value.split(",cf.search.language:", 1)
    return unquote_plus(labels_part.split("cf.search.labels:", 1)[1]), unquote_plus(lang_part)


class StubServices:
    """Routes requests to the fake OAI-PMH repository and ELSST API."""

    def __init__(self):
        self.record_status = 200
        self.record_body = ddi_record()
        self.labels: dict[str, list[dict[str, str]]] = {}
        self.label_status = 200
        self.requests: list[httpx.Request] = []

    @property
    def label_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == ELSST_HOST]

    @property
    def record_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == OAI_HOST]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == OAI_HOST:
            return httpx.Response(self.record_status, text=self.record_body)
        if request.url.host == ELSST_HOST:
            if self.label_status != 200:
                return httpx.Response(self.label_status, text="unavailable")
            keyword, _lang = keyword_filter(request)
            return httpx.Response(200, json=elsst_payload(*self.labels.get(keyword, [])))
        return httpx.Response(404)


@pytest.fixture
def services() -> StubServices:
    return StubServices()


@pytest.fixture
def make_client(services: StubServices) -> Callable[..., httpx.AsyncClient]:
    def _make(handler: Callable[[httpx.Request], httpx.Response] | None = None) -> httpx.AsyncClient:
        return HttpClientFactory.client(transport=httpx.MockTransport(handler or services.handler))

    return _make
