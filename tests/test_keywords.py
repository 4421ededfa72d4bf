"""Tests for DDI keyword extraction."""

import xml.etree.ElementTree as ET

import pytest
from conftest import ddi_record

from elsst_check.errors import KeywordQueryError
from elsst_check.keywords import _findall, extract_keywords
from elsst_check.models import KeywordCandidate


def _tree(xml: str) -> ET.ElementTree:
    return ET.ElementTree(ET.fromstring(xml))


@pytest.mark.unit
def test_extracts_text_and_attributes_in_document_order():
    doc = _tree(
        ddi_record(
            '<ddi:keyword vocab="ELSST" vocabURI="https://elsst.cessda.eu/id/1">  INCOME </ddi:keyword>',
            "<ddi:keyword>HOUSING</ddi:keyword>",
            wrap_oai=False,
        )
    )

    assert extract_keywords(doc) == [
        KeywordCandidate(text="INCOME", vocab="ELSST", vocab_uri="https://elsst.cessda.eu/id/1"),
        KeywordCandidate(text="HOUSING"),
    ]


@pytest.mark.unit
def test_absent_and_empty_attributes_are_distinct():
    doc = _tree(ddi_record('<ddi:keyword vocab="">HOUSING</ddi:keyword>', wrap_oai=False))

    [kw] = extract_keywords(doc)
    assert kw.vocab == ""
    assert kw.vocab_uri is None


@pytest.mark.unit
def test_keeps_attributes_of_keywords_without_text():
    doc = _tree(
        ddi_record(
            "<ddi:keyword>   </ddi:keyword>",
            '<ddi:keyword vocab="ELSST"/>',
            "<ddi:keyword>EMPLOYMENT</ddi:keyword>",
            wrap_oai=False,
        )
    )

    assert extract_keywords(doc) == [
        KeywordCandidate(text=""),
        KeywordCandidate(text="", vocab="ELSST"),
        KeywordCandidate(text="EMPLOYMENT"),
    ]


@pytest.mark.unit
def test_finds_codebook_inside_oai_envelope():
    root = ET.fromstring(ddi_record("<ddi:keyword>POVERTY</ddi:keyword>"))

    assert [k.text for k in extract_keywords(root)] == ["POVERTY"]


@pytest.mark.unit
def test_no_keywords_is_empty_list():
    doc = _tree("<ddi:codeBook xmlns:ddi='ddi:codebook:2_5'></ddi:codeBook>")

    assert extract_keywords(doc) == []


@pytest.mark.unit
def test_keywords_outside_subject_are_ignored():
    doc = _tree(
        """
        <ddi:codeBook xmlns:ddi="ddi:codebook:2_5">
            <ddi:stdyDscr><ddi:keyword>STRAY</ddi:keyword></ddi:stdyDscr>
        </ddi:codeBook>
        """
    )

    assert extract_keywords(doc) == []


@pytest.mark.unit
def test_unbound_prefix_raises_query_error():
    root = ET.fromstring("<root/>")

    with pytest.raises(KeywordQueryError):
        _findall(root, "nope:child")
