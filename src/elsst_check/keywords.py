from __future__ import annotations

import xml.etree.ElementTree as ET

from elsst_check.errors import KeywordQueryError
from elsst_check.models import KeywordCandidate

DDI_NAMESPACE = "ddi:codebook:2_5"
NS = {"ddi": DDI_NAMESPACE}
CODEBOOK_TAG = f"{{{DDI_NAMESPACE}}}codeBook"

# Relative to a codeBook element
KEYWORD_PATH = "ddi:stdyDscr/ddi:stdyInfo/ddi:subject/ddi:keyword"


def _findall(node: ET.Element, path: str) -> list[ET.Element]:
    try:
        return node.findall(path, NS)
    except (SyntaxError, KeyError) as e:
        # ElementPath reports bad paths as SyntaxError and unbound prefixes as KeyError
        raise KeywordQueryError(f"Cannot evaluate {path!r}: {e}") from e


def extract_keywords(doc: ET.ElementTree | ET.Element) -> list[KeywordCandidate]:
    """Return the subject keywords of a DDI 2.5 document in document order.

    Every keyword element is returned, including those without text, so their
    vocabulary attributes can still be checked; `text` is then "". An empty
    list means the record declares no keyword elements.
    """
    root = doc.getroot() if isinstance(doc, ET.ElementTree) else doc
    if root is None:
        raise KeywordQueryError("Metadata document has no root element")

    codebooks = [root] if root.tag == CODEBOOK_TAG else []
    codebooks += _findall(root, ".//ddi:codeBook")

    keywords: list[KeywordCandidate] = []
    for codebook in codebooks:
        for el in _findall(codebook, KEYWORD_PATH):
            keywords.append(
                KeywordCandidate(
                    text="".join(el.itertext()).strip(),
                    vocab=el.attrib.get("vocab"),
                    vocab_uri=el.attrib.get("vocabURI"),
                )
            )
    return keywords
