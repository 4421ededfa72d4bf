from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from elsst_check.errors import InvalidCatalogueUrlError

logger = logging.getLogger(__name__)

_DETAIL_SEGMENT = "/detail/"
_LANG_VALUE = re.compile(r"[a-zA-Z]{2}")
_WHITESPACE = re.compile(r"\s+")


def extract_record_identifier(url: str) -> str:
    """Return the record identifier following `/detail/` in a catalogue URL.

    examples: https://datacatalogue.cessda.eu/detail/abc123?lang=en -> abc123
    """
    clean = _WHITESPACE.sub("", url)
    clean = clean.split("?", 1)[0]

    idx = clean.find(_DETAIL_SEGMENT)
    if idx == -1:
        raise InvalidCatalogueUrlError(f"URL must contain '{_DETAIL_SEGMENT}': {url}")
    identifier = clean[idx + len(_DETAIL_SEGMENT) :]
    if not identifier:
        raise InvalidCatalogueUrlError(f"No identifier in URL: {url}")
    return identifier


def extract_language_code(url: str) -> str | None:
    """Return the lower-cased two-letter `lang` query parameter, if any.

    Never raises: malformed URLs and invalid values yield None.
    """
    try:
        query = urlsplit(url).query
    except ValueError as e:
        logger.warning("Could not parse URL %r: %s", url, e)
        return None

    for param in query.split("&") if query else []:
        key, sep, value = param.partition("=")
        if sep and key.lower() == "lang" and _LANG_VALUE.fullmatch(value):
            return value.lower()
    return None
