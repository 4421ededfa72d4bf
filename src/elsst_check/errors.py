from __future__ import annotations


class ElsstCheckError(Exception):
    """Base class for errors raised while checking a catalogue record."""


class InvalidCatalogueUrlError(ElsstCheckError, ValueError):
    """The URL does not identify a catalogue record (no `/detail/<id>`)."""


class RecordUnavailableError(ElsstCheckError):
    """Unable to retrieve document.

    Raised for transport failures, non-2xx statuses, empty bodies and
    responses that do not carry a DDI codeBook.
    """


class KeywordQueryError(ElsstCheckError):
    """The keyword query could not be evaluated against the metadata document."""
