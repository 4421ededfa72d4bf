"""Check whether CESSDA Data Catalogue records tag their keywords with ELSST."""

__version__ = "0.1.0"

from elsst_check.classifier import ElsstKeywordChecker, check  # noqa: E402
from elsst_check.models import Evaluation, KeywordCandidate, Verdict  # noqa: E402

__all__ = [
    "__version__",
    "ElsstKeywordChecker",
    "Evaluation",
    "KeywordCandidate",
    "Verdict",
    "check",
]
