from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from elsst_check.matcher import LabelSet


@dataclass
class EvaluationContext:
    """State owned by one evaluation of one catalogue URL."""

    url: str
    record_identifier: str | None = None
    language: str | None = None
    labels: LabelSet | None = None  # call-scoped label cache
    trace: list[str] = field(default_factory=list)

    def note(self, logger: logging.Logger, msg: str, *args) -> None:
        """Log at INFO and keep the rendered line for the evaluation trace."""
        logger.info(msg, *args)
        self.trace.append(msg % args if args else msg)
