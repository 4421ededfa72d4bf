from __future__ import annotations

import argparse
import logging
import sys

from elsst_check import __version__
from elsst_check.classifier import check
from elsst_check.models import LabelCacheScope, Verdict
from elsst_check.settings import settings

logger = logging.getLogger(__name__)


def _configure_logging(level: str | None) -> None:
    level = (level or settings.log_level or "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="elsst-check",
        description="Check whether a CESSDA Data Catalogue record uses ELSST keywords.",
    )
    p.add_argument("url", help="Catalogue detail page URL, e.g. https://datacatalogue.cessda.eu/detail/<id>?lang=en")
    p.add_argument("--json", action="store_true", help="Print the full evaluation with its trace as JSON")
    p.add_argument(
        "--cache-scope",
        choices=[s.value for s in LabelCacheScope],
        default=None,
        help="Lifetime of fetched ELSST labels (default from ELSST_CHECK_LABEL_CACHE_SCOPE)",
    )
    p.add_argument("--log-level", default=None, help="Python logging level")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)

    logger.info("URL to check: %s", args.url)
    evaluation = check(args.url, cache_scope=args.cache_scope)

    if args.json:
        print(evaluation.model_dump_json(indent=2))
    else:
        print(evaluation.verdict.value)
    return 0 if evaluation.verdict is Verdict.PASS else 1


def app() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    app()
