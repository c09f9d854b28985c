"""Utilities to run a converter over an input file with tracing and reporting."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Mapping

from opentelemetry import trace

from .ingest_base import BaseNanopubConverter, ConversionReport
from .ingest_cpm import CPMNanopubConverter
from .persistence import NanopubStore

LOGGER = logging.getLogger(__name__)

_TRACER = trace.get_tracer(__name__)


@contextmanager
def _telemetry_span(name: str, attributes: Mapping[str, object] | None = None):
    with _TRACER.start_as_current_span(name) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)  # type: ignore[arg-type]
        yield span


def log_summary(converter: CPMNanopubConverter, top: int = 10) -> None:
    summary = converter.summary(top=top)
    LOGGER.info(
        "%s summary: %d nanopubs, %d distinct concept1 ids, %d distinct concept2 ids",
        summary["subtype"],
        summary["nanopubs"],
        summary["distinct_concept1"],
        summary["distinct_concept2"],
    )
    for reason, count in summary["skipped"].items():
        LOGGER.info("rows skipped (%s): %d", reason, count)
    if summary["malformed"]:
        LOGGER.warning("rows with malformed identifiers or columns: %d", summary["malformed"])


def run_conversion(
    converter: BaseNanopubConverter,
    input_path: Path,
    store: NanopubStore,
    *,
    limit: int | None = None,
) -> ConversionReport:
    """Convert ``input_path`` with ``converter``, persisting into ``store``."""

    input_path = Path(input_path)
    attributes: dict[str, object] = {"converter.name": converter.name, "input.path": str(input_path)}
    if limit is not None:
        attributes["limit"] = limit
    with _telemetry_span("convert.run", attributes) as span:
        LOGGER.info("Converting %s with %s converter", input_path, converter.name)
        report = converter.run(input_path, store, limit=limit)
        span.set_attribute("nanopubs.created", report.nanopubs_created)
        span.set_attribute("rows.skipped", report.rows_skipped)
    LOGGER.info(
        "Completed %s conversion: %d lines, %d nanopubs, %d statements, %d skipped, %d malformed",
        report.name,
        report.lines_read,
        report.nanopubs_created,
        report.statements_written,
        report.rows_skipped,
        report.rows_malformed,
    )
    if isinstance(converter, CPMNanopubConverter):
        log_summary(converter)
    return report


__all__ = ["log_summary", "run_conversion"]
