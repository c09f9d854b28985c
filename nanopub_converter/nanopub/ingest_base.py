"""Common machinery for line-oriented nanopublication converters."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Tuple

from .models import Accepted, ConversionError, Skipped, TransformResult
from .persistence import NanopubStore
from .templates import head_statements

LOGGER = logging.getLogger(__name__)

COMMENT_PREFIX = "#"


@dataclass(slots=True)
class ConversionReport:
    """Simple summary returned after a conversion run."""

    name: str
    lines_read: int = 0
    header_rows: int = 0
    nanopubs_created: int = 0
    statements_written: int = 0
    rows_skipped: int = 0
    rows_malformed: int = 0


class BaseNanopubConverter:
    """Base class implementing the read-dispatch-save workflow.

    Subclasses implement :meth:`convert_row` (and optionally
    :meth:`convert_header_row`).  Each accepted row is written as four named
    graphs: the head graph linking the nanopub to its sub-graphs, then the
    assertion, provenance and publication info graphs.
    """

    name: str = "base"

    def __init__(self, *, has_header: bool = True, skip_malformed: bool = False) -> None:
        self.has_header = has_header
        self.skip_malformed = skip_malformed

    def convert_header_row(self, row: str) -> None:
        """Handle a header line; ignored by default."""

    def convert_row(self, row: str, line_number: int) -> TransformResult:  # pragma: no cover - implemented by subclasses
        raise NotImplementedError

    def iter_lines(self, path: Path) -> Iterator[Tuple[int, str]]:
        with Path(path).open("r", encoding="utf-8") as handle:
            for line_number, line in enumerate(handle, start=1):
                yield line_number, line.rstrip("\r\n")

    def run(self, path: Path, store: NanopubStore, limit: int | None = None) -> ConversionReport:
        return self.run_lines(self.iter_lines(path), store, limit=limit)

    def run_lines(
        self,
        lines: Iterable[Tuple[int, str]],
        store: NanopubStore,
        limit: int | None = None,
    ) -> ConversionReport:
        report = ConversionReport(name=self.name)
        seen_header = not self.has_header
        body_rows = 0
        for line_number, line in lines:
            report.lines_read += 1
            if not line.strip():
                continue
            if line.lstrip().startswith(COMMENT_PREFIX):
                report.header_rows += 1
                self.convert_header_row(line)
                continue
            if not seen_header:
                seen_header = True
                report.header_rows += 1
                self.convert_header_row(line)
                continue
            body_rows += 1
            try:
                result = self.convert_row(line, line_number)
            except ConversionError as exc:
                if not self.skip_malformed:
                    raise
                LOGGER.warning("Skipping malformed line %d: %s", line_number, exc)
                report.rows_malformed += 1
                self.on_malformed(exc)
            else:
                if isinstance(result, Accepted):
                    report.statements_written += self.save(store, result)
                    report.nanopubs_created += 1
                elif isinstance(result, Skipped):
                    report.rows_skipped += 1
            if limit is not None and body_rows >= limit:
                break
        store.flush()
        return report

    def on_malformed(self, error: ConversionError) -> None:
        """Hook for subclasses that track malformed rows."""

    @staticmethod
    def save(store: NanopubStore, result: Accepted) -> int:
        head = head_statements(
            result.nanopub,
            result.assertion_graph,
            result.provenance_graph,
            result.publication_info_graph,
        )
        store.save(result.head_graph, head)
        written = len(head)
        for graph, statements in result.sub_graphs():
            store.save(graph, statements)
            written += len(statements)
        LOGGER.debug("inserted nanopub <%s>", result.nanopub)
        return written


__all__ = ["BaseNanopubConverter", "ConversionReport"]
