"""Row-to-nanopublication transformation for concept profile matching output.

Input lines are whitespace separated::

    concept1_id concept1_external_id concept2_id concept2_external_id match_score p_value {top concepts}

Only the external identifiers (columns 1 and 3) and the p-value (column 5)
are used.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from rdflib import URIRef

from .models import (
    Accepted,
    CPMRecord,
    MalformedIdentifier,
    MalformedRecord,
    RunState,
    SkipReason,
    Skipped,
    Subtype,
    TransformResult,
)
from .templates import (
    assertion_statements,
    padded_index,
    provenance_statements,
    publication_info_statements,
)
from .vocabulary import geneid_uri, omim_uri

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..config import ConverterConfig

LOGGER = logging.getLogger(__name__)

NULL_CONCEPT = "null"
OMIM_PATTERN = re.compile(r"OM_(\d+)")
MIN_TOKENS = 6


def round_p_value(raw: str) -> float:
    """Round ``raw`` to three significant digits.

    The value is formatted as ``%.3E`` and parsed back, so boundary cases
    round exactly the way the scientific-notation formatter does.
    """

    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"non-finite p-value {raw!r}")
    return float("%.3E" % value)


def extract_omim_number(identifier: str) -> str | None:
    match = OMIM_PATTERN.search(identifier)
    if match is None:
        return None
    return match.group(1)


def parse_row(row: str, row_number: int) -> CPMRecord:
    tokens = row.split()
    if len(tokens) < MIN_TOKENS:
        raise MalformedRecord(f"expected at least {MIN_TOKENS} columns, found {len(tokens)}", row_number)
    try:
        p_value = round_p_value(tokens[5])
    except ValueError as exc:
        raise MalformedRecord(f"invalid p-value {tokens[5]!r}", row_number) from exc
    return CPMRecord(concept1_id=tokens[1], concept2_id=tokens[3], p_value=p_value, line_number=row_number)


class RecordTransformer:
    """Validate one row and build its nanopublication statements."""

    def __init__(
        self,
        config: "ConverterConfig",
        state: RunState | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.state = state or RunState()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def subtype(self) -> Subtype:
        return self.config.subtype

    def process(self, row: str, row_number: int) -> TransformResult:
        record = parse_row(row, row_number)

        # concept2 is checked first even though it is reported as the gene id.
        if record.concept2_id == NULL_CONCEPT:
            LOGGER.info("line %d has no gene id. skipped.", row_number)
            return self._skip(SkipReason.NO_CONCEPT_TWO, row_number)
        if record.concept1_id == NULL_CONCEPT:
            LOGGER.info("line %d has no omim id. skipped.", row_number)
            return self._skip(SkipReason.NO_CONCEPT_ONE, row_number)
        if record.p_value > self.config.p_value_cutoff:
            LOGGER.warning(
                "** line %d has a p-value greater than %s. skipped. **",
                row_number,
                self.config.p_value_cutoff,
            )
            return self._skip(SkipReason.P_VALUE_TOO_HIGH, row_number)

        participants = self._participants(record)
        self.state.record_concepts(record.concept1_id, record.concept2_id)
        row_index = self.state.next_row_index()
        return self._build(row_index, participants, record.p_value)

    def _skip(self, reason: SkipReason, row_number: int) -> Skipped:
        self.state.record_skip(reason)
        return Skipped(reason=reason, line_number=row_number)

    def _participants(self, record: CPMRecord) -> tuple[URIRef, URIRef]:
        if self.subtype is Subtype.GDA:
            omim_number = extract_omim_number(record.concept1_id)
            if omim_number is None:
                raise MalformedIdentifier(record.concept1_id, OMIM_PATTERN.pattern, record.line_number)
            return geneid_uri(record.concept2_id), omim_uri(omim_number)
        return geneid_uri(record.concept1_id), geneid_uri(record.concept2_id)

    def _build(self, row_index: int, participants: tuple[URIRef, URIRef], p_value: float) -> Accepted:
        nanopub = URIRef(f"{self.config.nanopub_base}{padded_index(row_index)}")
        result = Accepted(nanopub=nanopub, row_index=row_index)
        result.assertion = assertion_statements(self.subtype, row_index, participants, p_value)
        result.provenance = provenance_statements(self.subtype, result.assertion_graph)
        result.publication_info = publication_info_statements(nanopub, created=self.clock())
        return result


__all__ = [
    "RecordTransformer",
    "extract_omim_number",
    "parse_row",
    "round_p_value",
]
