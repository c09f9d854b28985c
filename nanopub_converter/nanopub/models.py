"""Core data models for nanopublication conversion.

A converted row becomes an :class:`Accepted` result holding the statements
for the three named sub-graphs of one nanopublication.  Rejected rows become
:class:`Skipped` results.  Structural problems (a row that cannot be
tokenised, an identifier that does not have the expected form) are raised as
:class:`ConversionError` subclasses instead, so callers can tell soft
filtering apart from broken input.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Union

from rdflib import Literal, Namespace, URIRef

from . import vocabulary

Term = Union[URIRef, Literal]
Statement = Tuple[URIRef, URIRef, Term]


class ConversionError(ValueError):
    """Base class for hard conversion failures."""


class UnsupportedSubtype(ConversionError):
    """Raised when a nanopub subtype other than ``gda``/``ppa`` is requested."""

    def __init__(self, subtype: object):
        super().__init__(f"Subtype {subtype} is not supported.")
        self.subtype = subtype


class MalformedIdentifier(ConversionError):
    """Raised when a concept identifier does not have the required form."""

    def __init__(self, identifier: str, expected: str, line_number: int | None = None):
        location = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{location}identifier {identifier!r} does not match {expected}")
        self.identifier = identifier
        self.expected = expected
        self.line_number = line_number


class MalformedRecord(ConversionError):
    """Raised when a row lacks the expected columns or has an unreadable p-value."""

    def __init__(self, message: str, line_number: int | None = None):
        location = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{location}{message}")
        self.line_number = line_number


class Subtype(str, Enum):
    """Association domain selected for a whole run."""

    GDA = "gda"
    PPA = "ppa"

    @classmethod
    def parse(cls, value: "Subtype | str") -> "Subtype":
        if isinstance(value, Subtype):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedSubtype(value) from None

    @property
    def namespace(self) -> Namespace:
        return vocabulary.GDA if self is Subtype.GDA else vocabulary.PPA

    @property
    def path_segment(self) -> str:
        if self is Subtype.GDA:
            return "gene_disease_associations"
        return "protein_protein_associations"

    @property
    def derived_from(self) -> URIRef:
        return vocabulary.GDA_DERIVED_FROM if self is Subtype.GDA else vocabulary.PPA_DERIVED_FROM

    @property
    def generated_by(self) -> URIRef:
        return vocabulary.GDA_GENERATED_BY if self is Subtype.GDA else vocabulary.PPA_GENERATED_BY


class SkipReason(str, Enum):
    """Why a row did not produce a nanopublication."""

    NO_CONCEPT_TWO = "no_concept_two"
    NO_CONCEPT_ONE = "no_concept_one"
    P_VALUE_TOO_HIGH = "p_value_too_high"


@dataclass(slots=True)
class CPMRecord:
    """Fields read from one concept profile matching output line."""

    concept1_id: str
    concept2_id: str
    p_value: float
    line_number: int


@dataclass(slots=True)
class Skipped:
    reason: SkipReason
    line_number: int


@dataclass(slots=True)
class Accepted:
    """Statements of one nanopublication, partitioned by sub-graph."""

    nanopub: URIRef
    row_index: int
    assertion: List[Statement] = field(default_factory=list)
    provenance: List[Statement] = field(default_factory=list)
    publication_info: List[Statement] = field(default_factory=list)

    @property
    def head_graph(self) -> URIRef:
        return URIRef(f"{self.nanopub}#head")

    @property
    def assertion_graph(self) -> URIRef:
        return URIRef(f"{self.nanopub}#assertion")

    @property
    def provenance_graph(self) -> URIRef:
        return URIRef(f"{self.nanopub}#provenance")

    @property
    def publication_info_graph(self) -> URIRef:
        return URIRef(f"{self.nanopub}#publicationInfo")

    def sub_graphs(self) -> List[Tuple[URIRef, List[Statement]]]:
        return [
            (self.assertion_graph, self.assertion),
            (self.provenance_graph, self.provenance),
            (self.publication_info_graph, self.publication_info),
        ]


TransformResult = Union[Accepted, Skipped]


@dataclass(slots=True)
class RunState:
    """Counters and the row-index cursor for one conversion run.

    ``row_index`` holds the last index handed out; only accepted rows advance
    it.  The tallies are plain sums, so states produced by separate workers can
    be folded together with :meth:`merge`.
    """

    row_index: int = 0
    concept1_counts: Counter = field(default_factory=Counter)
    concept2_counts: Counter = field(default_factory=Counter)
    skipped: Counter = field(default_factory=Counter)
    malformed: int = 0

    def next_row_index(self) -> int:
        self.row_index += 1
        return self.row_index

    def record_concepts(self, concept1_id: str, concept2_id: str) -> None:
        self.concept1_counts[concept1_id] += 1
        self.concept2_counts[concept2_id] += 1

    def record_skip(self, reason: SkipReason) -> None:
        self.skipped[reason] += 1

    @property
    def accepted(self) -> int:
        return sum(self.concept1_counts.values())

    def merge(self, other: "RunState") -> "RunState":
        """Return a new state holding the summed tallies of ``self`` and ``other``."""

        return RunState(
            row_index=max(self.row_index, other.row_index),
            concept1_counts=self.concept1_counts + other.concept1_counts,
            concept2_counts=self.concept2_counts + other.concept2_counts,
            skipped=self.skipped + other.skipped,
            malformed=self.malformed + other.malformed,
        )


__all__ = [
    "Accepted",
    "CPMRecord",
    "ConversionError",
    "MalformedIdentifier",
    "MalformedRecord",
    "RunState",
    "SkipReason",
    "Skipped",
    "Statement",
    "Subtype",
    "Term",
    "TransformResult",
    "UnsupportedSubtype",
]
