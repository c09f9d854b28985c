"""Nanopublication generation for text-mined concept associations.

This package bundles the row transformer that turns concept profile matching
output into assertion, provenance and publication info graphs, the
line-oriented converter base class, and sinks that persist the generated
named graphs.
"""

from .models import (
    Accepted,
    ConversionError,
    MalformedIdentifier,
    MalformedRecord,
    RunState,
    SkipReason,
    Skipped,
    Subtype,
    UnsupportedSubtype,
)
from .ingest_base import BaseNanopubConverter, ConversionReport
from .ingest_cpm import CPMNanopubConverter
from .persistence import CompositeNanopubStore, InMemoryNanopubStore, NanopubStore, SparqlGraphStore
from .transformer import RecordTransformer, round_p_value

__all__ = [
    "Accepted",
    "BaseNanopubConverter",
    "CPMNanopubConverter",
    "CompositeNanopubStore",
    "ConversionError",
    "ConversionReport",
    "InMemoryNanopubStore",
    "MalformedIdentifier",
    "MalformedRecord",
    "NanopubStore",
    "RecordTransformer",
    "RunState",
    "SkipReason",
    "Skipped",
    "SparqlGraphStore",
    "Subtype",
    "UnsupportedSubtype",
    "round_p_value",
]
