"""Statement templates for the nanopublication graphs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from rdflib import Literal, URIRef

from .models import Statement, Subtype
from .vocabulary import (
    AUTHORS,
    CREATOR,
    DCTERMS,
    NP,
    PAV,
    PROV,
    RDF,
    RIGHTS,
    RIGHTS_HOLDER,
    SIO,
    XSD,
)


def padded_index(row_index: int) -> str:
    return str(row_index).rjust(6, "0")


def assertion_statements(
    subtype: Subtype,
    row_index: int,
    participants: tuple[URIRef, URIRef],
    p_value: float,
) -> List[Statement]:
    """Describe a statistical association between two concepts.

    ``participants`` are the canonical external URIs the association refers
    to; the association and its p-value node live in the subtype namespace.
    """

    namespace = subtype.namespace
    association = namespace[f"association_{padded_index(row_index)}"]
    association_p_value = namespace[f"association_{padded_index(row_index)}_p_value"]
    statements: List[Statement] = [(association, RDF.type, SIO["statistical-association"])]
    statements.extend((association, SIO["refers-to"], participant) for participant in participants)
    statements.extend(
        [
            (association, SIO["has-measurement-value"], association_p_value),
            (association_p_value, RDF.type, SIO["probability-value"]),
            (association_p_value, SIO["has-value"], Literal(p_value, datatype=XSD.float)),
        ]
    )
    return statements


def provenance_statements(subtype: Subtype, assertion: URIRef) -> List[Statement]:
    return [
        (assertion, PROV.wasDerivedFrom, subtype.derived_from),
        (assertion, PROV.wasGeneratedBy, subtype.generated_by),
    ]


def publication_info_statements(nanopub: URIRef, created: datetime | None = None) -> List[Statement]:
    """Rights and attribution for ``nanopub``, stamped with the emission time."""

    created = created or datetime.now(timezone.utc)
    statements: List[Statement] = [
        (nanopub, DCTERMS.rights, RIGHTS),
        (nanopub, DCTERMS.rightsHolder, RIGHTS_HOLDER),
    ]
    statements.extend((nanopub, PAV.authoredBy, author) for author in AUTHORS)
    statements.append((nanopub, PAV.createdBy, CREATOR))
    statements.append((nanopub, DCTERMS.created, Literal(created, datatype=XSD.dateTime)))
    return statements


def head_statements(
    nanopub: URIRef,
    assertion: URIRef,
    provenance: URIRef,
    publication_info: URIRef,
) -> List[Statement]:
    return [
        (nanopub, RDF.type, NP.Nanopublication),
        (nanopub, NP.hasAssertion, assertion),
        (nanopub, NP.hasProvenance, provenance),
        (nanopub, NP.hasPublicationInfo, publication_info),
    ]


__all__ = [
    "assertion_statements",
    "head_statements",
    "padded_index",
    "provenance_statements",
    "publication_info_statements",
]
