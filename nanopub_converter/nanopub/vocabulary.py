"""RDF namespaces and constant URIs used in generated nanopublications."""

from __future__ import annotations

from rdflib import Namespace, URIRef
from rdflib.namespace import DCTERMS, PROV, RDF, XSD

SIO = Namespace("http://semanticscience.org/resource/")
PAV = Namespace("http://purl.org/pav/")
NP = Namespace("http://www.nanopub.org/nschema#")
GDA = Namespace("http://rdf.biosemantics.org/dataset/gene_disease_associations#")
PPA = Namespace("http://rdf.biosemantics.org/dataset/protein_protein_associations#")
TEXT_MINING = Namespace("http://rdf.biosemantics.org/vocabularies/text_mining#")

GENEID_BASE = "http://bio2rdf.org/geneid:"
OMIM_BASE = "http://bio2rdf.org/omim:"

GDA_DERIVED_FROM = TEXT_MINING["gene_disease_concept_profiles_1980_2010"]
GDA_GENERATED_BY = TEXT_MINING["gene_disease_concept_profiles_matching_1980_2010"]
PPA_DERIVED_FROM = TEXT_MINING["protein_protein_concept_profiles_1980_2010"]
PPA_GENERATED_BY = TEXT_MINING["protein_protein_concept_profiles_matching_1980_2010"]

RIGHTS = URIRef("http://creativecommons.org/licenses/by/3.0/")
RIGHTS_HOLDER = URIRef("http://biosemantics.org")
AUTHORS = (
    URIRef("http://www.researcherid.com/rid/B-6035-2012"),
    URIRef("http://www.researcherid.com/rid/B-5927-2012"),
)
CREATOR = URIRef("http://www.researcherid.com/rid/B-5852-2012")

PREFIXES = {
    "sio": SIO,
    "prov": PROV,
    "pav": PAV,
    "dcterms": DCTERMS,
    "np": NP,
    "gda": GDA,
    "ppa": PPA,
    "tm": TEXT_MINING,
}


def geneid_uri(gene_id: str) -> URIRef:
    return URIRef(f"{GENEID_BASE}{gene_id}")


def omim_uri(omim_number: str) -> URIRef:
    return URIRef(f"{OMIM_BASE}{omim_number}")


__all__ = [
    "AUTHORS",
    "CREATOR",
    "DCTERMS",
    "GDA",
    "NP",
    "PAV",
    "PPA",
    "PREFIXES",
    "PROV",
    "RDF",
    "RIGHTS",
    "RIGHTS_HOLDER",
    "SIO",
    "XSD",
    "geneid_uri",
    "omim_uri",
]
