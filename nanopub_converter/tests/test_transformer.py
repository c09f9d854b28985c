import logging

import pytest
from rdflib import Literal, URIRef

from nanopub_converter.nanopub.models import (
    Accepted,
    MalformedIdentifier,
    MalformedRecord,
    RunState,
    SkipReason,
    Skipped,
)
from nanopub_converter.nanopub.transformer import (
    RecordTransformer,
    extract_omim_number,
    parse_row,
    round_p_value,
)
from nanopub_converter.nanopub.vocabulary import GDA, PPA, RDF, SIO, XSD


def test_round_p_value_uses_three_significant_digits() -> None:
    assert round_p_value("0.00012349") == 0.0001235
    assert round_p_value("0.06") == 0.06
    rounded = round_p_value("0.0499999")
    assert rounded == float("%.3E" % 0.0499999)
    assert rounded <= 0.05


@pytest.mark.parametrize("raw", ["abc", "nan", "inf"])
def test_round_p_value_rejects_unusable_values(raw: str) -> None:
    with pytest.raises(ValueError):
        round_p_value(raw)


def test_parse_row_reads_columns_by_position() -> None:
    record = parse_row("7 OM_123 8 999 0.7 0.03 {}", 12)
    assert record.concept1_id == "OM_123"
    assert record.concept2_id == "999"
    assert record.p_value == 0.03
    assert record.line_number == 12


def test_parse_row_requires_p_value_column() -> None:
    with pytest.raises(MalformedRecord):
        parse_row("7 OM_123 8 999 0.7", 3)
    with pytest.raises(MalformedRecord):
        parse_row("7 OM_123 8 999 0.7 low", 4)


def test_extract_omim_number() -> None:
    assert extract_omim_number("OM_154700") == "154700"
    assert extract_omim_number("154700") is None


def test_missing_second_concept_is_checked_first(gda_config, fixed_clock, caplog) -> None:
    # Rows with both concepts missing count as "no gene id" (concept2) skips.
    transformer = RecordTransformer(gda_config, clock=fixed_clock)
    with caplog.at_level(logging.INFO, logger="nanopub_converter.nanopub.transformer"):
        result = transformer.process("x null y null 0.5 0.01", 1)
    assert [(record.levelno, record.getMessage()) for record in caplog.records] == [
        (logging.INFO, "line 1 has no gene id. skipped.")
    ]
    assert result == Skipped(reason=SkipReason.NO_CONCEPT_TWO, line_number=1)
    assert transformer.state.skipped[SkipReason.NO_CONCEPT_TWO] == 1
    assert transformer.state.skipped[SkipReason.NO_CONCEPT_ONE] == 0
    assert transformer.state.row_index == 0


def test_missing_first_concept(gda_config, fixed_clock, caplog) -> None:
    transformer = RecordTransformer(gda_config, clock=fixed_clock)
    with caplog.at_level(logging.INFO, logger="nanopub_converter.nanopub.transformer"):
        result = transformer.process("x null y 999 0.5 0.01", 2)
    assert "line 2 has no omim id. skipped." in caplog.messages
    assert isinstance(result, Skipped)
    assert result.reason == SkipReason.NO_CONCEPT_ONE
    assert transformer.state.skipped[SkipReason.NO_CONCEPT_ONE] == 1
    assert not transformer.state.concept1_counts


def test_p_value_above_cutoff_is_skipped(gda_config, fixed_clock, caplog) -> None:
    transformer = RecordTransformer(gda_config, clock=fixed_clock)
    with caplog.at_level(logging.INFO, logger="nanopub_converter.nanopub.transformer"):
        result = transformer.process("x OM_123456 y 999 0.5 0.06", 3)
    assert [record.levelno for record in caplog.records] == [logging.WARNING]
    assert caplog.messages == ["** line 3 has a p-value greater than 0.05. skipped. **"]
    assert isinstance(result, Skipped)
    assert result.reason == SkipReason.P_VALUE_TOO_HIGH
    assert transformer.state.row_index == 0


def test_p_value_cutoff_is_inclusive(gda_config, fixed_clock) -> None:
    transformer = RecordTransformer(gda_config, clock=fixed_clock)
    assert isinstance(transformer.process("x OM_1 y 2 0.5 0.05", 1), Accepted)
    assert isinstance(transformer.process("x OM_1 y 2 0.5 0.0499999", 2), Accepted)


def test_match_score_column_is_not_the_p_value(gda_config, fixed_clock) -> None:
    # Column 4 holds the match score; only column 5 is compared to the cutoff.
    transformer = RecordTransformer(gda_config, clock=fixed_clock)
    result = transformer.process("x OM_123456 y 999 0.03 0.7 {...}", 1)
    assert isinstance(result, Skipped)
    assert result.reason == SkipReason.P_VALUE_TOO_HIGH


def test_gda_row_builds_assertion(gda_config, fixed_clock) -> None:
    transformer = RecordTransformer(gda_config, clock=fixed_clock)
    result = transformer.process("x OM_123456 y 999 0.7 0.03 {...}", 1)
    assert isinstance(result, Accepted)
    assert result.row_index == 1
    assert result.nanopub == URIRef(
        "http://rdf.biosemantics.org/nanopubs/cpm/gene_disease_associations/000001"
    )
    association = GDA["association_000001"]
    p_value_node = GDA["association_000001_p_value"]
    refers_to = [obj for subj, pred, obj in result.assertion if pred == SIO["refers-to"]]
    assert refers_to == [
        URIRef("http://bio2rdf.org/geneid:999"),
        URIRef("http://bio2rdf.org/omim:123456"),
    ]
    assert (association, RDF.type, SIO["statistical-association"]) in result.assertion
    assert (association, SIO["has-measurement-value"], p_value_node) in result.assertion
    assert (p_value_node, RDF.type, SIO["probability-value"]) in result.assertion
    literal = next(obj for subj, pred, obj in result.assertion if pred == SIO["has-value"])
    assert isinstance(literal, Literal)
    assert literal.datatype == XSD.float
    assert literal.toPython() == pytest.approx(0.03)
    assert len(result.provenance) == 2
    assert len(result.publication_info) == 6
    assert transformer.state.concept1_counts["OM_123456"] == 1
    assert transformer.state.concept2_counts["999"] == 1


def test_gda_requires_omim_prefix(gda_config, fixed_clock) -> None:
    transformer = RecordTransformer(gda_config, clock=fixed_clock)
    with pytest.raises(MalformedIdentifier) as excinfo:
        transformer.process("x 154700 y 999 0.7 0.01", 9)
    assert excinfo.value.identifier == "154700"
    assert excinfo.value.line_number == 9
    assert transformer.state.row_index == 0


def test_ppa_uses_identifiers_verbatim(ppa_config, fixed_clock) -> None:
    transformer = RecordTransformer(ppa_config, clock=fixed_clock)
    result = transformer.process("x 1017 y 7157 0.7 0.01", 1)
    assert isinstance(result, Accepted)
    assert str(result.nanopub).endswith("/protein_protein_associations/000001")
    refers_to = [obj for subj, pred, obj in result.assertion if pred == SIO["refers-to"]]
    assert refers_to == [
        URIRef("http://bio2rdf.org/geneid:1017"),
        URIRef("http://bio2rdf.org/geneid:7157"),
    ]
    assert result.assertion[0][0] == PPA["association_000001"]


def test_row_index_counts_accepted_rows_only(gda_config, fixed_clock) -> None:
    transformer = RecordTransformer(gda_config, clock=fixed_clock)
    rows = [
        "a OM_1 b 10 0.5 0.01",
        "a OM_2 b null 0.5 0.01",
        "a null b 11 0.5 0.01",
        "a OM_3 b 12 0.5 0.9",
        "a OM_4 b 13 0.5 0.02",
        "a OM_1 b 14 0.5 0.03",
    ]
    results = [transformer.process(row, number) for number, row in enumerate(rows, start=1)]
    indices = [result.row_index for result in results if isinstance(result, Accepted)]
    assert indices == [1, 2, 3]
    assert transformer.state.concept1_counts["OM_1"] == 2
    assert transformer.state.accepted == 3


def test_rerun_is_deterministic_apart_from_timestamp(gda_config, fixed_clock) -> None:
    rows = ["a OM_1 b 10 0.5 0.01", "a OM_2 b null 0.5 0.01", "a OM_3 b 12 0.5 0.02"]

    def convert():
        transformer = RecordTransformer(gda_config, state=RunState(), clock=fixed_clock)
        return [transformer.process(row, number) for number, row in enumerate(rows, start=1)]

    assert convert() == convert()


def test_existing_state_continues_row_index(gda_config, fixed_clock) -> None:
    state = RunState(row_index=41)
    transformer = RecordTransformer(gda_config, state=state, clock=fixed_clock)
    result = transformer.process("a OM_1 b 10 0.5 0.01", 1)
    assert isinstance(result, Accepted)
    assert result.row_index == 42
    assert str(result.nanopub).endswith("/000042")
