"""Command line entry point for converting CPM output into nanopublications."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

import requests

from ..config import (
    DEFAULT_BASE_URL,
    DEFAULT_P_VALUE_CUTOFF,
    DEFAULT_SUBTYPE,
    ConverterConfig,
    OutputSettings,
)
from .ingest_cpm import CPMNanopubConverter
from .models import Subtype
from .persistence import CompositeNanopubStore, InMemoryNanopubStore, create_store
from .runner import run_conversion

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpm-nanopub",
        description="Convert concept profile matching output into nanopublications",
    )
    parser.add_argument("input", type=Path, help="Whitespace separated CPM output file")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Prefix for nanopublication URIs")
    parser.add_argument(
        "--p-value-cutoff",
        type=float,
        default=DEFAULT_P_VALUE_CUTOFF,
        help=f"P-value cutoff, default = {DEFAULT_P_VALUE_CUTOFF}",
    )
    parser.add_argument(
        "--subtype",
        choices=[subtype.value for subtype in Subtype],
        default=DEFAULT_SUBTYPE,
        help=f"Nanopub subtype, default is {DEFAULT_SUBTYPE}",
    )
    parser.add_argument("--output", type=Path, default=None, help="File to serialise the nanopubs into")
    parser.add_argument(
        "--format",
        default=None,
        help="rdflib serialisation format (trig, nquads, ...); defaults to NANOPUB_OUTPUT_FORMAT or trig",
    )
    parser.add_argument(
        "--sparql-endpoint",
        default=None,
        help="SPARQL graph store endpoint to post graphs to instead of writing a file",
    )
    parser.add_argument("--no-header", action="store_true", help="Treat the first line as data")
    parser.add_argument("--limit", type=int, default=None, help="Stop after this many data rows")
    parser.add_argument(
        "--skip-malformed",
        action="store_true",
        help="Log and skip rows with malformed identifiers instead of aborting",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def _output_settings(args: argparse.Namespace) -> OutputSettings:
    settings = OutputSettings.from_env()
    if args.sparql_endpoint:
        settings.backend = "sparql"
        settings.uri = args.sparql_endpoint
    if args.output is not None:
        settings.path = str(args.output)
    settings.format = args.format or settings.format
    return settings


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ConverterConfig(
            base_url=args.base_url,
            p_value_cutoff=args.p_value_cutoff,
            subtype=args.subtype,
        )
        settings = _output_settings(args)
        store = create_store(settings)
        converter = CPMNanopubConverter(
            config,
            has_header=not args.no_header,
            skip_malformed=args.skip_malformed,
        )
        report = run_conversion(converter, args.input, store, limit=args.limit)
        output = store.primary if isinstance(store, CompositeNanopubStore) else store
        if isinstance(output, InMemoryNanopubStore):
            payload = output.serialize(settings.path, format=settings.format)
            if settings.path is None:
                sys.stdout.write(payload)
    except (ValueError, OSError, requests.RequestException) as exc:
        LOGGER.error("Conversion failed: %s", exc)
        return 2

    summary = converter.summary()
    print(
        f"{report.name}: lines={report.lines_read} nanopubs={report.nanopubs_created} "
        f"statements={report.statements_written} skipped={report.rows_skipped} "
        f"malformed={report.rows_malformed}",
        file=sys.stderr,
    )
    print(
        "skipped by reason: " + ", ".join(f"{reason}={count}" for reason, count in summary["skipped"].items()),
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
