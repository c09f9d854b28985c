import sys
from datetime import datetime, timezone
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from nanopub_converter.config import ConverterConfig
from nanopub_converter.nanopub.models import Subtype

FIXED_TIME = datetime(2013, 5, 1, 12, 30, tzinfo=timezone.utc)

HEADER = "concept1_id concept1_external_id concept2_id concept2_external_id match_score p_value top_concepts"


@pytest.fixture()
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture()
def gda_config() -> ConverterConfig:
    return ConverterConfig(subtype=Subtype.GDA)


@pytest.fixture()
def ppa_config() -> ConverterConfig:
    return ConverterConfig(subtype=Subtype.PPA)


@pytest.fixture()
def cpm_file(tmp_path: Path) -> Path:
    """A small GDA input file mixing accepted and rejected rows."""

    lines = [
        HEADER,
        '1 OM_154700 10 4000 0.91 0.001 {"C1":0.5}',
        '2 OM_100100 11 null 0.80 0.002 {"C2":0.4}',
        '3 null 12 7157 0.70 0.003 {"C3":0.3}',
        "",
        '4 OM_154700 13 2200 0.60 0.2 {"C4":0.2}',
        '5 OM_114480 14 672 0.55 0.0499999 {"C5":0.1}',
    ]
    path = tmp_path / "cpm_gda.txt"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
