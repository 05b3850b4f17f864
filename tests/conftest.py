"""
Shared test fixtures.

Fixtures:
    registry       — RegionRegistry seeded with a handful of Indian and US regions
    graph          — empty DistributorGraph
    regions_csv    — small cities CSV written to tmp_path
"""

import sys
import textwrap
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from distributors import DistributorGraph
from regions import RegionRegistry

SEED_PATHS = (
    "India-Tamil Nadu-Keelakarai",
    "India-Tamil Nadu-Chennai",
    "India-Karnataka-Bengaluru",
    "India-Jammu and Kashmir-Punch",
    "United States-California-Los Angeles",
)


@pytest.fixture
def registry() -> RegionRegistry:
    reg = RegionRegistry()
    for path in SEED_PATHS:
        reg.add_region(path)
    return reg


@pytest.fixture
def graph() -> DistributorGraph:
    return DistributorGraph()


@pytest.fixture
def regions_csv(tmp_path: Path) -> Path:
    path = tmp_path / "cities.csv"
    path.write_text(textwrap.dedent("""\
        City Code,Province Code,Country Code,City Name,Province Name,Country Name
        KLRAI,TN,IN,Keelakarai,Tamil Nadu,India
        CHNAI,TN,IN,Chennai,Tamil Nadu,India
        PUNCH,JK,IN,Punch,Jammu and Kashmir,India
        SHORT,ROW
        LSANG,CA,US,Los Angeles,California,United States
    """), encoding="utf-8")
    return path
