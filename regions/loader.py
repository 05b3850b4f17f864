"""
Reference dataset loader.

Builds the region tree from a cities CSV export. The expected layout is:

    City Code,Province Code,Country Code,City Name,Province Name,Country Name
    KLRAI,TN,IN,Keelakarai,Tamil Nadu,India

Columns 3, 4 and 5 (city, province, country) become the region path
"country-province-city". The header row and short rows are skipped.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .registry import InvalidRegionPathError, RegionRegistry

LOG = logging.getLogger("regions.loader")

CITY_COLUMN = 3
PROVINCE_COLUMN = 4
COUNTRY_COLUMN = 5
MIN_COLUMNS = 6


@dataclass
class LoadReport:
    """Outcome of loading a region dataset."""

    rows: int = 0
    added: int = 0
    skipped: int = 0
    rejected: int = 0

    def to_dict(self) -> dict:
        return {
            "rows": self.rows,
            "added": self.added,
            "skipped": self.skipped,
            "rejected": self.rejected,
        }


def load_regions_csv(registry: RegionRegistry, csv_path: Union[str, Path]) -> LoadReport:
    """
    Register every city of a CSV dataset in the registry.

    Args:
        registry: Registry to populate
        csv_path: Path to the CSV file

    Returns:
        LoadReport with per-row counts. `added` counts newly created
        region nodes, including provinces and countries.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(csv_path)
    report = LoadReport()
    before = len(registry)

    with path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.reader(handle)
        for index, row in enumerate(reader):
            if index == 0:
                continue
            report.rows += 1
            if len(row) < MIN_COLUMNS:
                report.skipped += 1
                continue

            segments = [
                row[COUNTRY_COLUMN].strip(),
                row[PROVINCE_COLUMN].strip(),
                row[CITY_COLUMN].strip(),
            ]
            try:
                registry.add_segments(segments)
            except InvalidRegionPathError as exc:
                LOG.warning("Skipping row %d of %s: %s", index, path, exc)
                report.rejected += 1

    report.added = len(registry) - before
    LOG.info(
        "Loaded %s: %d rows, %d new regions, %d skipped, %d rejected",
        path,
        report.rows,
        report.added,
        report.skipped,
        report.rejected,
    )
    return report
