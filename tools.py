from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from config import AppConfig
from distributors import Distributor, DistributorGraph
from models import (
    CreateDistributorResult,
    DistributorListing,
    DistributorSummary,
    LoadSummary,
    PermissionCheck,
    RegionInfo,
)
from regions import Region, RegionRegistry, load_regions_csv

LOG = logging.getLogger("tools")


def region_info(region: Region) -> RegionInfo:
    return RegionInfo(
        fullPath=region.full_path,
        name=region.name,
        parentPath=region.parent_path,
        depth=region.depth,
    )


def summarize(graph: DistributorGraph, distributor: Distributor) -> DistributorSummary:
    return DistributorSummary(
        id=distributor.id,
        name=distributor.name,
        parents=[p.id for p in graph.parents_of(distributor.id)],
        children=[c.id for c in graph.children_of(distributor.id)],
        authorizedRegions=distributor.authorized_paths,
        excludedRegions=distributor.excluded_paths,
        effectiveRegions=distributor.effective_paths,
    )


class AuthorizationSession:
    """
    One region registry and one distributor graph, addressed by strings.

    Shells (the MCP server, the menu loop) talk to this class only. Region
    paths are resolved through the registry before reaching the graph;
    domain errors from either side propagate to the caller.
    """

    def __init__(
        self,
        registry: Optional[RegionRegistry] = None,
        graph: Optional[DistributorGraph] = None,
        config: Optional[AppConfig] = None,
    ):
        self.config = config or AppConfig()
        self.registry = registry or RegionRegistry()
        self.graph = graph or DistributorGraph(reject_cycles=self.config.reject_cycles)

    def load_regions(self, csv_path: Union[str, Path, None] = None) -> LoadSummary:
        source = Path(csv_path or self.config.cities_csv)
        report = load_regions_csv(self.registry, source)
        return LoadSummary(
            source=str(source),
            rows=report.rows,
            added=report.added,
            skipped=report.skipped,
            rejected=report.rejected,
            totalRegions=len(self.registry),
        )

    def register_region(self, path: str) -> RegionInfo:
        return region_info(self.registry.add_region(path))

    def _resolve_all(self, paths: Iterable[str]) -> Tuple[List[Region], List[str]]:
        found: List[Region] = []
        skipped: List[str] = []
        for raw in paths:
            path = raw.strip()
            if not path:
                continue
            region = self.registry.get_region(path)
            if region is None:
                LOG.warning("Region %r not found, skipping", path)
                skipped.append(path)
            else:
                found.append(region)
        return found, skipped

    def create_distributor(
        self, distributor_id: str, name: str, region_paths: Iterable[str] = ()
    ) -> CreateDistributorResult:
        """Create a distributor; unknown region paths are dropped and reported."""
        regions, skipped = self._resolve_all(region_paths)
        distributor = self.graph.create_distributor(distributor_id, name, regions)
        return CreateDistributorResult(
            distributor=summarize(self.graph, distributor),
            skippedPaths=skipped,
        )

    def add_region(self, distributor_id: str, region_path: str) -> DistributorSummary:
        region = self.registry.require_region(region_path.strip())
        self.graph.add_region(distributor_id, region)
        return self.describe(distributor_id)

    def remove_region(self, distributor_id: str, region_path: str) -> DistributorSummary:
        region = self.registry.require_region(region_path.strip())
        self.graph.remove_region(distributor_id, region)
        return self.describe(distributor_id)

    def exclude_region(self, distributor_id: str, region_path: str) -> DistributorSummary:
        region = self.registry.require_region(region_path.strip())
        self.graph.exclude_region(distributor_id, region)
        return self.describe(distributor_id)

    def add_parent(self, child_id: str, parent_id: Optional[str]) -> DistributorSummary:
        self.graph.add_parent(child_id, parent_id)
        return self.describe(child_id)

    def check_permission(self, distributor_id: str, region_path: str) -> PermissionCheck:
        path = region_path.strip()
        region = self.registry.require_region(path)
        granted = self.graph.has_permission(distributor_id, region)
        return PermissionCheck(distributorId=distributor_id, regionPath=path, granted=granted)

    def describe(self, distributor_id: str) -> DistributorSummary:
        return summarize(self.graph, self.graph.require(distributor_id))

    def list_distributors(self) -> DistributorListing:
        return DistributorListing(
            distributors=[summarize(self.graph, d) for d in self.graph]
        )
