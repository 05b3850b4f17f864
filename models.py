from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class RegionInfo(BaseModel):
    fullPath: str
    name: str
    parentPath: Optional[str] = None
    depth: int


class DistributorSummary(BaseModel):
    id: str
    name: str
    parents: List[str]
    children: List[str]
    authorizedRegions: List[str]
    excludedRegions: List[str]
    effectiveRegions: List[str]


class CreateDistributorResult(BaseModel):
    distributor: DistributorSummary
    skippedPaths: List[str]


class PermissionCheck(BaseModel):
    distributorId: str
    regionPath: str
    granted: bool


class LoadSummary(BaseModel):
    source: str
    rows: int
    added: int
    skipped: int
    rejected: int
    totalRegions: int


class DistributorListing(BaseModel):
    distributors: List[DistributorSummary]
