from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from config import AppConfig
from distributors import DistributorError
from regions import RegionError
from tools import AuthorizationSession

LOG = logging.getLogger("server")

try:
    from mcp.server.fastmcp import FastMCP
except ImportError as exc:  # pragma: no cover - dependency is optional at import time
    FastMCP = None
    _IMPORT_ERROR = exc
else:
    _IMPORT_ERROR = None


def _require_server() -> "FastMCP":
    if FastMCP is None:
        raise SystemExit(
            "The mcp package is required to run the server. "
            "Install it with `pip install 'region-authz[server]'`."
        ) from _IMPORT_ERROR
    return FastMCP("region-authz-server")


def _validate_required(name: str, value: Optional[str]) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"Missing required field: {name}")


def _json_payload(model) -> dict:
    return model.model_dump(mode="json")


def _error_payload(exc: Exception) -> dict:
    return {"error": type(exc).__name__, "message": str(exc)}


def build_server(session: Optional[AuthorizationSession] = None) -> "FastMCP":
    server = _require_server()
    session = session or AuthorizationSession()

    @server.tool(
            description="Register a dash-joined region path such as 'India-Tamil Nadu-Keelakarai'."
    )
    def register_region_tool(regionPath: str) -> dict:
        _validate_required("regionPath", regionPath)
        return _json_payload(session.register_region(regionPath))

    @server.tool(
            description="Create a distributor with an optional list of authorized region paths."
    )
    def create_distributor_tool(
        distributorId: str, name: str, regionPaths: Optional[List[str]] = None
    ) -> dict:
        _validate_required("distributorId", distributorId)
        _validate_required("name", name)
        try:
            result = session.create_distributor(distributorId, name, regionPaths or [])
        except DistributorError as exc:
            return _error_payload(exc)
        return _json_payload(result)

    @server.tool(
            description="Authorize a region for a distributor. Fails if any parent does not grant it."
    )
    def add_region_tool(distributorId: str, regionPath: str) -> dict:
        _validate_required("distributorId", distributorId)
        _validate_required("regionPath", regionPath)
        try:
            summary = session.add_region(distributorId, regionPath)
        except (DistributorError, RegionError) as exc:
            return _error_payload(exc)
        return _json_payload(summary)

    @server.tool(description="Withdraw a region from a distributor's authorized set.")
    def remove_region_tool(distributorId: str, regionPath: str) -> dict:
        _validate_required("distributorId", distributorId)
        _validate_required("regionPath", regionPath)
        try:
            summary = session.remove_region(distributorId, regionPath)
        except (DistributorError, RegionError) as exc:
            return _error_payload(exc)
        return _json_payload(summary)

    @server.tool(description="Exclude a region (and everything below it) for a distributor.")
    def exclude_region_tool(distributorId: str, regionPath: str) -> dict:
        _validate_required("distributorId", distributorId)
        _validate_required("regionPath", regionPath)
        try:
            summary = session.exclude_region(distributorId, regionPath)
        except (DistributorError, RegionError) as exc:
            return _error_payload(exc)
        return _json_payload(summary)

    @server.tool(description="Link a parent distributor to a child distributor.")
    def add_parent_tool(childId: str, parentId: str) -> dict:
        _validate_required("childId", childId)
        _validate_required("parentId", parentId)
        try:
            summary = session.add_parent(childId, parentId)
        except DistributorError as exc:
            return _error_payload(exc)
        return _json_payload(summary)

    @server.tool(description="Check whether a distributor may operate in a region.")
    def check_permission_tool(distributorId: str, regionPath: str) -> dict:
        _validate_required("distributorId", distributorId)
        _validate_required("regionPath", regionPath)
        try:
            check = session.check_permission(distributorId, regionPath)
        except (DistributorError, RegionError) as exc:
            return _error_payload(exc)
        return _json_payload(check)

    @server.tool(description="List distributors with their excluded and effective regions.")
    def list_distributors_tool() -> dict:
        return _json_payload(session.list_distributors())

    return server


def main() -> None:
    config = AppConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    session = AuthorizationSession(config=config)
    if Path(config.cities_csv).exists():
        session.load_regions()
    else:
        LOG.warning("Region dataset %s not found; starting with an empty registry", config.cities_csv)
    server = build_server(session)
    server.run()


if __name__ == "__main__":
    main()
