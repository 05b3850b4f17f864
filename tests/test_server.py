"""
Tests for the MCP tool server.

Skipped when the optional mcp package is not installed.
"""

from __future__ import annotations

import pytest

pytest.importorskip("mcp")

from distributors import DistributorNotFoundError
from server import _error_payload, _json_payload, _validate_required, build_server
from tools import AuthorizationSession

EXPECTED_TOOLS = {
    "register_region_tool",
    "create_distributor_tool",
    "add_region_tool",
    "remove_region_tool",
    "exclude_region_tool",
    "add_parent_tool",
    "check_permission_tool",
    "list_distributors_tool",
}


class TestHelpers:
    def test_validate_required(self):
        _validate_required("distributorId", "D1")
        with pytest.raises(ValueError, match="distributorId"):
            _validate_required("distributorId", "  ")
        with pytest.raises(ValueError):
            _validate_required("distributorId", None)

    def test_error_payload(self):
        payload = _error_payload(DistributorNotFoundError("ghost"))
        assert payload == {
            "error": "DistributorNotFoundError",
            "message": "Distributor not found: 'ghost'",
        }

    def test_json_payload(self):
        session = AuthorizationSession()
        info = session.register_region("India-Tamil Nadu")
        assert _json_payload(info) == {
            "fullPath": "India-Tamil Nadu",
            "name": "Tamil Nadu",
            "parentPath": "India",
            "depth": 2,
        }


class TestServer:
    @pytest.mark.asyncio
    async def test_registers_all_tools(self):
        server = build_server(AuthorizationSession())
        tools = await server.list_tools()
        assert EXPECTED_TOOLS <= {tool.name for tool in tools}
