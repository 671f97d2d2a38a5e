"""Integration tests for the MCP server and its HTTP routes."""

from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

import pytest
from fastmcp import Client
from starlette.testclient import TestClient

from voice_hours.config import Settings
from voice_hours.server import create_app, create_mcp
from voice_hours.tools.registry import ToolRegistry

TUESDAY_MORNING = datetime(2026, 3, 3, 10, 0, tzinfo=ZoneInfo("America/New_York"))

TOOL_NAMES = {
    "getBusinessTime",
    "checkBusinessHours",
    "getTimezoneInfo",
    "checkDateAvailability",
    "getNextAvailableDay",
    "getBusinessHoursSummary",
    "getHolidays",
}


@pytest.fixture
def registry(make_registry: Callable[..., ToolRegistry]) -> ToolRegistry:
    return make_registry(TUESDAY_MORNING)


@pytest.fixture
def http(settings: Settings, registry: ToolRegistry) -> TestClient:
    return TestClient(create_app(settings, registry))


@pytest.mark.integration
class TestMcpTools:
    """Tests for the tools as seen by an MCP client."""

    @pytest.mark.asyncio
    async def test_lists_all_tools(self, settings: Settings, registry: ToolRegistry) -> None:
        async with Client(create_mcp(registry, settings)) as client:
            tools = await client.list_tools()

        assert {t.name for t in tools} == TOOL_NAMES
        hours_tool = next(t for t in tools if t.name == "checkBusinessHours")
        assert hours_tool.title == "Check Business Hours Status"
        assert "zipCode" in hours_tool.inputSchema["required"]

    @pytest.mark.asyncio
    async def test_call_returns_text_and_data(
        self, settings: Settings, registry: ToolRegistry
    ) -> None:
        async with Client(create_mcp(registry, settings)) as client:
            result = await client.call_tool(
                "checkBusinessHours", {"zipCode": "33067", "businessType": "dental"}
            )

        assert result.is_error is False
        assert result.content[0].text == (
            "Yes, we are currently open! We close today (March 3rd) at 5:00 PM EST."
        )
        assert result.structured_content["isOpen"] is True
        assert result.structured_content["timezone"] == "America/New_York"

    @pytest.mark.asyncio
    async def test_business_type_is_optional(
        self, settings: Settings, registry: ToolRegistry
    ) -> None:
        async with Client(create_mcp(registry, settings)) as client:
            result = await client.call_tool("getNextAvailableDay", {"zipCode": "M5V 3L9"})

        assert result.is_error is False
        assert result.content[0].text.startswith("Today is available for appointments.")

    @pytest.mark.asyncio
    async def test_invalid_postal_code_is_tool_error(
        self, settings: Settings, registry: ToolRegistry
    ) -> None:
        """Bad input comes back as an error result, not a protocol failure."""
        async with Client(create_mcp(registry, settings)) as client:
            result = await client.call_tool(
                "getBusinessTime", {"zipCode": "ABCDE"}, raise_on_error=False
            )

        assert result.is_error is True
        assert "Invalid postal code format: ABCDE" in result.content[0].text


@pytest.mark.integration
class TestHttpRoutes:
    """Tests for the plain HTTP routes."""

    def test_health(self, http: TestClient) -> None:
        response = http.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["server"] == "voice-hours"
        assert body["tools"] == 7

    def test_api_docs(self, http: TestClient) -> None:
        response = http.get("/api/docs")
        assert response.status_code == 200
        body = response.json()
        assert {t["name"] for t in body["tools"]} == TOOL_NAMES
        assert body["businessTypes"] == ["dental", "medical", "general"]
        assert "/mcp" in body["endpoints"]

    def test_call_tool(self, http: TestClient) -> None:
        response = http.post("/tools/getTimezoneInfo", json={"zipCode": "60601"})
        assert response.status_code == 200
        body = response.json()
        assert body["isError"] is False
        assert body["data"]["timezone"] == "America/Chicago"
        assert body["result"].startswith("The 60601 area is in the CST timezone")

    def test_call_tool_reports_errors_in_body(self, http: TestClient) -> None:
        response = http.post("/tools/checkBusinessHours", json={"zipCode": "ABCDE"})
        assert response.status_code == 200
        assert response.json()["isError"] is True

    def test_empty_body_means_no_arguments(self, http: TestClient) -> None:
        response = http.post("/tools/getBusinessHoursSummary")
        assert response.status_code == 200
        assert response.json()["result"].startswith("Our typical hours are")

    def test_unknown_tool(self, http: TestClient) -> None:
        response = http.post("/tools/makeCoffee", json={})
        assert response.status_code == 404

    @pytest.mark.parametrize("body", ["[1, 2]", "not json", '"text"'])
    def test_non_object_body(self, http: TestClient, body: str) -> None:
        response = http.post(
            "/tools/getBusinessTime",
            content=body,
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
