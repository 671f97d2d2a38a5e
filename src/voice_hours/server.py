"""MCP server exposing the business tools over HTTP.

Streamable HTTP is served at ``/mcp`` and the legacy SSE transport at
``/legacy/sse``. Session handling and framing belong to FastMCP; this
module only maps registry tools onto MCP tools and adds a few plain HTTP
routes for health checks and webhook-style tool calls.
"""

import json
import logging
from typing import Annotated, Literal

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult
from pydantic import Field
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount

from voice_hours import __version__
from voice_hours.config import Settings, get_settings
from voice_hours.hours import BusinessType
from voice_hours.timezones import utc_now
from voice_hours.tools.registry import ToolOutput, ToolRegistry, get_default_registry

logger = logging.getLogger(__name__)

ZipCode = Annotated[
    str, Field(description="US ZIP code (e.g. '33067') or Canadian postal code (e.g. 'M5V 3L9')")
]
BusinessTypeArg = Annotated[
    Literal["dental", "medical", "general"] | None,
    Field(description="Type of business for hours calculation. Defaults to dental"),
]

INSTRUCTIONS = (
    "Tools for voice agents answering questions about a business location: local time, "
    "timezone details, whether the business is open now, and which days are free for "
    "appointments. Every tool takes a US ZIP code or Canadian postal code."
)


def to_tool_result(output: ToolOutput) -> ToolResult:
    """Convert a registry output into an MCP tool result.

    Error outputs raise ToolError, which FastMCP reports as a result with
    ``isError`` set rather than as a protocol fault.
    """
    if output.is_error:
        raise ToolError(output.text)
    return ToolResult(content=output.text, structured_content=output.data)


def create_mcp(registry: ToolRegistry | None = None, settings: Settings | None = None) -> FastMCP:
    """Build the FastMCP server for a tool registry.

    Args:
        registry: Tools to expose. If None, uses the default registry.
        settings: Application settings. If None, uses get_settings().
    """
    settings = settings or get_settings()
    if registry is None:
        registry = get_default_registry()
    mcp = FastMCP(name=settings.server_name, instructions=INSTRUCTIONS)

    def describe(name: str) -> dict[str, str]:
        tool = registry.get(name)
        if tool is None:
            raise KeyError(f"Tool '{name}' is not registered")
        return {"name": tool.name, "title": tool.title or tool.name, "description": tool.description}

    @mcp.tool(**describe("getBusinessTime"))
    async def get_business_time(
        zipCode: ZipCode,
        format: Annotated[
            Literal["12", "24"], Field(description="Time format: 12-hour or 24-hour")
        ] = "12",
    ) -> ToolResult:
        return to_tool_result(
            await registry.execute("getBusinessTime", {"zipCode": zipCode, "format": format})
        )

    @mcp.tool(**describe("checkBusinessHours"))
    async def check_business_hours(
        zipCode: ZipCode, businessType: BusinessTypeArg = None
    ) -> ToolResult:
        return to_tool_result(
            await registry.execute(
                "checkBusinessHours", {"zipCode": zipCode, "businessType": businessType}
            )
        )

    @mcp.tool(**describe("getTimezoneInfo"))
    async def get_timezone_info(zipCode: ZipCode) -> ToolResult:
        return to_tool_result(await registry.execute("getTimezoneInfo", {"zipCode": zipCode}))

    @mcp.tool(**describe("checkDateAvailability"))
    async def check_date_availability(
        zipCode: ZipCode,
        date: Annotated[str, Field(description="Date to check in YYYY-MM-DD format")],
        businessType: BusinessTypeArg = None,
    ) -> ToolResult:
        return to_tool_result(
            await registry.execute(
                "checkDateAvailability",
                {"zipCode": zipCode, "date": date, "businessType": businessType},
            )
        )

    @mcp.tool(**describe("getNextAvailableDay"))
    async def get_next_available_day(
        zipCode: ZipCode, businessType: BusinessTypeArg = None
    ) -> ToolResult:
        return to_tool_result(
            await registry.execute(
                "getNextAvailableDay", {"zipCode": zipCode, "businessType": businessType}
            )
        )

    @mcp.tool(**describe("getBusinessHoursSummary"))
    async def get_business_hours_summary(
        businessType: BusinessTypeArg = None,
        zipCode: Annotated[
            str | None, Field(description="Optional US ZIP code or Canadian postal code")
        ] = None,
    ) -> ToolResult:
        return to_tool_result(
            await registry.execute(
                "getBusinessHoursSummary", {"businessType": businessType, "zipCode": zipCode}
            )
        )

    @mcp.tool(**describe("getHolidays"))
    async def get_holidays(
        zipCode: ZipCode,
        year: Annotated[int | None, Field(description="Calendar year, e.g. 2026")] = None,
    ) -> ToolResult:
        return to_tool_result(
            await registry.execute("getHolidays", {"zipCode": zipCode, "year": year})
        )

    @mcp.custom_route("/health", methods=["GET"])
    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "healthy",
                "server": settings.server_name,
                "version": __version__,
                "timestamp": utc_now().isoformat(),
                "tools": len(registry),
            }
        )

    @mcp.custom_route("/api/docs", methods=["GET"])
    async def api_docs(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "server": settings.server_name,
                "version": __version__,
                "description": INSTRUCTIONS,
                "endpoints": {
                    "/mcp": {
                        "methods": ["POST", "GET", "DELETE"],
                        "transport": "Streamable HTTP",
                    },
                    "/legacy/sse": {"methods": ["GET"], "transport": "Server-Sent Events"},
                    "/legacy/messages/": {
                        "methods": ["POST"],
                        "transport": "Server-Sent Events",
                    },
                    "/tools/{name}": {
                        "methods": ["POST"],
                        "description": "Call a tool with a JSON object of arguments",
                    },
                    "/health": {"methods": ["GET"]},
                },
                "tools": registry.get_schemas(),
                "supportedRegions": ["US", "Canada"],
                "businessTypes": [t.value for t in BusinessType],
            }
        )

    @mcp.custom_route("/tools/{name}", methods=["POST"])
    async def call_tool(request: Request) -> JSONResponse:
        name = request.path_params["name"]
        if name not in registry:
            return JSONResponse(
                {"error": "Not found", "message": f"Unknown tool '{name}'"}, status_code=404
            )

        raw = await request.body()
        try:
            arguments = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError:
            arguments = None
        if not isinstance(arguments, dict):
            return JSONResponse(
                {"error": "Bad request", "message": "Body must be a JSON object of arguments"},
                status_code=400,
            )

        output = await registry.execute(name, arguments)
        return JSONResponse(output.to_dict())

    return mcp


def create_app(settings: Settings | None = None, registry: ToolRegistry | None = None) -> Starlette:
    """Build the ASGI application serving both MCP transports."""
    settings = settings or get_settings()
    mcp = create_mcp(registry, settings)

    mcp_app = mcp.http_app(path="/mcp")
    sse_app = mcp.http_app(path="/sse", transport="sse")

    return Starlette(
        routes=[
            Mount("/legacy", app=sse_app),
            Mount("/", app=mcp_app),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=settings.cors_origins,
                allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
                allow_headers=["Content-Type", "Accept", "Authorization", "mcp-session-id"],
                expose_headers=["Mcp-Session-Id"],
            )
        ],
        lifespan=mcp_app.lifespan,
    )


def run(settings: Settings | None = None) -> None:
    """Serve the application with uvicorn until interrupted."""
    import uvicorn

    settings = settings or get_settings()
    logger.info("Starting %s on %s:%d", settings.server_name, settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
