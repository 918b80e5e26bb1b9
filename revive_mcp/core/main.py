import logging
import sys

from fastmcp import FastMCP
from rich.console import Console
from starlette.requests import Request
from starlette.responses import JSONResponse

from revive_mcp.core.config import get_config, validate_configuration
from revive_mcp.core.helpers.client_helpers import get_client, set_client
from revive_mcp.core.logging_config import setup_logging

logger = logging.getLogger(__name__)

# stdout carries the stdio MCP transport
console = Console(stderr=True)

SERVER_NAME = "revive-adserver-mcp"

mcp = FastMCP(
    name=SERVER_NAME,
    instructions=(
        "Manage Revive Adserver campaigns, zones, banners and targeting, and pull delivery statistics. "
        "Every tool returns JSON: {success, data} or {success: false, error}."
    ),
)


@mcp.custom_route("/health", methods=["GET"])
async def health(request: Request):
    """Health check endpoint."""
    return JSONResponse({"status": "healthy", "service": SERVER_NAME})


# --- Resources ---


@mcp.resource("campaign://list", name="Campaign List", description="List of all campaigns", mime_type="application/json")
def campaign_list_resource() -> str:
    return get_client().list_campaigns().to_text()


@mcp.resource("zone://list", name="Zone List", description="List of all zones", mime_type="application/json")
def zone_list_resource() -> str:
    return get_client().list_zones().to_text()


@mcp.resource("banner://list", name="Banner List", description="List of all banners", mime_type="application/json")
def banner_list_resource() -> str:
    return get_client().list_banners().to_text()


# Import MCP tools from separate modules and register them manually (no decorators in tool modules)
from revive_mcp.core.tool_error_logging import with_error_logging  # noqa: E402
from revive_mcp.core.tools.banners import (  # noqa: E402
    revive_banner_list,
    revive_banner_update,
    revive_banner_upload,
)
from revive_mcp.core.tools.campaigns import (  # noqa: E402
    revive_campaign_create,
    revive_campaign_list,
    revive_campaign_update,
)
from revive_mcp.core.tools.directory import revive_advertiser_list, revive_publisher_list  # noqa: E402
from revive_mcp.core.tools.statistics import revive_stats_generate  # noqa: E402
from revive_mcp.core.tools.targeting import revive_targeting_set  # noqa: E402
from revive_mcp.core.tools.zones import revive_zone_configure, revive_zone_list, revive_zone_update  # noqa: E402

mcp.tool()(with_error_logging(revive_campaign_create))
mcp.tool()(with_error_logging(revive_campaign_list))
mcp.tool()(with_error_logging(revive_campaign_update))
mcp.tool()(with_error_logging(revive_zone_configure))
mcp.tool()(with_error_logging(revive_zone_list))
mcp.tool()(with_error_logging(revive_zone_update))
mcp.tool()(with_error_logging(revive_banner_upload))
mcp.tool()(with_error_logging(revive_banner_list))
mcp.tool()(with_error_logging(revive_banner_update))
mcp.tool()(with_error_logging(revive_targeting_set))
mcp.tool()(with_error_logging(revive_stats_generate))
mcp.tool()(with_error_logging(revive_advertiser_list))
mcp.tool()(with_error_logging(revive_publisher_list))


def main() -> None:
    """Entry point: configure logging, check configuration and serve."""
    try:
        config = get_config()
        setup_logging(config.log_level)
        validate_configuration()
    except RuntimeError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        sys.exit(1)

    client = get_client()
    console.print(f"[bold cyan]🔌 Revive endpoint: {config.revive.api_url}[/bold cyan]")

    try:
        if config.server.transport == "http":
            console.print(f"[bold green]Serving MCP over HTTP on {config.server.host}:{config.server.port}[/bold green]")
            mcp.run(transport="http", host=config.server.host, port=config.server.port)
        else:
            logger.info("Revive Adserver MCP server running on stdio")
            mcp.run()
    except KeyboardInterrupt:
        logger.info("Shutting down server...")
    finally:
        result = client.logout()
        if not result.success:
            logger.warning(result.error)
        client.transport.close()
        set_client(None)


if __name__ == "__main__":
    main()
