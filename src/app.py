import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List
from urllib.parse import urlparse

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from services.display import MemoryDisplay
from services.weather_service import OPENWEATHER_URL, WeatherLookup, handle_search

from local_mcp.handlers.weather_tool import weather_tool_handler
from local_mcp.handlers.weather_resource import weather_resource_handler


PAGE_TEMPLATE = "index.html"

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def page_context(fields: Dict[str, str], alerts: List[str], query: str = "") -> Dict[str, Any]:
    """Template context for the widget page."""
    return {"fields": dict(fields), "alerts": alerts, "query": query}


def render_page(fields: Dict[str, str], alerts: List[str], query: str = "") -> str:
    """Render the widget page with the current field values and any notices."""
    return templates.get_template(PAGE_TEMPLATE).render(page_context(fields, alerts, query))


def create_app(
    api_key: str | None = None,
    server_name: str | None = None,
    lookup: WeatherLookup | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application serving the weather widget.

    Parameters
    ----------
    api_key : str | None, optional
        OpenWeatherMap API key. If omitted, read from the environment.
    server_name : str | None, optional
        MCP server name. If omitted, read from the environment.
    lookup : WeatherLookup | None, optional
        Preconfigured client. Takes precedence over ``api_key``.

    Returns
    -------
    FastAPI
        App with the widget page, a JSON endpoint, a health check and the
        MCP endpoint at ``/mcp``.
    """
    load_dotenv()
    if lookup is None:
        api_key = api_key or os.getenv("OPENWEATHER_API_KEY", "")
        base_url = os.getenv("OPENWEATHER_URL", OPENWEATHER_URL)
        lookup = WeatherLookup(api_key, base_url=base_url)
    server_name = server_name or os.getenv("MCP_SERVER_NAME", "weather-lookup")

    # One page shared by every request; overlapping lookups race on it.
    page = MemoryDisplay()

    async def run_search(city: str | None) -> List[str]:
        display = MemoryDisplay(fields=page.fields)
        await handle_search(city, lookup, display)
        return display.drain_alerts()

    fastmcp = FastMCP(name=server_name, json_response=True)

    @fastmcp.tool(name="weather.current", title="Current Weather")
    async def _tool(city: str | None = None) -> str:
        res = await weather_tool_handler({"city": city or ""}, lookup)
        text = str(res)
        for c in res.get("content") or []:
            if c.get("type") == "text" and isinstance(c.get("text"), str):
                text = c["text"]
                break
        if res.get("isError"):
            raise ToolError(text)
        return text

    @fastmcp.resource("weather://current/{city}", title="Current Weather Resource", mime_type="application/json")
    async def _resource(city: str) -> str:
        uri = urlparse(f"weather://current/{city}")
        result = await weather_resource_handler(uri, {"city": [city]}, lookup)
        for item in result.get("contents", []):
            text = item.get("text")
            if isinstance(text, str):
                return text
        return "{}"

    sub_app = fastmcp.streamable_http_app()

    @asynccontextmanager
    async def _lifespan(_app: FastAPI):  # noqa: D401
        async with fastmcp.session_manager.run():
            yield

    app = FastAPI(lifespan=_lifespan)

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request):
        """Widget page showing the last successful reading."""
        return templates.TemplateResponse(request, PAGE_TEMPLATE, page_context(page.fields, []))

    @app.get("/search", response_class=HTMLResponse)
    async def search(request: Request, city: str = ""):
        """Run a lookup from the page form and re-render the page."""
        alerts = await run_search(city)
        return templates.TemplateResponse(request, PAGE_TEMPLATE, page_context(page.fields, alerts, query=city))

    @app.get("/api/weather")
    async def weather(city: str = "") -> Dict[str, Any]:
        """Run a lookup and return the display fields and notices as JSON."""
        alerts = await run_search(city)
        return {"fields": dict(page.fields), "alerts": alerts}

    @app.get("/health")
    async def health():
        """Simple health endpoint indicating the service is running."""
        return PlainTextResponse("weather-lookup is running")

    # Mounted last so the routes above take precedence.
    app.mount("/", sub_app)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
