from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import uvicorn

from quickchart_mcp.api.routes import router
from quickchart_mcp.config import Config
from quickchart_mcp.mcp.protocol import MCPDispatcher
from quickchart_mcp.mcp.servers import srv_quickchart_stdio
from quickchart_mcp.mcp.servers.srv_quickchart import SERVER_VERSION, QuickChartServer
from quickchart_mcp.observability.logger import logger, setup_logging

# Load environment variables from .env file
load_dotenv()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def create_app(settings: Config) -> FastAPI:
    """Build the HTTP transport around one dispatcher"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("application_started", transport="http", port=settings.port)
        yield
        logger.info("application_stopped")

    app = FastAPI(
        title="QuickChart MCP Server",
        description="Chart, graph and word cloud generation over MCP",
        version=SERVER_VERSION,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.dispatcher = MCPDispatcher(QuickChartServer(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def cors_on_every_response(request: Request, call_next):
        """Answer any OPTIONS directly and stamp CORS headers without needing an Origin"""
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        for header, value in CORS_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    app.include_router(router)
    return app


settings = Config.from_env()
app = create_app(settings)


def run():
    """Serve over HTTP when PORT is set, otherwise over stdio"""
    setup_logging(settings.log_level)
    if settings.http_mode:
        uvicorn.run(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower()
        )
    else:
        srv_quickchart_stdio.main(settings)


if __name__ == "__main__":
    run()
