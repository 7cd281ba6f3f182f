"""
Study data server entry point.

Serves the per-user data/calendar API plus the static front end.

Usage:
    python main.py [--host 0.0.0.0] [--port 3000]
"""

import argparse
import logging
from contextlib import asynccontextmanager

import sentry_sdk
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles

load_dotenv(".env.local")

from core.config import (
    get_host,
    get_index_file,
    get_log_level,
    get_max_body_bytes,
    get_port,
    get_sentry_dsn,
    get_static_dir,
)
from web_api.dependencies import get_user_file_store
from web_api.middleware import BodySizeLimitMiddleware
from web_api.responses import error_response
from web_api.routes import calendar_router, user_data_router

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

if get_sentry_dsn():
    sentry_sdk.init(dsn=get_sentry_dsn(), send_default_pii=False)


def log_endpoints(app: FastAPI) -> None:
    """Log the server address and every API endpoint."""
    base_url = f"http://localhost:{app.state.port}"
    logger.info(f"Server running at {base_url}")
    logger.info("Available API endpoints:")
    for route in app.routes:
        if isinstance(route, APIRoute) and route.path.startswith("/api/"):
            for method in sorted(route.methods):
                logger.info(f"- {method} {base_url}{route.path} - {route.summary}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    store_factory = app.dependency_overrides.get(
        get_user_file_store, get_user_file_store
    )
    store_factory().ensure_data_dir()
    log_endpoints(app)
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Study Data Server", lifespan=lifespan)
    app.state.host = get_host()
    app.state.port = get_port()

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=get_max_body_bytes())

    # Wraps the body cap, so 413 responses carry CORS headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
        return error_response(400, "Invalid request body")

    app.include_router(user_data_router)
    app.include_router(calendar_router)

    @app.get("/", include_in_schema=False)
    def index():
        """Serve the front end's entry document."""
        index_file = get_index_file()
        if not index_file.is_file():
            return error_response(404, "Entry document not found")
        return FileResponse(index_file)

    # Mounted last so the API routes take precedence
    app.mount("/", StaticFiles(directory=get_static_dir()), name="static")

    return app


app = create_app()


def main():
    parser = argparse.ArgumentParser(description="Study data server")
    parser.add_argument("--host", default=get_host(), help="Address to bind")
    parser.add_argument("--port", type=int, default=get_port(), help="Port to listen on")
    args = parser.parse_args()

    app.state.host = args.host
    app.state.port = args.port
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
