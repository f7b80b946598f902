"""FastAPI shim over the stories service."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hn_stories.clients.hacker_news import HackerNewsClient
from hn_stories.config.settings import settings
from hn_stories.core.errors import UpstreamError, ValidationError
from hn_stories.core.logging import get_logger, setup_logging
from hn_stories.core.metrics import metrics
from hn_stories.core.middleware import ObservabilityMiddleware
from hn_stories.core.schemas import PagedResult, ProblemDetails
from hn_stories.stories import StoriesService, build_stories_service

setup_logging(settings.server.log_level)
logger = get_logger(__name__)


def _problem(status: int, title: str, detail: str) -> JSONResponse:
    body = ProblemDetails(title=title, status=status, detail=detail)
    return JSONResponse(body.model_dump(), status_code=status)


def create_app(service: Optional[StoriesService] = None) -> FastAPI:
    """Build the app. Without a service, one backed by Hacker News is created on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = None
        if service is None:
            client = HackerNewsClient()
            app.state.stories = build_stories_service(
                client,
                max_concurrency=settings.aggregation.max_concurrent_fetches,
                search_window=settings.aggregation.search_window,
            )
        else:
            app.state.stories = service
        logger.info("Stories service ready")
        yield
        if client is not None:
            await client.aclose()

    app = FastAPI(title="HN Stories", version="1.0.0", lifespan=lifespan)
    app.add_middleware(ObservabilityMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return _problem(400, "Invalid query parameter", exc.detail)

    @app.exception_handler(UpstreamError)
    async def _upstream_error(request: Request, exc: UpstreamError) -> JSONResponse:
        logger.error(f"Upstream failure on {request.url.path}: {exc}")
        return _problem(502, "Upstream unavailable", str(exc))

    @app.get("/health")
    async def health() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse({"status": "ok", "service": "hn-stories"})

    @app.get("/metrics")
    async def get_metrics() -> JSONResponse:
        """Metrics endpoint."""
        return JSONResponse(metrics.snapshot())

    @app.get("/api/stories/new", response_model=PagedResult)
    async def newest_stories(
        request: Request,
        offset: int = Query(0),
        limit: int = Query(20),
        search: Optional[str] = Query(None),
    ) -> PagedResult:
        """Newest stories with optional title search and paging.

        `total` is the length of the ID list without search, or the number of
        matches inside the most recent 500 stories with search.
        """
        stories: StoriesService = request.app.state.stories
        return await stories.get_newest(offset, limit, search)

    return app


app = create_app()
