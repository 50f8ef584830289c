"""FastAPI application serving the stats JSON and the embeddable pages."""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response

from bounty_widget.core.config import WidgetConfig
from bounty_widget.domain.interfaces import IStatsProvider
from bounty_widget.domain.models import Theme

from .rendering import SCRIPT_PATH, STATS_PATH, WIDGET_PATH, WidgetRenderer

logger = logging.getLogger(__name__)

SOURCE_HEADER = "X-Stats-Source"


class PrettyJSONResponse(JSONResponse):
    """JSON response indented for humans poking at the endpoint."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, indent=2, ensure_ascii=False).encode("utf-8")


def create_app(
    provider: IStatsProvider,
    config: WidgetConfig,
    *,
    on_shutdown: Optional[Callable[[], None]] = None,
) -> FastAPI:
    renderer = WidgetRenderer(config)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "widget_started",
            extra={"api_base": config.api_base, "public_url": config.public_url},
        )
        yield
        if on_shutdown is not None:
            on_shutdown()
        logger.info("widget_stopped")

    app = FastAPI(
        title="Bounty Stats Widget",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
    )

    @app.get(STATS_PATH)
    def get_stats() -> PrettyJSONResponse:
        result = provider.get_stats_result()
        if result.is_degraded:
            logger.warning("serving_degraded_stats", extra={"source": result.source.value})
        return PrettyJSONResponse(
            result.snapshot.to_payload(),
            headers={SOURCE_HEADER: result.source.value},
        )

    @app.get(WIDGET_PATH)
    def get_widget(theme: Optional[str] = None) -> HTMLResponse:
        selected = Theme.parse(theme, config.theme)
        return HTMLResponse(renderer.widget_html(selected))

    @app.get(SCRIPT_PATH)
    def get_embed_script() -> Response:
        return Response(renderer.embed_js(), media_type="application/javascript")

    @app.get("/{path:path}")
    def get_embed_page(path: str) -> HTMLResponse:
        return HTMLResponse(renderer.embed_page_html())

    return app
