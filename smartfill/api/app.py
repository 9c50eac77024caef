"""HTTP surface for Smart Fill.

Routes:
    POST /api/segments/autofill  resolve a segment suggestion
    GET  /health                 liveness plus cache statistics
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..container import Container, get_container
from ..ports.cache import CachePort
from ..services import AutofillResolver

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Build the FastAPI application around a container.

    Args:
        container: Dependency container; the process default when omitted.
    """
    container = container or get_container()
    app = FastAPI(title="Smart Fill", version=__version__)
    app.state.container = container

    @app.post("/api/segments/autofill")
    async def autofill(request: Request) -> JSONResponse:
        body: Any
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.info("Unparsable autofill body")
            body = None

        resolver: AutofillResolver = container.resolve(AutofillResolver)
        response = await resolver.respond(body)
        return JSONResponse(status_code=response.status_code, content=response.body)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        cache: CachePort[Any] = container.resolve(CachePort)
        return {"status": "ok", "cache": cache.stats()}

    return app
