# reviews/main.py
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carousel.reviews.api.dependencies import ReviewsComponents, build_components
from carousel.reviews.core.config import settings
from carousel.reviews.core.logging import setup_logging
from carousel.reviews.routes import register_routes

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager: builds the cache and upstream client once for the
    process and releases them (sweeper thread included) on shutdown.
    """
    logger.info("Starting %s (%s mode)", settings.app_name, settings.env)

    owned = getattr(app.state, "reviews", None) is None
    if owned:
        app.state.reviews = build_components(settings)

    yield

    logger.info("Shutting down %s", settings.app_name)
    if owned:
        await app.state.reviews.aclose()


def create_app(
    use_lifespan: bool = True,
    components: Optional[ReviewsComponents] = None,
) -> FastAPI:

    if os.getenv("DEBUG_ATTACH") == "1":
        import debugpy

        debugpy.listen(("0.0.0.0", 5678))
        logger.info("Debugger listening on 0.0.0.0:5678")

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan if use_lifespan else None,
    )

    if components is not None:
        app.state.reviews = components

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        allow_credentials=False,
        max_age=86400,
    )

    register_routes(app)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
