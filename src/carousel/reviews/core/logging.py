import logging
import sys

from carousel.reviews.core.config import settings


def setup_logging() -> None:
    """
    Route all service logs to stdout.

    `carousel.*` loggers follow LOG_LEVEL. At INFO that includes the cache
    lines operators read: "Cache LRU eviction" from `carousel.reviews.cache.memory`,
    the periodic "Cache cleanup complete" sweep summary, and the per-write
    cache stats logged by `carousel.reviews.api.reviews.service`. Upstream
    failures surface at ERROR from the reviews client. Per-request
    chatter from httpx and uvicorn access logs stays at WARNING.
    """

    app_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    handler.setFormatter(formatter)

    # everything else, including third-party libraries
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.INFO)
    root.addHandler(handler)

    # cache, sweeper, upstream client, routes
    logging.getLogger("carousel").setLevel(app_level)

    # server lifecycle stays visible, access lines do not
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    # one line per upstream call is too much at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
