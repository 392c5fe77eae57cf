# src/cornchan/main.py
"""Main entry point for the cornchan application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from cornchan.api.v1 import boards_router, posts_router
from cornchan.core.context import AppContext
from cornchan.core.errors import CornchanError
from cornchan.core.settings import Settings, settings
from cornchan.schemas import Board
from cornchan.services.identity import slugify

logger = logging.getLogger(__name__)


def configure_logging(cfg: Settings) -> None:
    logging.basicConfig(
        level=cfg.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def seed_default_board(context: AppContext) -> Board:
    """Store the configured default board so a fresh deployment has one."""
    cfg = context.settings
    board = Board(
        name=cfg.default_board_name,
        slug=slugify(cfg.default_board_name),
        description=cfg.default_board_description,
    )
    await context.boards.put(board)
    logger.info("Seeded board /%s/", board.slug)
    return board


async def handle_cornchan_error(request: Request, exc: CornchanError) -> JSONResponse:
    """Render a domain error with the status code its class declares."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app(context: AppContext | None = None, cfg: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        context: Prebuilt application context; built from ``cfg`` on startup when omitted.
        cfg: Settings to use; defaults to the process-wide settings.
    """
    cfg = cfg or (context.settings if context is not None else settings)

    application = FastAPI(
        title=cfg.app_name,
        description="Anonymous image-board API",
        version=cfg.app_version,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=cfg.cors_allow_credentials,
        allow_methods=cfg.cors_allow_methods,
        allow_headers=cfg.cors_allow_headers,
    )
    application.add_middleware(GZipMiddleware)

    application.include_router(boards_router, prefix="/api/v1")
    application.include_router(posts_router, prefix="/api/v1")
    application.add_exception_handler(CornchanError, handle_cornchan_error)  # type: ignore[arg-type]

    @application.on_event("startup")
    async def on_startup() -> None:
        configure_logging(cfg)
        ctx = context or AppContext.build(cfg)
        application.state.context = ctx
        if ctx.settings.seed_default_board:
            await seed_default_board(ctx)
        logger.info("%s %s ready", cfg.app_name, cfg.app_version)

    @application.on_event("shutdown")
    async def on_shutdown() -> None:
        ctx: AppContext | None = getattr(application.state, "context", None)
        if ctx is not None:
            await ctx.close()

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    @application.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with basic information about the API."""
        return {
            "name": cfg.app_name,
            "version": cfg.app_version,
            "description": "Anonymous image-board API",
            "docs": "/docs",
        }

    return application


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cornchan.main:app", host="0.0.0.0", port=3000, reload=settings.debug)
