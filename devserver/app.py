"""FastAPI application serving one add-on and its live-update channel."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from devserver.dependencies import DevServerContext
from devserver.routers import resources_router

logger = logging.getLogger(__name__)


def create_app(context: DevServerContext, watch: bool = True) -> FastAPI:
    """Create the app for a server context.

    Args:
        context: Services for the add-on being served
        watch: Start the source watcher with the app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        add_on_directory = context.add_on_directory
        logger.info(f"Starting server for add-on '{add_on_directory.root_dir_name}'")
        if watch:
            context.watcher.start()
        try:
            yield
        finally:
            logger.info("Shutting down add-on server")
            context.watcher.stop()
            context.tracker.close()

    app = FastAPI(
        title="Add-on Development Server",
        description="Serves a local add-on build and pushes live updates to connected runtimes",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.context = context

    # The host application loads add-on resources cross-origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(resources_router)

    add_on_id = context.add_on_directory.add_on_id
    app.mount(
        f"/{add_on_id}",
        StaticFiles(directory=str(context.add_on_directory.output_dir_path), check_dir=False),
        name="add_on_output",
    )
    return app
