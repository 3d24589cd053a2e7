"""Add-on resource endpoints and the live-update WebSocket."""

import logging

from fastapi import APIRouter, HTTPException, Request, WebSocket

from devserver.dependencies import DevServerContext
from devserver.live.broadcaster import WebSocketConnection
from devserver.utils import get_add_on_listing_data, get_base_url, get_resources

logger = logging.getLogger(__name__)

router = APIRouter(tags=["add-on"])


def get_context(request: Request) -> DevServerContext:
    return request.app.state.context


def _base_url(request: Request, context: DevServerContext) -> str:
    options = context.options
    host = request.headers.get("host") or f"{options.hostname}:{options.port}"
    return get_base_url(options.scheme, host)


@router.get("/")
async def list_add_ons(request: Request):
    """List the add-on being served, in the shape the host application expects."""
    context = get_context(request)
    result = context.manifest_reader.get_manifest(from_cache=False)
    add_ons = get_add_on_listing_data(result.manifest, context.add_on_directory, _base_url(request, context))
    return {"addOns": add_ons}


@router.get("/{test_id}")
async def list_resources(test_id: str, request: Request):
    """List URLs of every file in the build output."""
    context = get_context(request)
    add_on_id = context.add_on_directory.add_on_id
    if test_id != add_on_id:
        raise HTTPException(status_code=404, detail=f"Add-on '{test_id}' not found")

    resources = get_resources(add_on_id, context.add_on_directory.output_dir_path, _base_url(request, context))
    return {"resources": resources}


@router.websocket("/")
async def live_updates(websocket: WebSocket):
    """Push-only channel; frames sent by the client are ignored."""
    context: DevServerContext = websocket.app.state.context
    await websocket.accept()
    connection = WebSocketConnection(websocket)
    context.broadcaster.register(connection)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        context.broadcaster.unregister(connection)
