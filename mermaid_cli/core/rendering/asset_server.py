"""
Asset Server
============

FastAPI application serving the HTML shell and the resource store to the
headless browser. Runs under uvicorn on a loopback socket whose port is
chosen by the OS and known before serving starts.
"""

import asyncio
import socket
from typing import Any, Dict, Optional, Tuple

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request, Response

from mermaid_cli.config.logging import get_logger
from mermaid_cli.models.schemas import ResourceStore

logger = get_logger(__name__)

HTML_CONTENT_TYPE = "text/html"

# Route name -> (content type, ResourceStore field)
RESOURCE_ROUTES: Dict[str, Tuple[str, str]] = {
    "font": ("font/woff", "font"),
    "style": ("text/css;charset=utf-8", "style"),
    "config": ("application/json", "config"),
    "diagram": ("text/plain;charset=utf-8", "diagram"),
    "mermaid_js": ("text/javascript", "render_library"),
}


def _response(content: bytes, content_type: str) -> Response:
    # An explicit header keeps Starlette from appending a charset to text/* types.
    return Response(content=bytes(content), headers={"content-type": content_type})


def get_store(request: Request) -> ResourceStore:
    """Resource store attached to the application."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        logger.error("Resource store unavailable", path=request.url.path)
        raise HTTPException(status_code=500, detail="Resource store unavailable")
    return store


def create_app(store: Optional[ResourceStore], html: bytes) -> FastAPI:
    """
    Create the asset server application.

    Args:
        store: Resources served under their fixed routes
        html: HTML shell served at ``/``

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Mermaid CLI Asset Server",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.store = store

    @app.get("/")
    async def index() -> Response:
        return _response(html, HTML_CONTENT_TYPE)

    @app.get("/{name}")
    async def resource(name: str, store: ResourceStore = Depends(get_store)) -> Response:
        route = RESOURCE_ROUTES.get(name)
        if route is None:
            raise HTTPException(status_code=404, detail="Not Found")

        content_type, field = route
        return _response(getattr(store, field), content_type)

    return app


class AssetServer:
    """Loopback uvicorn server for one conversion."""

    def __init__(self, store: ResourceStore, html: bytes, host: str = "127.0.0.1"):
        self.host = host
        self.app = create_app(store, html)
        self.logger: Any = logger.bind(component="asset_server")  # structlog.BoundLoggerBase
        self._socket: Optional[socket.socket] = None
        self._server: Optional[uvicorn.Server] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def port(self) -> Optional[int]:
        if self._socket is None:
            return None
        return self._socket.getsockname()[1]

    def bind(self) -> int:
        """
        Bind and listen on an ephemeral loopback port.

        Connections are queued by the kernel from here on, so the browser may
        connect before the accept loop is running.
        """
        if self._socket is None:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            try:
                sock.bind((self.host, 0))
                sock.listen()
            except OSError:
                sock.close()
                raise
            self._socket = sock
            self.logger.debug("Asset server bound", host=self.host, port=self.port)
        return self.port

    async def start(self) -> int:
        """Bind if needed and start serving in a background task."""
        port = self.bind()
        if self._task is not None:
            return port

        config = uvicorn.Config(
            self.app,
            log_config=None,
            log_level="warning",
            access_log=False,
            lifespan="off",
        )
        self._server = uvicorn.Server(config)
        self._task = asyncio.create_task(self._server.serve(sockets=[self._socket]))
        self.logger.info("Asset server started", url=f"http://{self.host}:{port}/")
        return port

    async def stop(self) -> None:
        """Stop serving and release the socket."""
        if self._server is not None and self._task is not None:
            self._server.should_exit = True
            await self._task
        if self._socket is not None:
            self._socket.close()
        self._server = None
        self._task = None
        self._socket = None
        self.logger.debug("Asset server stopped")

    async def __aenter__(self) -> "AssetServer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()
