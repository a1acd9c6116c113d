# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Verification service bootstrap: FastAPI app, listener binding and uvicorn lifecycle."""

from __future__ import annotations

import errno
import logging
import socket
import threading
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import ServiceConfig
from ..errors import MailProbeError, PortInUseError
from ..http.url import normalize
from ..routes import RouteGroup, list_routes
from ..version import __version__

logger = logging.getLogger(__name__)

STARTUP_TIMEOUT = 10.0
LISTEN_BACKLOG = 128


def validation_message(errors) -> str:  # noqa: ANN001
    """Human-readable summary of the first request validation error."""
    for err in errors:
        if err.get("type") == "json_invalid":
            return "Request body must be valid JSON"
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        if not loc:
            return "Request body must be a JSON object"
        name = ".".join(loc)
        if err.get("type") == "string_type":
            return f"{name} must be a string"
        return f"{name}: {err.get('msg') or 'invalid value'}"
    return "Invalid request"


def create_app(config: ServiceConfig, routes: RouteGroup) -> FastAPI:
    """Build the app: CORS allow-list, JSON error bodies, `routes` under the mount prefix."""
    app = FastAPI(title="mailprobe verification service", version=__version__)

    # Origins outside the allow-list get no CORS headers; the browser does the rejecting.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(config.allowed_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        headers = dict(exc.headers or {})
        content: dict[str, object] = {"success": False, "message": exc.detail}
        if exc.status_code == 405:
            content["message"] = f"Method not allowed. {request.url.path} does not accept {request.method}."
            content["receivedMethod"] = request.method
            if headers.get("Allow"):
                content["allowedMethods"] = [m.strip() for m in headers["Allow"].split(",")]
        return JSONResponse(status_code=exc.status_code, content=content, headers=headers or None)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [{"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()]
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": validation_message(exc.errors()), "errors": errors},
        )

    app.include_router(routes.to_router(), prefix=normalize(config.mount_prefix))
    return app


def bind_socket(config: ServiceConfig) -> socket.socket:
    """Bind and listen on the configured port, raising PortInUseError if it is taken."""
    family = socket.AF_INET6 if ":" in config.host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((config.host, config.port))
        sock.listen(LISTEN_BACKLOG)
    except OSError as exc:
        sock.close()
        if exc.errno == errno.EADDRINUSE:
            raise PortInUseError(config.host, config.port, exc.strerror or "") from exc
        raise
    return sock


def describe_routes(config: ServiceConfig, routes: RouteGroup) -> list[str]:
    prefix = normalize(config.mount_prefix)
    return [f"{descriptor.method.value} {prefix}{descriptor.path}" for descriptor in list_routes(routes)]


class VerificationService:
    """
    The verification service running on a background thread.

    The listener is bound in `start()` before uvicorn is launched, so a taken port
    fails fast with PortInUseError. Port 0 picks a free port; read it back from `port`.
    """

    def __init__(self, config: ServiceConfig, routes: RouteGroup):
        self.config = config
        self.routes = routes
        self.app = create_app(config, routes)
        self._socket: socket.socket | None = None
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int:
        if self._socket is None:
            return self.config.port
        return self._socket.getsockname()[1]

    @property
    def base_url(self) -> str:
        host = self.config.host
        if host in ("0.0.0.0", "::", ""):
            host = "127.0.0.1"
        elif ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{self.port}"

    @property
    def running(self) -> bool:
        return bool(self._server and self._server.started and self._thread and self._thread.is_alive())

    def start(self) -> VerificationService:
        if self._thread is not None:
            raise MailProbeError("Verification service already started")
        self._socket = bind_socket(self.config)
        self._server = uvicorn.Server(
            uvicorn.Config(self.app, log_config=None, lifespan="off", access_log=False),
        )
        self._thread = threading.Thread(
            target=self._server.run,
            kwargs={"sockets": [self._socket]},
            name="mailprobe-service",
            daemon=True,
        )
        self._thread.start()

        deadline = time.monotonic() + STARTUP_TIMEOUT
        while not self._server.started:
            if not self._thread.is_alive() or time.monotonic() >= deadline:
                self.stop()
                raise MailProbeError(f"Verification service failed to start on port {self.config.port}")
            time.sleep(0.01)

        logger.info("Verification service listening on %s", self.base_url)
        for line in describe_routes(self.config, self.routes):
            logger.info("  %s", line)
        return self

    def stop(self, timeout: float = 5.0) -> None:
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout)
        if self._socket is not None:
            self._socket.close()
        self._server = None
        self._thread = None
        self._socket = None

    def __enter__(self) -> VerificationService:
        if self._thread is None:
            self.start()
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.stop()


def start(config: ServiceConfig, routes: RouteGroup) -> VerificationService:
    """Start the verification service in the background and return it once it accepts connections."""
    return VerificationService(config, routes).start()


def serve(config: ServiceConfig, routes: RouteGroup) -> None:
    """Run the verification service in the foreground until interrupted."""
    sock = bind_socket(config)
    app = create_app(config, routes)
    server = uvicorn.Server(uvicorn.Config(app, log_config=None, lifespan="off"))
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()


__all__ = ["VerificationService", "bind_socket", "create_app", "describe_routes", "serve", "start", "validation_message"]
