"""
Process lifecycle for the HTTP server.

`start()` serves the app from a background thread and returns a handle;
`stop()` shuts it down. Running this module serves in the foreground:

    python -m loi_service.server
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

import uvicorn

from loi_service.config import ServiceConfig, load_config
from loi_service.logging_config import configure_logging
from loi_service.main import create_app
from loi_service.services.pdf_renderer import PdfRenderer

logger = logging.getLogger(__name__)


@dataclass
class ServerHandle:
    config: ServiceConfig
    server: uvicorn.Server
    thread: threading.Thread

    @property
    def url(self) -> str:
        host = "127.0.0.1" if self.config.host in ("0.0.0.0", "") else self.config.host
        return f"http://{host}:{self.config.port}"


def _uvicorn_server(config: ServiceConfig, renderer: Optional[PdfRenderer]) -> uvicorn.Server:
    app = create_app(config, renderer=renderer)
    return uvicorn.Server(
        uvicorn.Config(app, host=config.host, port=config.port, log_level=config.log_level.lower(), log_config=None)
    )


def start(config: Optional[ServiceConfig] = None, renderer: Optional[PdfRenderer] = None,
          startup_timeout: float = 10.0) -> ServerHandle:
    """Serve on a background thread; returns once the server accepts connections."""
    config = config or load_config()
    configure_logging(config.log_level)
    server = _uvicorn_server(config, renderer)
    thread = threading.Thread(target=server.run, name="loi-service", daemon=True)
    thread.start()

    deadline = time.monotonic() + startup_timeout
    while not server.started:
        if not thread.is_alive():
            raise RuntimeError("server exited during startup")
        if time.monotonic() > deadline:
            server.should_exit = True
            thread.join(timeout=startup_timeout)
            raise RuntimeError(f"server did not start within {startup_timeout}s")
        time.sleep(0.05)

    logger.info("service running", extra={"host": config.host, "port": config.port, "engine": config.pdf_engine})
    return ServerHandle(config=config, server=server, thread=thread)


def stop(handle: ServerHandle, timeout: float = 10.0) -> None:
    handle.server.should_exit = True
    handle.thread.join(timeout=timeout)
    logger.info("service stopped", extra={"port": handle.config.port})


def run() -> None:
    """Serve in the foreground until interrupted."""
    config = load_config()
    configure_logging(config.log_level)
    logger.info("service starting", extra={"port": config.port, "endpoints": "/generate-pdf /generate-docx /create-zip"})
    _uvicorn_server(config, None).run()


if __name__ == "__main__":
    run()
