"""
Relay-сервер игры: WebSocket /ws, /health и статика фронтенда.
"""
import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import get_config
from .ws_handlers import ws_relay_loop
from .ws_manager import RelayRegistry

logger = logging.getLogger(__name__)


def create_app(frontend_dir: str | None = None) -> FastAPI:
    config = get_config()
    app = FastAPI(title="Tile Relay")
    app.state.relay = RelayRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok", "connections": app.state.relay.count}

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        logger.info("WS: connection attempt from %s", ws.client)
        await ws_relay_loop(ws, app.state.relay)

    # Статика фронтенда (index.html, картинки)
    static_dir = frontend_dir if frontend_dir is not None else config.frontend_dir
    if static_dir and Path(static_dir).is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="frontend")

    return app


app = create_app()


def run() -> None:
    logging.basicConfig(
        level=logging.DEBUG if get_config().debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    config = get_config()
    logger.info("Server running at http://%s:%s", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    run()
