"""Конфигурация relay-сервера и клиента."""
import os
from functools import lru_cache

from .constants import BOARD_COLS, BOARD_ROWS, TICK_INTERVAL, TURN_SECONDS


@lru_cache
def get_config():
    return type("Config", (), {
        "debug": os.environ.get("DEBUG", "0").lower() in ("1", "true", "yes"),
        "allowed_origins": os.environ.get("ALLOWED_ORIGINS", "*").split(","),
        "host": os.environ.get("HOST", "0.0.0.0"),
        "port": int(os.environ.get("PORT", "3000")),
        "frontend_dir": os.environ.get("FRONTEND_DIR", ""),
        "relay_url": os.environ.get("RELAY_URL", "ws://localhost:3000/ws"),
        "board_cols": int(os.environ.get("BOARD_COLS", str(BOARD_COLS))),
        "board_rows": int(os.environ.get("BOARD_ROWS", str(BOARD_ROWS))),
        "turn_seconds": int(os.environ.get("TURN_SECONDS", str(TURN_SECONDS))),
        "tick_interval": float(os.environ.get("TICK_INTERVAL", str(TICK_INTERVAL))),
    })()
