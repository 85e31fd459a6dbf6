from __future__ import annotations
import logging
import os
from pathlib import Path
from dotenv import load_dotenv
from .record_store import STORAGE_KEY as DEFAULT_STORAGE_KEY

load_dotenv()

BASE_DIR = Path(__file__).resolve().parents[2]
DATA_DIR = Path(os.getenv("RECIPE_VAULT_DATA_DIR", str(BASE_DIR / "data")))

DB_URL = os.getenv("RECIPE_VAULT_DB_URL", f"sqlite+aiosqlite:///{(DATA_DIR / 'recipes.db').as_posix()}")
STORAGE_KEY = os.getenv("RECIPE_VAULT_STORAGE_KEY", DEFAULT_STORAGE_KEY)
LOG_LEVEL = os.getenv("RECIPE_VAULT_LOG_LEVEL", "INFO").upper()


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
