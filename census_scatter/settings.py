from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
HANDLER_NAME = "census_scatter.console"


@dataclass(frozen=True)
class Settings:
    data_path: str = "data/data.csv"
    database_url: Optional[str] = None
    data_table: Optional[str] = None
    transition_ms: int = 1000
    frame_count: int = 24
    viewport_width: int = 1280
    viewport_height: int = 900
    log_level: str = "INFO"
    y_selector: bool = False

    @property
    def uses_database(self) -> bool:
        return bool(self.database_url and self.data_table)


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer), using %d", name, raw, default)
        return default


def _bool_env(env: Mapping[str, str], name: str) -> bool:
    return env.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Reads settings from the environment (``os.environ`` by default)."""
    env = os.environ if environ is None else environ
    defaults = Settings()
    return Settings(
        data_path=env.get("CENSUS_DATA_PATH") or defaults.data_path,
        database_url=env.get("DATABASE_URL") or None,
        data_table=env.get("CENSUS_DATA_TABLE") or None,
        transition_ms=max(0, _int_env(env, "CENSUS_TRANSITION_MS", defaults.transition_ms)),
        frame_count=max(1, _int_env(env, "CENSUS_FRAME_COUNT", defaults.frame_count)),
        viewport_width=_int_env(env, "CENSUS_VIEWPORT_WIDTH", defaults.viewport_width),
        viewport_height=_int_env(env, "CENSUS_VIEWPORT_HEIGHT", defaults.viewport_height),
        log_level=(env.get("CENSUS_LOG_LEVEL") or defaults.log_level).upper(),
        y_selector=_bool_env(env, "CENSUS_Y_SELECTOR"),
    )


def configure_logging(level: str = "INFO") -> None:
    # Streamlit reruns the script on every interaction; only attach one handler.
    root = logging.getLogger("census_scatter")
    root.setLevel(level)
    if not any(h.get_name() == HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
