"""Runtime settings loaded from the environment (and a local .env file)."""

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./gtbfit.db"


class MeanScope(str, Enum):
    """Which entries the chart average line is computed over."""

    GLOBAL = "global"
    FILTERED = "filtered"


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    mean_scope: MeanScope = MeanScope.GLOBAL
    export_dir: str = tempfile.gettempdir()
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Build settings from GTBFIT_* environment variables."""
    scope = os.getenv("GTBFIT_MEAN_SCOPE", MeanScope.GLOBAL.value).strip().lower()
    try:
        mean_scope = MeanScope(scope)
    except ValueError:
        raise ValueError(
            f"GTBFIT_MEAN_SCOPE must be one of {[s.value for s in MeanScope]}, got {scope!r}"
        ) from None

    return Settings(
        database_url=os.getenv("GTBFIT_DATABASE_URL", DEFAULT_DATABASE_URL),
        mean_scope=mean_scope,
        export_dir=os.getenv("GTBFIT_EXPORT_DIR", tempfile.gettempdir()),
        log_level=os.getenv("GTBFIT_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
