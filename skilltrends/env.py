import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from .storage import KeyValueStore, JsonFileStore

LOCAL_BUCKET = "local"
SYNC_BUCKET = "sync"
BACKENDS = ("json", "sqlite")


def load_env() -> None:
    """Load .env from the working directory if present."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


@dataclass
class Settings:
    data_dir: Path = Path("data")
    store_backend: str = "json"
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    sync_timeout: Optional[float] = None
    sweep_interval_minutes: float = 10080


def _float_env(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def get_settings() -> Settings:
    """Build settings from SKILLTRENDS_* environment variables."""
    backend = os.getenv("SKILLTRENDS_STORE_BACKEND", "json").strip().lower()
    if backend not in BACKENDS:
        raise ValueError(
            f"SKILLTRENDS_STORE_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}"
        )
    return Settings(
        data_dir=Path(os.getenv("SKILLTRENDS_DATA_DIR", "data")),
        store_backend=backend,
        log_level=os.getenv("SKILLTRENDS_LOG_LEVEL", "INFO"),
        log_dir=Path(os.getenv("SKILLTRENDS_LOG_DIR", "logs")),
        sync_timeout=_float_env("SKILLTRENDS_SYNC_TIMEOUT", None),
        sweep_interval_minutes=_float_env("SKILLTRENDS_SWEEP_INTERVAL_MINUTES", 10080),
    )


def open_stores(settings: Settings) -> Tuple[KeyValueStore, KeyValueStore]:
    """
    Open the local (job records) and sync (configuration) buckets.

    Returns:
        Tuple of (local_store, sync_store)
    """
    if settings.store_backend == "sqlite":
        from .database import SqliteStore

        db_path = settings.data_dir / "skilltrends.db"
        return SqliteStore(db_path, LOCAL_BUCKET), SqliteStore(db_path, SYNC_BUCKET)

    return (
        JsonFileStore(settings.data_dir / f"{LOCAL_BUCKET}.json"),
        JsonFileStore(settings.data_dir / f"{SYNC_BUCKET}.json"),
    )
