"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to *default*."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "PocketPlan"
    DB_FILENAME = "pocketplan.db"
    BUDGET_STORE_KEY = "budget_data_v2"
    DEBT_STORE_KEY = "debts_data"

    def __init__(self, data_dir: Path | None = None) -> None:
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DEV_MODE = _env_bool("POCKETPLAN_DEV_MODE", default=True)
        if data_dir is None:
            self.DATABASE_URL = os.getenv("POCKETPLAN_DATABASE_URL", self._build_sqlite_url())
        else:
            self.DATABASE_URL = self._build_sqlite_url()
        self.SETTLEMENT_HORIZON_MONTHS = _env_int("POCKETPLAN_SETTLEMENT_HORIZON", 36)

    def _resolve_data_dir(self, data_dir: Path | None = None) -> Path:
        """Return the directory where the SQLite store and logs live."""

        data_root = data_dir or os.getenv("POCKETPLAN_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {"check_same_thread": False}
        return {"connect_args": connect_args}


class DevConfig(BaseConfig):
    """Development configuration: verbose console logging regardless of env."""

    def __init__(self, data_dir: Path | None = None) -> None:
        super().__init__(data_dir)
        self.DEV_MODE = True


class TestingConfig(BaseConfig):
    """Configuration for test runs; pass a temporary data_dir."""

    def __init__(self, data_dir: Path | None = None) -> None:
        super().__init__(data_dir)
        self.DEV_MODE = False
