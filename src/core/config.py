"""
Configuration loaded from environment variables.

Exposes SETTINGS, read once at import. Tests build their own Settings instead of patching the environment.
"""

import os
from dataclasses import dataclass
from typing import Any, Callable

ENV_PREFIX = "CHESS_LEDGER_"


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    env = os.environ.get(f"{ENV_PREFIX}{name}")
    if env is None:
        return default
    return cast(env) if cast else env


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///chess_ledger.db"
    echo_sql: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=_get("DATABASE_URL", cls.database_url),
            echo_sql=_get("ECHO_SQL", cls.echo_sql, cast=_as_bool),
        )


SETTINGS = Settings.from_env()
