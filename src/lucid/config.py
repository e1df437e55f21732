# src/lucid/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Invalid numeric values fall back to defaults instead of failing startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

ENV_PREFIX = "LUCID"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_positive_int(name: str, default: int) -> int:
    v = _env_int(name, default)
    return v if v > 0 else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Connector flags ----
    console_enabled: bool

    # ---- LLM (task parsing) ----
    llm_api_key: Optional[str]
    llm_base_url: str
    llm_models: List[str]
    extra_headers: Dict[str, str]
    llm_first_token_timeout: float
    llm_read_timeout: float
    llm_connect_timeout: float

    # ---- Focus cycle defaults (minutes / count) ----
    focus_work_minutes: int
    focus_short_break_minutes: int
    focus_long_break_minutes: int
    focus_cycles: int
    tick_interval_seconds: float

    # ---- Calendar sync ----
    calendar_user: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _first_env(_k("APP_NAME"), default="lucid") or "lucid"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/lucid"))

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        llm_api_key = _first_env(_k("LLM_API_KEY"), "OPENROUTER_API_KEY", "OPENAI_API_KEY", default=None)
        llm_base_url = _env(_k("LLM_BASE_URL"), "https://openrouter.ai/api/v1")

        http_referer = _env(_k("HTTP_REFERER"), "https://example.com")
        title = _env(_k("APP_TITLE"), app_name)
        extra_headers = {
            "HTTP-Referer": http_referer,
            "X-Title": title,
        }

        llm_models = _env_list(
            _k("LLM_MODELS"),
            [
                "google/gemini-2.5-flash",
                "qwen/qwen-2.5-72b-instruct:free",
                "deepseek/deepseek-chat-v3-0324:free",
            ],
        )

        first_token = _env_float(_k("LLM_FIRST_TOKEN_TIMEOUT_SECONDS"), 20.0)
        read_timeout = _env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 25.0)
        connect_timeout = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)
        # keep read >= first_token as a sane baseline
        read_timeout = max(read_timeout, first_token)

        tick_interval = _env_float(_k("TICK_INTERVAL_SECONDS"), 1.0)
        if tick_interval <= 0:
            tick_interval = 1.0

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            console_enabled=console_enabled,
            llm_api_key=llm_api_key,
            llm_base_url=llm_base_url,
            llm_models=llm_models,
            extra_headers=extra_headers,
            llm_first_token_timeout=first_token,
            llm_read_timeout=read_timeout,
            llm_connect_timeout=connect_timeout,
            focus_work_minutes=_env_positive_int(_k("FOCUS_WORK_MINUTES"), 25),
            focus_short_break_minutes=_env_positive_int(_k("FOCUS_SHORT_BREAK_MINUTES"), 5),
            focus_long_break_minutes=_env_positive_int(_k("FOCUS_LONG_BREAK_MINUTES"), 15),
            focus_cycles=_env_positive_int(_k("FOCUS_CYCLES"), 4),
            tick_interval_seconds=tick_interval,
            calendar_user=_env(_k("CALENDAR_USER"), "user@example.com"),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
