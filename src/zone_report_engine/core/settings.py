"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .labels import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES

BASE_DIR_ENV = "ZONE_REPORT_BASE_DIR"
LOG_LEVEL_ENV = "ZONE_REPORT_LOG_LEVEL"
LANGUAGE_ENV = "ZONE_REPORT_LANGUAGE"
STRICT_LEVELS_ENV = "ZONE_REPORT_STRICT_LEVELS"
SKIP_FIRST_ROW_ENV = "ZONE_REPORT_EXPORT_SKIP_FIRST_ROW"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class Settings:
    base_dir: Path
    log_level: str = "INFO"
    language: str = DEFAULT_LANGUAGE
    strict_levels: bool = False
    # Legacy exports dropped the first data row of CSV/TXT files.
    export_skip_first_row: bool = False


def _env_flag(name: str) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return False
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no)")


def resolve_language(language: str | None) -> str:
    """Return a supported language code, defaulting to the fallback language."""
    if not language:
        return DEFAULT_LANGUAGE
    code = language.strip().lower()
    if code not in SUPPORTED_LANGUAGES:
        allowed = ", ".join(SUPPORTED_LANGUAGES)
        raise ValueError(f"Unsupported language '{language}'. Allowed: {allowed}.")
    return code


def resolve_settings() -> Settings:
    """Read settings from the environment."""
    try:
        language = resolve_language(os.getenv(LANGUAGE_ENV))
    except ValueError as exc:
        raise ValueError(f"{LANGUAGE_ENV}: {exc}") from exc

    return Settings(
        base_dir=Path(os.getenv(BASE_DIR_ENV) or os.getcwd()).resolve(),
        log_level=(os.getenv(LOG_LEVEL_ENV) or "INFO").upper(),
        language=language,
        strict_levels=_env_flag(STRICT_LEVELS_ENV),
        export_skip_first_row=_env_flag(SKIP_FIRST_ROW_ENV),
    )
