"""Configuration loading and persistence helpers backed by a local .env file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import dotenv_values
from pydantic import BaseModel, field_validator


def _runtime_home() -> Path:
    """ISSUE_RADAR_HOME when set, else the project root holding .env."""
    override = str(os.getenv("ISSUE_RADAR_HOME", "") or "").strip()
    if override:
        return Path(override).expanduser().resolve()
    return Path(__file__).resolve().parents[2]


DEFAULT_CONFIG_HOME = _runtime_home()
ENV_PATH = DEFAULT_CONFIG_HOME / ".env"
ENV_EXAMPLE_PATH = DEFAULT_CONFIG_HOME / ".env.example"

VIEW_MODES = ("grid", "list")
_PATH_SETTING_KEYS = {"ISSUES_PAYLOAD_PATH"}


def _candidate_env_example_paths() -> List[Path]:
    out: List[Path] = [ENV_EXAMPLE_PATH]
    try:
        out.append(Path.cwd() / ".env.example")
    except OSError:
        pass

    seen: set[str] = set()
    uniq: List[Path] = []
    for path in out:
        key = str(path)
        if key in seen:
            continue
        seen.add(key)
        uniq.append(path)
    return uniq


def _coerce_str(value: object) -> str:
    return str(value or "").strip()


def _strip_inline_comment(value: object) -> str:
    """
    Drop trailing inline comments such as `DEFAULT_VIEW_MODE=grid  # grid|list`.

    python-dotenv may keep the comment as part of an unquoted value.
    """
    txt = _coerce_str(value)
    if " #" in txt:
        txt = txt.split(" #", 1)[0].strip()
    return txt


def config_home() -> Path:
    return ENV_PATH.expanduser().resolve().parent


def _resolve_runtime_path(raw: str) -> str:
    txt = _coerce_str(raw)
    if not txt:
        return ""
    path = Path(txt).expanduser()
    if not path.is_absolute():
        path = config_home() / path
    return str(path.resolve())


def _to_storable_path(raw: str) -> str:
    txt = _coerce_str(raw)
    if not txt:
        return ""
    path = Path(txt).expanduser()
    if not path.is_absolute():
        return str(path)
    try:
        return str(path.resolve().relative_to(config_home()))
    except ValueError:
        return str(path.resolve())


class Settings(BaseModel):
    APP_TITLE: str = "Issues Management"
    LOG_LEVEL: str = "INFO"

    # -------------------------
    # Issues source
    # -------------------------
    ISSUES_API_BASE_URL: str = "http://localhost:5001"
    ISSUES_API_PATH: str = "/issues"
    ISSUES_API_TOKEN: str = ""
    ISSUES_API_TIMEOUT_SECONDS: int = 30
    # When set, the payload is read from this JSON file instead of the API.
    ISSUES_PAYLOAD_PATH: str = ""
    # Empty = every project in the payload
    PROJECT_ID: str = ""

    # -------------------------
    # Issues view preferences
    # -------------------------
    ISSUE_CARDS_MAX: int = 60
    DEFAULT_VIEW_MODE: str = "grid"

    @field_validator("DEFAULT_VIEW_MODE", mode="before")
    @classmethod
    def _view_mode(cls, value: object) -> str:
        mode = _strip_inline_comment(value).lower()
        return mode if mode in VIEW_MODES else "grid"

    @field_validator("ISSUE_CARDS_MAX", mode="after")
    @classmethod
    def _cards_max(cls, value: int) -> int:
        return max(1, int(value))


def project_scope(settings: Settings) -> int | None:
    """Return the configured project id, or None when no project is selected."""
    raw = _coerce_str(settings.PROJECT_ID)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def issues_api_url(settings: Settings) -> str:
    base = _coerce_str(settings.ISSUES_API_BASE_URL).rstrip("/")
    path = _coerce_str(settings.ISSUES_API_PATH) or "/issues"
    if not path.startswith("/"):
        path = "/" + path
    return f"{base}{path}"


def ensure_env() -> None:
    ENV_PATH.parent.mkdir(parents=True, exist_ok=True)
    if not ENV_PATH.exists():
        example_path = next((p for p in _candidate_env_example_paths() if p.exists()), None)
        if example_path is not None:
            ENV_PATH.write_text(example_path.read_text(encoding="utf-8"), encoding="utf-8")
            return
        ENV_PATH.write_text("", encoding="utf-8")


def load_settings() -> Settings:
    vals = {k: v for k, v in dotenv_values(ENV_PATH).items() if v is not None}

    for key in ("LOG_LEVEL", "DEFAULT_VIEW_MODE"):
        if key in vals:
            vals[key] = _strip_inline_comment(vals[key])
    settings = Settings.model_validate(vals)

    payload = settings.model_dump()
    for key in _PATH_SETTING_KEYS:
        payload[key] = _resolve_runtime_path(str(payload.get(key) or ""))
    return Settings.model_validate(payload)


def save_settings(settings: Settings) -> None:
    ENV_PATH.parent.mkdir(parents=True, exist_ok=True)
    lines = []
    for k, v in settings.model_dump().items():
        if isinstance(v, str) and k in _PATH_SETTING_KEYS:
            v = _to_storable_path(v)
        lines.append(f"{k}={v}")

    ENV_PATH.write_text("\n".join(lines) + "\n", encoding="utf-8")
