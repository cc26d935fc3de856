"""
Configuration management using Dynaconf and Pydantic.

Settings are loaded in layers from files (`settings.toml`, `.secrets.toml`) and
environment variables by Dynaconf, then validated by the `SpoticsSettings`
Pydantic model. `get_settings` returns a process-wide singleton.
"""

import json
import os
from pathlib import Path
from typing import Optional

import toml
from dynaconf import Dynaconf
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.console import Console

console = Console(stderr=True)

# User-scoped config directory (XDG-style)
USER_CONFIG_DIR = Path.home() / ".config" / "spotics"
USER_SETTINGS_FILE = USER_CONFIG_DIR / "settings.toml"
USER_SECRETS_FILE = USER_CONFIG_DIR / ".secrets.toml"
USER_CACHE_DIR = Path.home() / ".cache" / "spotics"

# Project-local settings (CWD) to support isolated runs and tests
LOCAL_SETTINGS_FILE = Path("settings.toml")

CATALOG_CACHE_FILE = "web_api.json"
LYRICS_CACHE_FILE = "web_player.json"

# Obfuscated TOTP secret of the web player (totpVer=5). Each byte is XOR-masked
# with (position % 33) + 9.
DEFAULT_TOTP_SECRET = [12, 56, 76, 33, 88, 44, 88, 33, 78, 78, 11, 66, 22, 22, 55, 69, 54]
DEFAULT_TOTP_VERSION = 5

settings_loader = Dynaconf(
    envvar_prefix="SPOTICS",
    # Later files override earlier ones
    settings_files=[
        str(USER_SETTINGS_FILE),
        str(USER_SECRETS_FILE),
        "settings.toml",
        ".secrets.toml",
    ],
    environments=True,
    load_dotenv=True,
)


class SpoticsSettings(BaseModel):
    """Validated application settings."""

    token_path: Path = Field(default_factory=lambda: USER_CONFIG_DIR / "token.json")
    cache_dir: Path = Field(default_factory=lambda: USER_CACHE_DIR)

    http_timeout: float = 20.0
    user_agent: str = "curl/8.5.0"
    lyrics_lang: str = "jpn"

    totp_secret: list[int] = Field(default_factory=lambda: list(DEFAULT_TOTP_SECRET))
    totp_version: int = DEFAULT_TOTP_VERSION

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    @property
    def catalog_cache_path(self) -> Path:
        return self.cache_dir / CATALOG_CACHE_FILE

    @property
    def lyrics_cache_path(self) -> Path:
        return self.cache_dir / LYRICS_CACHE_FILE


_settings_instance: Optional[SpoticsSettings] = None


def get_settings() -> SpoticsSettings:
    """Get the application settings as a singleton Pydantic model.

    Honors SPOTICS_SETTINGS_PATH when set: a JSON file layered on top of the
    Dynaconf sources (used by tests).
    """
    global _settings_instance
    if _settings_instance is None:
        config_dict: dict = {}

        # 1) Dynaconf loader (user + project scope, SPOTICS_* env vars)
        dc_dict = settings_loader.as_dict() or {}
        config_dict.update({str(k).lower(): v for k, v in dc_dict.items()})

        # 2) Explicit JSON override
        env_settings_path = os.getenv("SPOTICS_SETTINGS_PATH")
        if env_settings_path:
            p = Path(env_settings_path)
            if p.exists():
                try:
                    config_dict.update(json.loads(p.read_text(encoding="utf-8")) or {})
                except json.JSONDecodeError as e:
                    console.print(f"[yellow]Ignoring malformed settings file {p}:[/yellow] {e}")

        # 3) Explicit environment overrides
        env_token = os.getenv("SPOTICS_TOKEN_PATH")
        env_cache = os.getenv("SPOTICS_CACHE_DIR")
        if env_token:
            config_dict["token_path"] = env_token
        if env_cache:
            config_dict["cache_dir"] = env_cache

        try:
            _settings_instance = SpoticsSettings(**config_dict)
        except ValidationError as e:
            console.print(f"[red]Configuration error:[/red]\n{e}")
            raise

    return _settings_instance


def save_settings(new_settings: SpoticsSettings) -> Path:
    """Persist the path settings and return the file written.

    With SPOTICS_SETTINGS_PATH set the data goes there as JSON, otherwise to the
    user-scoped settings.toml.
    """
    global _settings_instance
    data = {
        "token_path": str(new_settings.token_path),
        "cache_dir": str(new_settings.cache_dir),
    }
    settings_loader.set("token_path", data["token_path"])
    settings_loader.set("cache_dir", data["cache_dir"])

    env_settings_path = os.getenv("SPOTICS_SETTINGS_PATH")
    if env_settings_path:
        target = Path(env_settings_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(data), encoding="utf-8")
    else:
        target = USER_SETTINGS_FILE
        existing: dict = {}
        if target.exists():
            existing = toml.loads(target.read_text(encoding="utf-8")) or {}
        existing.setdefault("default", {}).update(data)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(toml.dumps(existing), encoding="utf-8")

    _settings_instance = new_settings
    return target


def reset_settings() -> None:
    """Reset in-memory settings (on-disk settings are kept)."""
    global _settings_instance
    _settings_instance = None
