"""
Configuration loader for gemini-bridge.
Loads settings from settings.toml, environment overrides, and defaults.
"""
from __future__ import annotations

import os
import tempfile
import tomllib
from dataclasses import dataclass, field
from pathlib import Path


DEFAULT_COMMAND = "gemini"
DEFAULT_FALLBACK_MODEL = "gemini-2.5-flash"


def _default_cache_dir() -> Path:
    return Path(tempfile.gettempdir()) / "gemini-bridge-chunks"


@dataclass
class Settings:
    gemini_command: str = DEFAULT_COMMAND
    fallback_model: str = DEFAULT_FALLBACK_MODEL
    timeout_seconds: float = 600.0
    cache_dir: Path = field(default_factory=_default_cache_dir)
    chunk_ttl_seconds: int = 600
    chunk_max_files: int = 50
    chunk_max_chars: int = 20000
    data_dir: Path = Path("data")
    log_level: str = "INFO"
    console_log_level: str = "WARNING"


def load_settings(config_path: Path | None = None) -> Settings:
    config_file = config_path or Path("config/settings.toml")
    data = {}
    if config_file.exists():
        with config_file.open("rb") as f:
            data = tomllib.load(f)

    command = os.getenv("GEMINI_BRIDGE_COMMAND", data.get("gemini_command", DEFAULT_COMMAND))
    fallback_model = os.getenv("GEMINI_BRIDGE_FALLBACK_MODEL", data.get("fallback_model", DEFAULT_FALLBACK_MODEL))
    timeout_seconds = float(os.getenv("GEMINI_BRIDGE_TIMEOUT", data.get("timeout_seconds", 600)))
    cache_dir = Path(os.getenv("GEMINI_BRIDGE_CACHE_DIR", data.get("cache_dir", _default_cache_dir())))
    chunk_ttl = int(os.getenv("GEMINI_BRIDGE_CHUNK_TTL", data.get("chunk_ttl_seconds", 600)))
    chunk_max_files = int(os.getenv("GEMINI_BRIDGE_CHUNK_MAX_FILES", data.get("chunk_max_files", 50)))
    chunk_max_chars = int(os.getenv("GEMINI_BRIDGE_CHUNK_MAX_CHARS", data.get("chunk_max_chars", 20000)))
    data_dir = Path(os.getenv("GEMINI_BRIDGE_DATA_DIR", data.get("data_dir", "data")))
    log_level = os.getenv("GEMINI_BRIDGE_LOG_LEVEL", data.get("log_level", "INFO"))
    console_log_level = os.getenv("GEMINI_BRIDGE_CONSOLE_LOG_LEVEL", data.get("console_log_level", "WARNING"))

    return Settings(
        gemini_command=command,
        fallback_model=fallback_model,
        timeout_seconds=timeout_seconds,
        cache_dir=cache_dir,
        chunk_ttl_seconds=chunk_ttl,
        chunk_max_files=chunk_max_files,
        chunk_max_chars=chunk_max_chars,
        data_dir=data_dir,
        log_level=log_level,
        console_log_level=console_log_level,
    )
