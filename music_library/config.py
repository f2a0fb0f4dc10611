from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class LibrarySettings(BaseModel):
    data_file: Path = Path("library.json")
    indent: int = Field(default=2, ge=0)
    encoding: str = "utf-8"

    @field_validator("data_file", mode="before")
    @classmethod
    def _expand_data_file(cls, value: str | Path) -> Path:
        return Path(value).expanduser()


class LoggingSettings(BaseModel):
    level: str = "WARNING"
    warning_log: Optional[Path] = None

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @field_validator("warning_log", mode="before")
    @classmethod
    def _expand_warning_log(cls, value: Optional[str | Path]) -> Optional[Path]:
        if value is None:
            return None
        return Path(value).expanduser()


class Settings(BaseModel):
    library: LibrarySettings = LibrarySettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    return None
