"""Configuration loading and validation."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

from . import __version__
from .tokenizer import TOKENIZERS


class CWBSettings(BaseModel):
    """Where the corpus workbench keeps its data and tools."""
    registry: Optional[str] = None
    corpora: str = "/corpora"
    bin_dir: Optional[str] = None
    charset: str = "utf8"
    timeout: Optional[int] = Field(default=None, gt=0)


class ImportSettings(BaseModel):
    """TMX to corpus conversion."""
    tokenize_source: bool = False
    tokenize_target: bool = False
    tokenizer: str = "toktok"
    keep_staging: bool = False
    work_dir: str = "."
    progress_interval: int = Field(default=1000, ge=0)

    @field_validator("tokenizer")
    @classmethod
    def known_tokenizer(cls, value: str) -> str:
        if value not in TOKENIZERS:
            raise ValueError(f"unknown tokenizer '{value}' (choose from: {', '.join(sorted(TOKENIZERS))})")
        return value


class ExportSettings(BaseModel):
    """Corpus to TMX conversion."""
    tool_name: str = "tmx-cwb"
    tool_version: str = __version__
    word_attribute: str = "word"


class Settings(BaseModel):
    cwb: CWBSettings = Field(default_factory=CWBSettings)
    tmx2cwb: ImportSettings = Field(default_factory=ImportSettings)
    cwb2tmx: ExportSettings = Field(default_factory=ExportSettings)


def default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        "cwb": {
            "registry": "${CORPUS_REGISTRY}",
            "corpora": "/corpora",
            "bin_dir": "${CWB_BIN_DIR}",
            "charset": "utf8",
            "timeout": None,
        },
        "tmx2cwb": {
            "tokenize_source": False,
            "tokenize_target": False,
            "tokenizer": "toktok",
            "keep_staging": False,
            "work_dir": ".",
            "progress_interval": 1000,
        },
        "cwb2tmx": {
            "tool_name": "tmx-cwb",
            "tool_version": __version__,
            "word_attribute": "word",
        },
    }


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _expand(value: Any) -> Any:
    """Replace ``${VAR}`` strings with the environment value (None if unset)."""
    if isinstance(value, dict):
        return {key: _expand(item) for key, item in value.items()}
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        return os.getenv(value[2:-1]) or None
    return value


def load_config(config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """Load settings from defaults, an optional YAML file and overrides.

    A ``.env`` file in the working directory is read first so it can
    provide ``CORPUS_REGISTRY`` and ``CWB_BIN_DIR``.

    Args:
        config_path: Path to config YAML file
        overrides: Nested mapping applied last (e.g. from the command line)

    Returns:
        Validated Settings

    Raises:
        pydantic.ValidationError: If a value has the wrong type or range
    """
    load_dotenv(find_dotenv(usecwd=True))

    config = default_config()
    if config_path and Path(config_path).exists():
        with open(config_path, 'r', encoding='utf-8') as f:
            config = _merge(config, yaml.safe_load(f) or {})
    if overrides:
        config = _merge(config, overrides)

    return Settings.model_validate(_expand(config))
