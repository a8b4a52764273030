"""
Loading and validation of the crawl configuration.
Pydantic describes the schema and checks the data; YAML and JSON files are accepted.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; FlattenDocBot/1.0)"


class CrawlConfig(BaseModel):
    """Configuration of a single flatten run. Immutable once built."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    parallelism: int = Field(2, ge=1, description="Max concurrent page fetches.")
    politeness_delay: float = Field(
        0.5, ge=0, description="Upper bound of the random pause before each request (seconds)."
    )
    allowed_domains: Tuple[str, ...] = Field(
        ("pkg.go.dev",), description="Hostnames eligible for page fetches; empty allows all."
    )
    max_retries: int = Field(3, ge=0, description="Extra attempts after the first failure.")
    timeout: float = Field(30.0, gt=0, description="Timeout of one request (seconds).")
    retry_backoff: float = Field(0.5, ge=0, description="Backoff unit between retries (seconds).")
    source_extensions: Tuple[str, ...] = Field(
        (".go",), min_length=1, description="Suffixes of downloadable source files."
    )
    source_parallelism: Optional[int] = Field(
        None, ge=1, description="Cap on concurrent source downloads; None means unbounded."
    )

    @field_validator("allowed_domains", mode="before")
    def _normalize_domains(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple, set, frozenset)):
            return tuple(d.strip().lower() for d in v if isinstance(d, str) and d.strip())
        return v

    @field_validator("source_extensions", mode="before")
    def _dot_extensions(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple, set, frozenset)):
            return tuple(e if e.startswith(".") else f".{e}" for e in v if isinstance(e, str) and e)
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Read YAML or JSON and return a validated CrawlConfig.

    Without a path, ``configs/default.yaml`` is used when it exists and the
    built-in defaults otherwise. An explicit path that does not exist raises
    FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return CrawlConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return CrawlConfig(**data)


__all__ = ["CrawlConfig", "load_config", "DEFAULT_USER_AGENT"]
