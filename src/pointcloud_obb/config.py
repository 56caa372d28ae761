"""
Configuration module for pointcloud-obb.

Loads configuration from a config.yaml file with Pydantic validation.
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel


class FitConfig(BaseModel):
    precision: Literal["float32", "float64"] = "float64"
    rank_tolerance: float = 1e-6  # relative to the largest covariance eigenvalue
    strict: bool = False  # raise instead of warn on rank-deficient covariance
    drop_non_finite: bool = True  # skip points with NaN/inf coordinates


class OutputConfig(BaseModel):
    format: Literal["text", "msgpack", "frame"] = "text"
    frame_precision: Literal["single", "double"] = "single"


class AppConfig(BaseModel):
    fit: FitConfig = FitConfig()
    output: OutputConfig = OutputConfig()
    debug: bool = False

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> "AppConfig":
        """Load configuration from a YAML file."""
        if path is None:
            return cls()

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        return cls(**data)
