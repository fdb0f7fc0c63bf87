"""
Configuration management for landmark-registration.

Provides a typed pydantic model and YAML loader with sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Literal, Any, Dict

from pydantic import BaseModel, Field, ValidationError
import yaml

from ..acceleration.parallel_executor import ParallelExecutor


# -----------------------
# Typed config structures
# -----------------------


class RegistrationConfig(BaseModel):
    overlap_threshold: int = Field(
        default=12,
        ge=2,
        description="Number of shared landmarks required before a transform is accepted",
    )
    anchor_id: int = Field(
        default=0,
        ge=0,
        description="Sensor id whose frame becomes the global frame",
    )


class ParallelConfig(BaseModel):
    enabled: bool = Field(default=False, description="Fan correspondence lookups out to worker processes")
    n_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Number of worker processes (None = auto-detect: cpu_count - 1)",
    )


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    file: Optional[str] = Field(default=None)


class AppConfig(BaseModel):
    registration: RegistrationConfig = Field(default_factory=RegistrationConfig)
    parallel: ParallelConfig = Field(default_factory=ParallelConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# -----------------------
# Loader
# -----------------------


def _project_root() -> Path:
    """
    Resolve the repository root directory.

    File is at: repo_root/src/landmark_registration/utils/config.py
    parents sequence:
      0 -> .../src/landmark_registration/utils
      1 -> .../src/landmark_registration
      2 -> .../src
      3 -> repo_root
    """
    return Path(__file__).resolve().parents[3]


def load_config(path: Optional[str | Path] = None, *, allow_missing: bool = True) -> AppConfig:
    """
    Load configuration from YAML into a typed AppConfig.

    Search order when path is None:
    1) repo_root/config/default.yaml
    2) if missing and allow_missing=True: return default AppConfig()

    Relative paths are tried against the working directory first, then
    against the repository root.

    Args:
        path: Explicit YAML file path.
        allow_missing: If True, returns defaults when file missing; otherwise raises.

    Returns:
        AppConfig instance
    """
    cfg_path: Path
    if path is None:
        cfg_path = _project_root() / "config" / "default.yaml"
    else:
        cfg_path = Path(path)
        if not cfg_path.is_absolute() and not cfg_path.exists():
            cfg_path = _project_root() / cfg_path

    if not cfg_path.exists():
        if allow_missing:
            return AppConfig()
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    with cfg_path.open("r", encoding="utf-8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        # Re-raise with context to help users fix the YAML
        raise ValueError(f"Invalid configuration in {cfg_path}: {e}")


def build_executor(cfg: AppConfig) -> Optional[ParallelExecutor]:
    """Return a ParallelExecutor when parallel lookups are enabled, else None."""
    if not cfg.parallel.enabled:
        return None
    return ParallelExecutor(n_workers=cfg.parallel.n_workers)
