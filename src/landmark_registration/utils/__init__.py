"""
Utility Functions Module

This module provides common utilities used across the landmark registration project.
- Logging setup
- YAML configuration loading
"""

from .logging import setup_logger, configure_package_logging
from .config import (
    AppConfig,
    RegistrationConfig,
    ParallelConfig,
    LoggingConfig,
    load_config,
    build_executor,
)

__all__ = [
    "setup_logger",
    "configure_package_logging",
    "AppConfig",
    "RegistrationConfig",
    "ParallelConfig",
    "LoggingConfig",
    "load_config",
    "build_executor",
]
