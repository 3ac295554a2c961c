"""
Configuration module for the downloader.

Provides:
- YAML config loading with environment variable substitution
- CLI / file / environment option layering
- Startup validation and checkpoint bootstrap
"""

from .loader import ConfigLoader, load_options, merge_options
from .settings import DownloaderConfig, build_config

__all__ = [
    "ConfigLoader",
    "load_options",
    "merge_options",
    "DownloaderConfig",
    "build_config",
]
