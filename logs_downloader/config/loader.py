"""
YAML configuration loader and option layering.

Loads downloader options with:
- Environment variable substitution inside the YAML file
- Environment fallbacks for credentials and URL
- CLI > file > environment > default precedence
"""

import os
import re
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
import structlog

from logs_downloader.core.errors import ConfigError

logger = structlog.get_logger(__name__)


OPTION_KEYS = (
    "auth_email",
    "auth_key",
    "url",
    "start",
    "max_age",
    "end",
    "interval",
    "dir",
    "align",
    "metadata",
    "timeout",
)

# Options that may come from the environment when not set elsewhere
ENV_OPTIONS = {
    "auth_email": "LOGS_AUTH_EMAIL",
    "auth_key": "LOGS_AUTH_KEY",
    "url": "LOGS_URL",
}


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variables in text.

    Supports formats:
    - ${VAR_NAME} - replaced by empty string (with a warning) if missing
    - ${VAR_NAME:-default} - optional with default

    Args:
        text: Text with env var placeholders

    Returns:
        Text with substituted values
    """
    def replace(match):
        var_expr = match.group(1)
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)
        else:
            value = os.getenv(var_expr)
            if value is None:
                logger.warning("env_var_not_set", var=var_expr)
                return ""
            return value

    return re.sub(r"\$\{([^}]+)\}", replace, text)


class ConfigLoader:
    """
    Loads downloader options from a YAML file.

    Keys use the option names from OPTION_KEYS; dashes are accepted in
    place of underscores.
    """

    def load_file(self, filepath: str) -> dict:
        """
        Load YAML config file.

        Args:
            filepath: Path to the YAML file

        Returns:
            Dict of recognized options

        Raises:
            ConfigError: If the file is missing, unreadable or malformed
        """
        path = Path(filepath)

        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        logger.info("loading_config", file=str(path))

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"Failed to read config file ({path}): {e}") from e

        content = substitute_env_vars(content)

        try:
            config = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing config file ({path}): {e}") from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigError(f"Config file ({path}) must contain a mapping")

        return self._normalize(config)

    def _normalize(self, data: dict) -> dict:
        options = {}
        for raw_key, value in data.items():
            key = str(raw_key).replace("-", "_")
            if key not in OPTION_KEYS:
                logger.warning("unknown_config_key", key=raw_key)
                continue
            options[key] = value
        return options


def env_options(environ: Optional[Mapping[str, str]] = None) -> dict:
    """Collect options provided through environment variables."""
    environ = os.environ if environ is None else environ
    options = {}
    for key, var in ENV_OPTIONS.items():
        value = environ.get(var)
        if value:
            options[key] = value
    return options


def merge_options(*layers: Optional[Mapping[str, Any]]) -> dict:
    """
    Merge option layers, earlier layers winning.

    None values never override, so unset CLI flags fall through to the
    file and environment layers.
    """
    merged: dict = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if value is None or key in merged:
                continue
            merged[key] = value
    return merged


def load_options(
    cli_options: Mapping[str, Any],
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> dict:
    """
    Convenience function producing the layered option dict.

    Args:
        cli_options: Options parsed from the command line
        config_path: Optional path to a YAML config file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Merged options, CLI taking precedence
    """
    file_options = ConfigLoader().load_file(config_path) if config_path else {}
    return merge_options(cli_options, file_options, env_options(environ))
