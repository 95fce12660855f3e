"""
Configuration loading.

Reads config.yaml, substitutes environment variables and decodes the
result into the AppConfig struct tree.

Supported substitution syntax:
    ${VAR_NAME}            - environment variable (empty if unset)
    ${VAR_NAME:default}    - environment variable with default

Usage:
    from config import load_config

    config = load_config()                 # searches the usual locations
    config = load_config("config.yaml")    # explicit path
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import msgspec
import yaml
from dotenv import load_dotenv

from infrastructure.exceptions.system import ConfigurationError
from infrastructure.logging import get_logger
from .structs import AppConfig

_ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')
_ERROR_PATH_PATTERN = re.compile(r'at `\$\.([^`]+)`')

logger = get_logger("config")


def _default_config_paths() -> List[Path]:
    return [
        Path.cwd() / 'config.yaml',
        Path(__file__).parent.parent.parent / 'config.yaml',  # Project root
        Path(__file__).parent.parent / 'config.yaml',         # src directory
    ]


def load_env_file(env_path: Optional[Path] = None) -> bool:
    """
    Load variables from a .env file without overriding the real environment.

    Tries the project root and the working directory when no path is given.
    """
    candidates = [env_path] if env_path else [
        Path(__file__).parent.parent.parent / '.env',
        Path.cwd() / '.env',
    ]
    for candidate in candidates:
        if candidate.exists():
            load_dotenv(dotenv_path=candidate, override=False)
            logger.debug("Loaded environment variables", path=str(candidate))
            return True
    return False


def substitute_env_vars(content: str) -> str:
    """Substitute ${VAR} and ${VAR:default} in raw configuration text."""

    def replace_var(match):
        var_expr = match.group(1)

        if ':' in var_expr:
            var_name, default_value = var_expr.split(':', 1)
            env_value = os.getenv(var_name.strip())
            return default_value if env_value is None else env_value

        var_name = var_expr.strip()
        env_value = os.getenv(var_name)
        if env_value is None:
            logger.warning("Environment variable not set - using empty value", variable=var_name)
            return ""
        return env_value

    return _ENV_VAR_PATTERN.sub(replace_var, content)


def parse_config(data: Dict[str, Any]) -> AppConfig:
    """Decode a plain mapping into AppConfig and validate it."""
    try:
        config = msgspec.convert(data or {}, AppConfig, strict=False)
    except msgspec.ValidationError as e:
        path = _ERROR_PATH_PATTERN.search(str(e))
        raise ConfigurationError(f"Invalid configuration: {e}", setting_name=path.group(1) if path else None)

    try:
        config.validate()
    except ValueError as e:
        raise ConfigurationError(str(e))
    return config


def load_config(path: Optional[Union[str, Path]] = None, env_file: bool = True) -> AppConfig:
    """
    Load AppConfig from YAML.

    Raises:
        ConfigurationError: file missing, unreadable YAML, or invalid values
    """
    if env_file:
        load_env_file()

    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}", setting_name="path")
    else:
        config_path = next((p for p in _default_config_paths() if p.exists()), None)
        if config_path is None:
            raise ConfigurationError(
                f"No config.yaml found. Searched paths: {[str(p) for p in _default_config_paths()]}"
            )

    try:
        raw_content = config_path.read_text(encoding='utf-8')
        data = yaml.safe_load(substitute_env_vars(raw_content))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {config_path}: {e}")

    config = parse_config(data)
    logger.info("Configuration loaded",
                path=str(config_path),
                environment=config.environment,
                sources=len(config.enabled_sources()))
    return config
