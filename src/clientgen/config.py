"""Configuration and environment loading for clientgen."""

from pathlib import Path
from typing import Optional
import os

from pydantic import ValidationError

from .errors import ClientGenError
from .models import ClientGenConfig
from .storage import read_json, write_json

# Try to load dotenv if available
try:
    from dotenv import load_dotenv
    HAS_DOTENV = True
except ImportError:
    HAS_DOTENV = False


CONFIG_FILE = "clientgen.json"
TYPESCRIPT_DIR = "TypeScript"

# Environment overrides
ENV_FRAMEWORK_NAMESPACES = "CLIENTGEN_FRAMEWORK_NAMESPACES"
ENV_OUTPUT_DIR = "CLIENTGEN_OUTPUT_DIR"


class ConfigError(ClientGenError):
    """Raised when clientgen.json cannot be parsed."""


def load_env(base_path: Optional[Path] = None) -> bool:
    """Load environment variables from a .env file.

    Args:
        base_path: Directory to look for .env in. Defaults to cwd.

    Returns:
        True if a .env file was found and loaded, False otherwise.
    """
    if not HAS_DOTENV:
        return False

    env_file = (base_path or Path.cwd()) / ".env"
    if env_file.exists():
        load_dotenv(env_file)
        return True

    return False


def get_config_path(base_path: Optional[Path] = None) -> Path:
    """Get the clientgen.json path.

    Args:
        base_path: Project directory. Defaults to cwd.

    Returns:
        Path to clientgen.json.
    """
    if base_path is None:
        base_path = Path.cwd()
    return base_path / CONFIG_FILE


def read_config_data(config_file: Path) -> dict:
    """Read the raw settings object from a clientgen.json file.

    Raises:
        ConfigError: If the file is not valid JSON or its root is not an object.
    """
    try:
        loaded = read_json(config_file)
    except ValueError as e:
        raise ConfigError(f"Failed to parse {config_file.name}: {e}") from e
    if not isinstance(loaded, dict):
        raise ConfigError(f"{config_file.name} must contain an object at the root")
    return loaded


def load_config(base_path: Optional[Path] = None) -> ClientGenConfig:
    """Load clientgen.json, falling back to defaults when it is absent.

    Environment variables (possibly from .env) override file values.

    Args:
        base_path: Project directory. Defaults to cwd.

    Returns:
        The effective configuration.

    Raises:
        ConfigError: If the file exists but is not a valid configuration.
    """
    config_file = get_config_path(base_path)

    data = read_config_data(config_file) if config_file.exists() else {}

    try:
        config = ClientGenConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid {config_file.name}: {e}") from e

    return apply_env_overrides(config)


def apply_env_overrides(config: ClientGenConfig) -> ClientGenConfig:
    """Apply CLIENTGEN_* environment variables on top of a configuration."""
    updates: dict = {}

    namespaces = os.environ.get(ENV_FRAMEWORK_NAMESPACES)
    if namespaces:
        updates["framework_namespaces"] = [n.strip() for n in namespaces.split(",") if n.strip()]

    output_dir = os.environ.get(ENV_OUTPUT_DIR)
    if output_dir:
        updates["output_dir"] = output_dir

    return config.model_copy(update=updates) if updates else config


def save_config(config: ClientGenConfig, base_path: Optional[Path] = None) -> Path:
    """Write a configuration to clientgen.json and return its path."""
    config_file = get_config_path(base_path)
    write_json(config_file, config.model_dump())
    return config_file
