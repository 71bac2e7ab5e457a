"""
Environment settings for Task Master.

API keys and endpoint overrides come from the process environment, topped up
from the project's ``.env`` file. Values already in the environment are never
overridden by ``.env``.
"""

import os
from pathlib import Path
from typing import Any, Optional, Union

from dotenv import load_dotenv

# Provider name -> environment variable holding its API key
PROVIDER_API_KEY_ENV = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "perplexity": "PERPLEXITY_API_KEY",
}

# Provider name -> environment variable holding an optional base URL override
PROVIDER_BASE_URL_ENV = {
    "anthropic": "ANTHROPIC_BASE_URL",
    "openai": "OPENAI_BASE_URL",
    "perplexity": "PERPLEXITY_BASE_URL",
}

_loaded_env_files = set()


def load_environment(project_root: Optional[Union[str, Path]] = None) -> bool:
    """
    Load ``.env`` from the project root (or the current directory).

    Args:
        project_root: Directory holding the ``.env`` file

    Returns:
        True if a ``.env`` file was found and loaded
    """
    env_path = Path(project_root or Path.cwd()) / ".env"
    if str(env_path) in _loaded_env_files:
        return True
    if not env_path.is_file():
        return False
    load_dotenv(env_path, override=False)
    _loaded_env_files.add(str(env_path))
    return True


def get_env(name: str, default: Optional[Any] = None) -> Any:
    """
    Get an environment variable with a default value.

    Args:
        name: Name of the environment variable
        default: Default value if the environment variable is not set

    Returns:
        Value of the environment variable or the default
    """
    return os.getenv(name, default)


def get_boolean_env(name: str, default: bool = False) -> bool:
    """
    Get a boolean environment variable.

    Args:
        name: Name of the environment variable
        default: Default value if the environment variable is not set

    Returns:
        Boolean value of the environment variable
    """
    value = os.getenv(name, str(default)).lower()
    return value in ("true", "1", "yes", "y", "t")


def get_api_key(provider: str) -> Optional[str]:
    """Return the API key configured for ``provider``, or None."""
    env_name = PROVIDER_API_KEY_ENV.get(provider.lower())
    if not env_name:
        return None
    value = os.getenv(env_name, "").strip()
    return value or None


def get_base_url(provider: str) -> Optional[str]:
    """Return the base URL override for ``provider``, or None."""
    env_name = PROVIDER_BASE_URL_ENV.get(provider.lower())
    if not env_name:
        return None
    value = os.getenv(env_name, "").strip()
    return value or None
