"""
Configuration package for Task Master.

Project settings live in ``.taskmasterconfig``; secrets and endpoint
overrides live in the environment (optionally loaded from ``.env``).
"""

from .models_catalog import ModelInfo, find_model, find_provider, load_model_catalog
from .project_config import (
    CONFIG_FILENAME,
    ProjectConfig,
    load_project_config,
    read_config_file,
    set_fallback_model,
    set_main_model,
    set_research_model,
    write_project_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ModelInfo",
    "ProjectConfig",
    "find_model",
    "find_provider",
    "load_model_catalog",
    "load_project_config",
    "read_config_file",
    "set_fallback_model",
    "set_main_model",
    "set_research_model",
    "write_project_config",
]
