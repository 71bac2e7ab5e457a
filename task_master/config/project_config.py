"""
Project configuration stored in ``.taskmasterconfig``.

The file is optional. A missing or malformed file yields the defaults; it is
never an error. Setters are pure: they take a ProjectConfig and return a new
one. ``write_project_config`` is the single writer for the file.
"""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from task_master.config.models_catalog import ROLES, find_model, load_model_catalog
from task_master.utils.logging import get_logger

logger = get_logger(__name__)

CONFIG_FILENAME = ".taskmasterconfig"

DEFAULT_MODELS = {
    "main": {
        "provider": "anthropic",
        "modelId": "claude-3-7-sonnet-20250219",
        "maxTokens": 64000,
        "temperature": 0.2,
    },
    "research": {
        "provider": "perplexity",
        "modelId": "sonar-pro",
        "maxTokens": 8700,
        "temperature": 0.1,
    },
    "fallback": {
        "provider": "anthropic",
        "modelId": "claude-3-5-sonnet-20241022",
        "maxTokens": 8192,
        "temperature": 0.2,
    },
}


@dataclass(frozen=True)
class ModelBinding:
    """Provider/model pair bound to one role."""

    provider: str
    model_id: str
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default: "ModelBinding") -> "ModelBinding":
        return cls(
            provider=data.get("provider") or default.provider,
            model_id=data.get("modelId") or default.model_id,
            max_tokens=data.get("maxTokens", default.max_tokens),
            temperature=data.get("temperature", default.temperature),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"provider": self.provider, "modelId": self.model_id}
        if self.max_tokens is not None:
            data["maxTokens"] = self.max_tokens
        if self.temperature is not None:
            data["temperature"] = self.temperature
        return data


def _default_binding(role: str) -> ModelBinding:
    return ModelBinding.from_dict(DEFAULT_MODELS[role], ModelBinding("", ""))


@dataclass(frozen=True)
class GlobalSettings:
    """The ``global`` section of the config file."""

    log_level: str = "info"
    debug: bool = False
    default_subtasks: int = 5
    default_priority: str = "medium"
    project_name: str = "Task Master"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GlobalSettings":
        defaults = cls()
        default_subtasks = data.get("defaultSubtasks", defaults.default_subtasks)
        try:
            default_subtasks = int(default_subtasks)
        except (TypeError, ValueError):
            logger.warning(
                f"Invalid defaultSubtasks value {default_subtasks!r}; using {defaults.default_subtasks}"
            )
            default_subtasks = defaults.default_subtasks
        return cls(
            log_level=str(data.get("logLevel", defaults.log_level)),
            debug=bool(data.get("debug", defaults.debug)),
            default_subtasks=default_subtasks,
            default_priority=str(data.get("defaultPriority", defaults.default_priority)),
            project_name=str(data.get("projectName", defaults.project_name)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "logLevel": self.log_level,
            "debug": self.debug,
            "defaultSubtasks": self.default_subtasks,
            "defaultPriority": self.default_priority,
            "projectName": self.project_name,
        }


@dataclass(frozen=True)
class ProjectConfig:
    """Complete contents of ``.taskmasterconfig``."""

    models: Dict[str, ModelBinding] = field(
        default_factory=lambda: {role: _default_binding(role) for role in ROLES}
    )
    global_settings: GlobalSettings = field(default_factory=GlobalSettings)
    complexity_report_path: Optional[str] = None
    # Sections and keys this version does not model, kept for rewrites
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectConfig":
        raw_models = data.get("models") if isinstance(data.get("models"), dict) else {}
        models = {}
        for role in ROLES:
            section = raw_models.get(role)
            if isinstance(section, dict):
                models[role] = ModelBinding.from_dict(section, _default_binding(role))
            else:
                models[role] = _default_binding(role)

        raw_global = data.get("global") if isinstance(data.get("global"), dict) else {}
        raw_paths = data.get("paths") if isinstance(data.get("paths"), dict) else {}
        report_path = raw_paths.get("complexityReport")
        if not isinstance(report_path, str) or not report_path.strip():
            report_path = None

        return cls(
            models=models,
            global_settings=GlobalSettings.from_dict(raw_global),
            complexity_report_path=report_path,
            extra=json.loads(json.dumps(data)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = json.loads(json.dumps(self.extra))

        models = data.get("models") if isinstance(data.get("models"), dict) else {}
        for role in ROLES:
            models[role] = self.models[role].to_dict()
        data["models"] = models

        global_section = data.get("global") if isinstance(data.get("global"), dict) else {}
        global_section.update(self.global_settings.to_dict())
        data["global"] = global_section

        paths = data.get("paths") if isinstance(data.get("paths"), dict) else {}
        if self.complexity_report_path:
            paths["complexityReport"] = self.complexity_report_path
        else:
            paths.pop("complexityReport", None)
        if paths:
            data["paths"] = paths
        else:
            data.pop("paths", None)
        return data

    def model_id(self, role: str) -> str:
        return self.models[role].model_id

    def provider(self, role: str) -> str:
        return self.models[role].provider


def config_path(project_root: Union[str, Path]) -> Path:
    return Path(project_root) / CONFIG_FILENAME


def read_config_file(project_root: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """
    Read the raw config mapping.

    Returns:
        The parsed JSON object, or None when the file is absent, unreadable,
        malformed, or not a JSON object
    """
    path = config_path(project_root)
    if not path.is_file():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.debug(f"Ignoring unreadable config {path}: {e}")
        return None
    if not isinstance(data, dict):
        logger.debug(f"Ignoring config {path}: top level is not an object")
        return None
    return data


def load_project_config(project_root: Union[str, Path]) -> ProjectConfig:
    """Load ``.taskmasterconfig``; defaults when it is missing or malformed."""
    data = read_config_file(project_root)
    if data is None:
        return ProjectConfig()
    return ProjectConfig.from_dict(data)


def write_project_config(project_root: Union[str, Path], config: ProjectConfig) -> bool:
    """
    Persist ``config`` as the whole ``.taskmasterconfig`` file.

    Returns:
        True on success, False if the file could not be written
    """
    path = config_path(project_root)
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
            f.write("\n")
    except OSError as e:
        logger.error(f"Failed to write config {path}: {e}")
        return False
    return True


def with_model(
    config: ProjectConfig,
    role: str,
    provider: str,
    model_id: str,
    max_tokens: Optional[int] = None,
) -> ProjectConfig:
    """Return a copy of ``config`` with ``role`` bound to ``provider/model_id``."""
    if role not in ROLES:
        raise ValueError(f"Unknown model role: {role}")
    current = config.models[role]
    binding = ModelBinding(
        provider=provider,
        model_id=model_id,
        max_tokens=max_tokens if max_tokens is not None else current.max_tokens,
        temperature=current.temperature,
    )
    models = dict(config.models)
    models[role] = binding
    return replace(config, models=models)


def set_model(
    role: str, provider: str, model_id: str, project_root: Union[str, Path, None] = None
) -> bool:
    """
    Bind ``role`` to ``provider/model_id`` and persist the config.

    Returns:
        True if the config file was written
    """
    project_root = Path(project_root or Path.cwd())
    config = load_project_config(project_root)
    model = find_model(load_model_catalog(), model_id)
    updated = with_model(
        config, role, provider, model_id, max_tokens=model.max_tokens if model else None
    )
    return write_project_config(project_root, updated)


def set_main_model(provider: str, model_id: str, project_root=None) -> bool:
    return set_model("main", provider, model_id, project_root)


def set_research_model(provider: str, model_id: str, project_root=None) -> bool:
    return set_model("research", provider, model_id, project_root)


def set_fallback_model(provider: str, model_id: str, project_root=None) -> bool:
    return set_model("fallback", provider, model_id, project_root)
