"""Model configuration command"""

from typing import Optional

import click

from task_master.config.models_catalog import ModelCatalog, find_model, load_model_catalog
from task_master.config.project_config import (
    load_project_config,
    set_fallback_model,
    set_main_model,
    set_research_model,
)
from task_master.exceptions import InvalidModelIdError, SetModelFailedError
from task_master.ui.display import display_models
from task_master.utils.logging import get_logger

from ..utils import get_project_root, success_message

logger = get_logger(__name__)


def validate_model_choice(catalog: ModelCatalog, role: str, model_id: str) -> str:
    """
    Check ``model_id`` against the catalog for ``role``.

    Returns:
        The provider serving the model

    Raises:
        InvalidModelIdError: If the id is blank, unknown, or not allowed for the role
    """
    if not model_id or not model_id.strip():
        raise InvalidModelIdError(model_id, role, f"Model ID for {role} role cannot be empty.")
    model = find_model(catalog, model_id)
    if model is None:
        raise InvalidModelIdError(model_id, role)
    if not model.allows_role(role):
        raise InvalidModelIdError(
            model_id,
            role,
            f'Model ID "{model_id}" cannot be used for the {role} role '
            f"(allowed: {', '.join(model.allowed_roles)}).",
        )
    return model.provider


@click.command()
@click.option("--set-main", "set_main", help="Set the primary model for task operations")
@click.option("--set-research", "set_research", help="Set the model for research-backed operations")
@click.option("--set-fallback", "set_fallback", help="Set the model used when the primary fails")
@click.pass_context
def models(ctx, set_main: Optional[str], set_research: Optional[str], set_fallback: Optional[str]):
    """View the model configuration or bind models to roles"""
    project_root = get_project_root(ctx)
    catalog = load_model_catalog()

    requested = [
        ("main", set_main, set_main_model),
        ("research", set_research, set_research_model),
        ("fallback", set_fallback, set_fallback_model),
    ]

    if all(model_id is None for _, model_id, _ in requested):
        display_models(load_project_config(project_root), catalog)
        return

    for role, model_id, setter in requested:
        if model_id is None:
            continue
        provider = validate_model_choice(catalog, role, model_id)
        logger.debug(f"Setting {role} model to {provider}/{model_id}")
        if not setter(provider, model_id, project_root=project_root):
            raise SetModelFailedError(role, model_id)
        success_message(f"{role.capitalize()} model set to: {model_id} (Provider: {provider})")
