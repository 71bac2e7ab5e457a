"""
Catalog of the AI models Task Master knows how to call.

The catalog ships with the package as ``supported_models.json`` and is read
once per process. It is small, so lookups are plain linear scans.
"""

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple

CATALOG_FILE = Path(__file__).parent / "supported_models.json"

ROLES = ("main", "research", "fallback")


@dataclass(frozen=True)
class ModelInfo:
    """One model entry in the catalog."""

    id: str
    name: str
    provider: str
    allowed_roles: Tuple[str, ...] = ROLES
    max_tokens: Optional[int] = None
    cost_per_1m: Dict[str, float] = field(default_factory=dict, compare=False)

    def allows_role(self, role: str) -> bool:
        return role in self.allowed_roles

    def cost_for(self, input_tokens: int, output_tokens: int) -> float:
        """Cost in USD for a request of the given size."""
        input_cost = self.cost_per_1m.get("input", 0.0) * input_tokens / 1_000_000
        output_cost = self.cost_per_1m.get("output", 0.0) * output_tokens / 1_000_000
        return round(input_cost + output_cost, 6)


ModelCatalog = Tuple[ModelInfo, ...]


def parse_catalog(data: Dict[str, list]) -> ModelCatalog:
    """Build catalog records from the ``{provider: [model, ...]}`` mapping."""
    models = []
    for provider, entries in data.items():
        for entry in entries:
            models.append(
                ModelInfo(
                    id=entry["id"],
                    name=entry.get("name") or entry["id"],
                    provider=provider,
                    allowed_roles=tuple(entry.get("allowed_roles") or ROLES),
                    max_tokens=entry.get("max_tokens"),
                    cost_per_1m=dict(entry.get("cost_per_1m") or {}),
                )
            )
    return tuple(models)


@lru_cache(maxsize=None)
def _load_catalog_file(path: str) -> ModelCatalog:
    with open(path, encoding="utf-8") as f:
        return parse_catalog(json.load(f))


def load_model_catalog(path: Optional[Path] = None) -> ModelCatalog:
    """
    Load the model catalog.

    Args:
        path: Alternative catalog file; defaults to the packaged one

    Returns:
        Immutable tuple of ModelInfo records
    """
    return _load_catalog_file(str(path or CATALOG_FILE))


def find_model(catalog: ModelCatalog, model_id: str) -> Optional[ModelInfo]:
    """Return the catalog entry for ``model_id``, or None."""
    for model in catalog:
        if model.id == model_id:
            return model
    return None


def find_provider(catalog: ModelCatalog, model_id: str) -> Optional[str]:
    """Return the provider serving ``model_id``, or None."""
    model = find_model(catalog, model_id)
    return model.provider if model else None
