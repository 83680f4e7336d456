from typing import Any

from .models import RegistryConfig
from .registry import ModelRegistry


def create_model_registry(config: RegistryConfig | None = None, **overrides: Any) -> ModelRegistry:
    """Create a model registry.

    Args:
        config: Registry configuration (defaults to the built-in catalogue)
        **overrides: Field overrides applied on top of ``config``

    Returns:
        ModelRegistry instance

    Examples:
        >>> registry = create_model_registry(default_model="gemma2-9b-it")
        >>> registry.resolve("no-such-model").id
        'gemma2-9b-it'
    """
    base = config or RegistryConfig()
    if overrides:
        base = RegistryConfig.model_validate({**base.model_dump(), **overrides})
    return ModelRegistry(base)
