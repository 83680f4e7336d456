"""Model registry module.

Hides the catalogue of selectable completion models and how an id is
resolved to a model configuration.
"""

from .catalogue import DEFAULT_MODELS
from .factory import create_model_registry
from .models import ModelCategory, ModelConfig, ModelSpecs, RegistryConfig
from .registry import ModelRegistry

__all__ = [
    "DEFAULT_MODELS",
    "ModelCategory",
    "ModelConfig",
    "ModelRegistry",
    "ModelSpecs",
    "RegistryConfig",
    "create_model_registry",
]
