from types import MappingProxyType

from .catalogue import DEFAULT_MODELS
from .models import ModelCategory, ModelConfig, RegistryConfig


class ModelRegistry:
    """Static catalogue of completion models.

    This module hides where model metadata comes from. Lookups are pure and
    the registry is never mutated after construction, so one instance can be
    shared by every conversation.
    """

    def __init__(self, config: RegistryConfig):
        """Initialize the registry.

        Args:
            config: Registry configuration. An empty ``models`` tuple uses
                the built-in catalogue.

        Raises:
            ValueError: If the default model is not in the catalogue
        """
        self._config = config
        entries = config.models or DEFAULT_MODELS
        self._models = MappingProxyType({m.id: m for m in entries})
        if config.default_model not in self._models:
            raise ValueError(
                f"Default model {config.default_model!r} is not in the catalogue"
            )

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def default_model(self) -> ModelConfig:
        return self._models[self._config.default_model]

    @property
    def models(self) -> list[ModelConfig]:
        """All catalogue entries in declaration order."""
        return list(self._models.values())

    def get(self, model_id: str) -> ModelConfig | None:
        """Look up a model, returning None when unknown."""
        return self._models.get(model_id)

    def resolve(self, requested_id: str | None = None) -> ModelConfig:
        """Resolve a model id to its configuration.

        Absent or unknown ids fall back to the default model; this never
        raises.
        """
        if requested_id is not None:
            model = self._models.get(requested_id)
            if model is not None:
                return model
        return self.default_model

    def is_reasoning_capable(self, model_id: str) -> bool:
        """True iff the id is in the configured reasoning-capable set."""
        return model_id in self._config.reasoning_models

    def models_by_category(self, category: ModelCategory | str) -> list[ModelConfig]:
        category = ModelCategory(category)
        return [m for m in self._models.values() if m.category is category]
