"""Data models for the model registry."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ModelCategory(str, Enum):
    """Catalogue grouping for selectable models."""

    FOUNDATION = "Foundation"
    REASONING = "Reasoning"


class ModelSpecs(BaseModel):
    """Human-oriented size and performance descriptors."""

    model_config = ConfigDict(frozen=True)

    parameters: str
    context_window: str
    latency: str
    throughput: str


class ModelConfig(BaseModel):
    """One selectable completion model.

    Reasoning-category models are always reasoning-capable; a catalogue
    entry that says otherwise is rejected at construction.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Identifier sent to the completion endpoint")
    name: str = Field(description="Display name")
    category: ModelCategory = ModelCategory.FOUNDATION
    description: str = ""
    badge: str | None = None
    specs: ModelSpecs | None = None
    reasoning_capable: bool = False
    recommended: tuple[str, ...] = ()
    use_cases: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _reasoning_category_is_capable(self) -> "ModelConfig":
        if self.category is ModelCategory.REASONING and not self.reasoning_capable:
            raise ValueError(
                f"model {self.id!r} is in the Reasoning category but not reasoning-capable"
            )
        return self


class RegistryConfig(BaseModel):
    """Static configuration for a ModelRegistry.

    Attributes:
        default_model: Id returned by resolve() for absent or unknown ids
        reasoning_models: Ids whose output may carry a reasoning trace
        default_temperature: Sampling temperature for new requests
        default_max_tokens: Completion token limit for new requests
        models: Catalogue entries
    """

    model_config = ConfigDict(frozen=True)

    default_model: str = "llama-3.3-70b-versatile"
    reasoning_models: frozenset[str] = frozenset({
        "qwen-qwq-32b",
        "deepseek-r1-distill-qwen-32b",
        "deepseek-r1-distill-llama-70b",
    })
    default_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    default_max_tokens: int = Field(default=4096, gt=0)
    models: tuple[ModelConfig, ...] = ()
