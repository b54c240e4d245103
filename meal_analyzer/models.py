"""Registry of hosted model profiles."""

from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

DEFAULT_MODEL = "primary"


class CostTier(str, Enum):
    VERY_LOW = "very_low"
    LOW = "low"
    MEDIUM = "medium"


@dataclass(frozen=True)
class ModelProfile:
    identifier: str
    max_output_tokens: int
    sampling_temperature: float
    cost_tier: CostTier
    strengths: Tuple[str, ...] = ()


DEFAULT_PROFILES = {
    # Best food classification accuracy
    "primary": ModelProfile(
        identifier="anthropic/claude-3.5-sonnet",
        max_output_tokens=1000,
        sampling_temperature=0.3,
        cost_tier=CostTier.MEDIUM,
        strengths=("food_classification", "nutrition_analysis", "multilingual"),
    ),
    "backup": ModelProfile(
        identifier="openai/gpt-4o",
        max_output_tokens=1000,
        sampling_temperature=0.3,
        cost_tier=CostTier.LOW,
        strengths=("recipe_generation", "food_composition", "speed"),
    ),
    "budget": ModelProfile(
        identifier="anthropic/claude-3-haiku",
        max_output_tokens=800,
        sampling_temperature=0.2,
        cost_tier=CostTier.VERY_LOW,
        strengths=("speed", "cost_effective", "basic_analysis"),
    ),
}


class ModelRegistry:
    """Read-only name -> ModelProfile table, built once per process."""

    def __init__(self, profiles: Mapping[str, ModelProfile]):
        if DEFAULT_MODEL not in profiles:
            raise ValueError(f"registry needs a '{DEFAULT_MODEL}' profile")
        self._profiles = MappingProxyType(dict(profiles))

    def lookup(self, name: Optional[str]) -> ModelProfile:
        """Unknown or missing names fall back to the primary profile."""
        return self._profiles.get(name or DEFAULT_MODEL, self._profiles[DEFAULT_MODEL])

    def names(self) -> Tuple[str, ...]:
        return tuple(self._profiles)

    def __contains__(self, name: object) -> bool:
        return name in self._profiles


def default_registry(overrides: Optional[Mapping[str, Optional[str]]] = None) -> ModelRegistry:
    """
    Build the registry from DEFAULT_PROFILES.

    overrides maps profile name -> model identifier; empty values are ignored.
    """
    profiles = dict(DEFAULT_PROFILES)
    for name, identifier in (overrides or {}).items():
        if name in profiles and identifier and identifier.strip():
            profiles[name] = replace(profiles[name], identifier=identifier.strip())
    return ModelRegistry(profiles)
