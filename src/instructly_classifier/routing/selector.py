"""Tier selection based on the topic complexity heuristic."""

from __future__ import annotations

from instructly_classifier.domain.interfaces import ITierSelector
from instructly_classifier.domain.models import ModelTier, TierConfig
from instructly_classifier.utils.cost_calculator import default_tier_config

from .estimator import ComplexityHeuristic, default_complexity_heuristic


class TierSelector(ITierSelector):
    """Routes complex topics to the premium tier and the rest to economy."""

    def __init__(
        self,
        heuristic: ComplexityHeuristic | None = None,
        *,
        premium: TierConfig | None = None,
        economy: TierConfig | None = None,
    ) -> None:
        self._heuristic = heuristic or default_complexity_heuristic()
        self._premium = premium or default_tier_config(ModelTier.PREMIUM)
        self._economy = economy or default_tier_config(ModelTier.ECONOMY)
        if self._premium.tier is not ModelTier.PREMIUM:
            raise ValueError("premium tier config must use ModelTier.PREMIUM")
        if self._economy.tier is not ModelTier.ECONOMY:
            raise ValueError("economy tier config must use ModelTier.ECONOMY")

    def select(self, topic: str) -> TierConfig:
        if self._heuristic.is_complex(topic):
            return self._premium
        return self._economy

    def select_tier(self, topic: str) -> ModelTier:
        return self.select(topic).tier

    def explain(self, topic: str) -> str:
        selected = self.select(topic)
        reasons = self._heuristic.reasons(topic)
        explanation = f"Selected {selected.tier.value} tier ({selected.model_name})"
        if reasons:
            explanation += f" because {'; '.join(reasons)}"
        else:
            explanation += " because no complexity signals were found"
        return explanation

    @property
    def tiers(self) -> tuple[TierConfig, TierConfig]:
        return self._economy, self._premium
