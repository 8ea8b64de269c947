"""Active rule lists and control flags, published together as one immutable snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from territorial.errors import UnknownCategoryError
from territorial.models import BreedingRule, GrowthRule, Rule, RuleCategory, validate

if TYPE_CHECKING:
    from territorial.config import Settings


@dataclass(frozen=True, slots=True)
class ControlFlags:
    """Global toggles re-read on every decision."""

    plant_growth: bool = True
    animal_breeding: bool = True
    biome_control: bool = True
    coordinate_control: bool = True
    debug_logging: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> ControlFlags:
        return cls(
            plant_growth=settings.enable_plant_growth_control,
            animal_breeding=settings.enable_animal_breeding_control,
            biome_control=settings.enable_biome_control,
            coordinate_control=settings.enable_coordinate_control,
            debug_logging=settings.debug_logging,
        )

    def category_enabled(self, category: RuleCategory) -> bool:
        if category is RuleCategory.GROWTH:
            return self.plant_growth
        if category is RuleCategory.BREEDING:
            return self.animal_breeding
        raise UnknownCategoryError(category)


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Validated rules per category, in declaration order."""

    growth: tuple[GrowthRule, ...] = ()
    breeding: tuple[BreedingRule, ...] = ()
    invalid_count: int = 0

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]) -> RuleSet:
        """Split ``rules`` by category, dropping and counting invalid ones."""
        growth: list[GrowthRule] = []
        breeding: list[BreedingRule] = []
        invalid = 0
        for rule in rules:
            if not validate(rule):
                invalid += 1
                continue
            if isinstance(rule, GrowthRule):
                growth.append(rule)
            elif isinstance(rule, BreedingRule):
                breeding.append(rule)
            else:
                raise UnknownCategoryError(type(rule).__name__)
        return cls(growth=tuple(growth), breeding=tuple(breeding), invalid_count=invalid)

    def rules_for(self, category: RuleCategory) -> tuple[Rule, ...]:
        if category is RuleCategory.GROWTH:
            return self.growth
        if category is RuleCategory.BREEDING:
            return self.breeding
        raise UnknownCategoryError(category)

    def counts(self) -> dict[RuleCategory, int]:
        return {category: len(self.rules_for(category)) for category in RuleCategory}

    @property
    def is_empty(self) -> bool:
        return not self.growth and not self.breeding


@dataclass(frozen=True, slots=True)
class PolicySnapshot:
    flags: ControlFlags = field(default_factory=ControlFlags)
    rules: RuleSet = field(default_factory=RuleSet)
