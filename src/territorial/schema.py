"""Pydantic documents describing one rule table as it appears in the rules file."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from territorial.errors import RuleParseError
from territorial.models import BreedingRule, GrowthRule, Rule, RuleCategory, RuleCriteria, validate


class RuleDocument(BaseModel):
    """Fields common to every rule table. Missing keys take permissive defaults."""

    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    allow: bool = True
    biomes: list[str] = Field(default_factory=list)
    temperature_min: float | None = None
    temperature_max: float | None = None
    x_min: int | None = None
    x_max: int | None = None
    y_min: int | None = None
    y_max: int | None = None
    z_min: int | None = None
    z_max: int | None = None
    dimension: str | None = Field(
        default=None,
        description="Deprecated single dimension id; converted to a one-element whitelist.",
    )
    dimensions: list[str] | None = None
    dimensions_blacklist: list[str] = Field(default_factory=list)

    def whitelist(self) -> tuple[str, ...]:
        if self.dimensions is not None:
            return tuple(self.dimensions)
        if self.dimension:
            return (self.dimension,)
        return ()

    def to_criteria(self) -> RuleCriteria:
        return RuleCriteria(
            enabled=self.enabled,
            allow=self.allow,
            biomes=tuple(self.biomes),
            temperature_min=self.temperature_min,
            temperature_max=self.temperature_max,
            x_min=self.x_min,
            x_max=self.x_max,
            y_min=self.y_min,
            y_max=self.y_max,
            z_min=self.z_min,
            z_max=self.z_max,
            dimensions=self.whitelist(),
            dimensions_blacklist=tuple(self.dimensions_blacklist),
        )


class GrowthRuleDocument(RuleDocument):
    crop_types: list[str] = Field(default_factory=list)

    def to_rule(self) -> GrowthRule:
        return GrowthRule(criteria=self.to_criteria(), crop_types=tuple(self.crop_types))


class BreedingRuleDocument(RuleDocument):
    animal_types: list[str] = Field(default_factory=list)

    def to_rule(self) -> BreedingRule:
        return BreedingRule(criteria=self.to_criteria(), animal_types=tuple(self.animal_types))


DOCUMENTS: dict[RuleCategory, type[GrowthRuleDocument] | type[BreedingRuleDocument]] = {
    RuleCategory.GROWTH: GrowthRuleDocument,
    RuleCategory.BREEDING: BreedingRuleDocument,
}


def rule_from_mapping(category: RuleCategory, raw: Mapping[str, Any]) -> Rule:
    """Build a rule of ``category`` from one parsed rules-file table."""
    document_type = DOCUMENTS[RuleCategory(category)]
    try:
        document = document_type.model_validate(dict(raw))
    except ValidationError as exc:
        raise RuleParseError(f"Malformed {RuleCategory(category).value} rule: {exc}") from exc
    return document.to_rule()


def validate_raw(category: RuleCategory, raw: Mapping[str, Any]) -> bool:
    """Return whether ``raw`` parses into a structurally valid rule."""
    try:
        rule = rule_from_mapping(category, raw)
    except RuleParseError:
        return False
    return validate(rule)
