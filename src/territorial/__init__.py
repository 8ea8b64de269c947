"""Biome, climate and coordinate based policy engine for crop growth and animal breeding."""

from .cache import RuleCache
from .engine import Decision, DecisionReason, decide, evaluate
from .errors import RuleParseError, TerritorialError, UnknownCategoryError
from .models import Biome, BlockPos, BreedingRule, GrowthRule, QueryContext, RuleCategory, RuleCriteria, specificity, validate
from .policy import PerformanceStats, TerritorialPolicy
from .ruleset import ControlFlags, PolicySnapshot, RuleSet
from .schema import rule_from_mapping

__all__ = [
    "Biome",
    "BlockPos",
    "BreedingRule",
    "ControlFlags",
    "Decision",
    "DecisionReason",
    "GrowthRule",
    "PerformanceStats",
    "PolicySnapshot",
    "QueryContext",
    "RuleCache",
    "RuleCategory",
    "RuleCriteria",
    "RuleParseError",
    "RuleSet",
    "TerritorialError",
    "TerritorialPolicy",
    "UnknownCategoryError",
    "decide",
    "evaluate",
    "rule_from_mapping",
    "specificity",
    "validate",
]
