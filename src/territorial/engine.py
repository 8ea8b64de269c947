"""Rule evaluation: default-permit, most-specific-rule-wins decisions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from territorial import matcher
from territorial.models import QueryContext, Rule, specificity
from territorial.ruleset import ControlFlags, PolicySnapshot

logger = logging.getLogger("territorial.engine")


class DecisionReason(str, Enum):
    """Which branch of the evaluation produced the verdict."""

    CONTROL_DISABLED = "control_disabled"
    NO_RULES = "no_rules"
    RULE_MATCHED = "rule_matched"
    DIMENSION_WHITELIST = "dimension_whitelist"
    DIMENSION_BLACKLIST = "dimension_blacklist"
    NO_MATCH = "no_match"
    NOT_APPLICABLE = "not_applicable"


_UNCACHEABLE = frozenset({DecisionReason.CONTROL_DISABLED, DecisionReason.NO_RULES})


@dataclass(frozen=True, slots=True)
class Decision:
    allowed: bool
    reason: DecisionReason
    matched_rules: int = 0
    applicable_rules: int = 0
    winner: Rule | None = None
    winner_specificity: int | None = None

    @property
    def cacheable(self) -> bool:
        """Short-circuit verdicts depend on flags only and are not worth caching."""
        return self.reason not in _UNCACHEABLE

    @property
    def verdict(self) -> str:
        return "ALLOW" if self.allowed else "DENY"


def subject_matches(rule: Rule, context: QueryContext) -> bool:
    """Whether ``rule`` concerns the context's subject type at all."""
    if rule.category is not context.category:
        return False
    return matcher.matches_subject_type(context.subject_type, rule.subject_patterns)


def rule_matches(rule: Rule, context: QueryContext, flags: ControlFlags) -> bool:
    """Whether every criterion of ``rule`` holds for ``context``."""
    criteria = rule.criteria

    if not matcher.matches_dimension(context.dimension_id, criteria.dimensions, criteria.dimensions_blacklist):
        return False

    if flags.biome_control:
        if not matcher.matches_biome(context.biome, criteria.biomes):
            return False
        if not matcher.matches_temperature(context.temperature, criteria.temperature_min, criteria.temperature_max):
            return False

    if flags.coordinate_control:
        if not matcher.matches_coordinates(
            context.position,
            criteria.x_min,
            criteria.x_max,
            criteria.y_min,
            criteria.y_max,
            criteria.z_min,
            criteria.z_max,
        ):
            return False

    return subject_matches(rule, context)


def _dimension_fallback(applicable: list[Rule], dimension_id: str) -> DecisionReason | None:
    # No rule fully matched, so a declared whitelist cannot contain this dimension.
    for rule in applicable:
        if rule.criteria.dimensions:
            return DecisionReason.DIMENSION_WHITELIST

    for rule in applicable:
        if dimension_id in rule.criteria.dimensions_blacklist:
            return DecisionReason.DIMENSION_BLACKLIST

    return None


def evaluate(context: QueryContext, snapshot: PolicySnapshot) -> Decision:
    """Decide whether the event described by ``context`` may happen."""
    flags = snapshot.flags
    trace_level = logging.INFO if flags.debug_logging else logging.DEBUG

    if not flags.category_enabled(context.category):
        return Decision(allowed=True, reason=DecisionReason.CONTROL_DISABLED)

    rules = snapshot.rules.rules_for(context.category)
    if not rules:
        if logger.isEnabledFor(trace_level):
            logger.log(trace_level, "no_rules_configured", extra={"context": str(context)})
        return Decision(allowed=True, reason=DecisionReason.NO_RULES)

    applicable: list[Rule] = []
    matching: list[Rule] = []
    for rule in rules:
        if not rule.criteria.enabled:
            continue
        if not subject_matches(rule, context):
            continue
        applicable.append(rule)
        if rule_matches(rule, context, flags):
            matching.append(rule)

    if matching:
        # sorted() is stable: equal scores keep declaration order.
        ranked = sorted(matching, key=specificity, reverse=True)
        winner = ranked[0]
        decision = Decision(
            allowed=winner.criteria.allow,
            reason=DecisionReason.RULE_MATCHED,
            matched_rules=len(matching),
            applicable_rules=len(applicable),
            winner=winner,
            winner_specificity=specificity(winner),
        )
    elif applicable:
        denial = _dimension_fallback(applicable, context.dimension_id)
        decision = Decision(
            allowed=denial is None,
            reason=denial or DecisionReason.NO_MATCH,
            applicable_rules=len(applicable),
        )
    else:
        decision = Decision(allowed=True, reason=DecisionReason.NOT_APPLICABLE)

    if logger.isEnabledFor(trace_level):
        logger.log(
            trace_level,
            "event_decision",
            extra={
                "context": str(context),
                "verdict": decision.verdict,
                "reason": decision.reason.value,
                "matched_rules": decision.matched_rules,
                "specificity": decision.winner_specificity,
            },
        )
    return decision


def decide(context: QueryContext, snapshot: PolicySnapshot) -> bool:
    return evaluate(context, snapshot).allowed
