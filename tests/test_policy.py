from __future__ import annotations

import logging

from territorial.models import Biome, GrowthRule, RuleCategory, RuleCriteria
from territorial.policy import TerritorialPolicy
from territorial.ruleset import ControlFlags, PolicySnapshot, RuleSet
from territorial.world import StaticBiomeRegistry

OVERWORLD = "minecraft:overworld"


class CountingEngine:
    """Wraps territorial.engine.evaluate to count how often rules are consulted."""

    def __init__(self, monkeypatch) -> None:
        from territorial import engine

        self.calls = 0
        original = engine.evaluate

        def _counting(context, snapshot):
            self.calls += 1
            return original(context, snapshot)

        monkeypatch.setattr(engine, "evaluate", _counting)


class FailingRegistry:
    def resolve(self, biome_id: str) -> Biome | None:
        raise RuntimeError("world not loaded")


def _registry() -> StaticBiomeRegistry:
    return StaticBiomeRegistry(
        [
            Biome(id="minecraft:plains", temperature=0.8),
            Biome(id="minecraft:desert", temperature=2.0, tags=frozenset({"forge:is_hot"})),
        ]
    )


def _snapshot(*rules: GrowthRule, flags: ControlFlags | None = None) -> PolicySnapshot:
    return PolicySnapshot(flags=flags or ControlFlags(), rules=RuleSet.from_rules(rules))


def test_default_permit_without_rules() -> None:
    policy = TerritorialPolicy(_snapshot(), _registry())

    assert policy.can_plant_grow(OVERWORLD, (1, 2, 3), "minecraft:plains", "minecraft:wheat") is True
    assert policy.can_animal_breed("minecraft:the_end", (0, 0, 0), "minecraft:desert", "minecraft:cow") is True


def test_repeated_query_is_served_from_cache(monkeypatch) -> None:
    counting = CountingEngine(monkeypatch)
    policy = TerritorialPolicy(
        _snapshot(GrowthRule(criteria=RuleCriteria(biomes=("#forge:is_hot",), allow=False))),
        _registry(),
    )

    first = policy.decide(RuleCategory.GROWTH, OVERWORLD, (5, 64, 5), "minecraft:desert", "minecraft:wheat")
    second = policy.decide(RuleCategory.GROWTH, OVERWORLD, (5, 64, 5), "minecraft:desert", "minecraft:wheat")

    assert first is False
    assert second is False
    assert counting.calls == 1

    stats = policy.get_performance_stats()
    assert stats.total_evaluations == 2
    assert stats.cache_hits == 1
    assert stats.cache_misses == 1
    assert stats.cache_size == 1
    assert stats.cache_hit_rate == 0.5
    assert policy.get_cache_size() == 1


def test_invalidate_cache_forces_recomputation(monkeypatch) -> None:
    counting = CountingEngine(monkeypatch)
    policy = TerritorialPolicy(_snapshot(GrowthRule(criteria=RuleCriteria(allow=True))), _registry())
    query = (RuleCategory.GROWTH, OVERWORLD, (0, 64, 0), "minecraft:plains", "minecraft:wheat")

    assert policy.decide(*query) is True
    policy.invalidate_cache()
    assert policy.get_cache_size() == 0
    assert policy.decide(*query) is True
    assert counting.calls == 2


def test_apply_snapshot_clears_stale_verdicts() -> None:
    policy = TerritorialPolicy(_snapshot(GrowthRule(criteria=RuleCriteria(allow=True))), _registry())
    query = (RuleCategory.GROWTH, OVERWORLD, (0, 64, 0), "minecraft:plains", "minecraft:wheat")

    assert policy.decide(*query) is True
    policy.apply_snapshot(_snapshot(GrowthRule(criteria=RuleCriteria(allow=False))))

    assert policy.get_cache_size() == 0
    assert policy.decide(*query) is False


def test_short_circuit_verdicts_are_not_cached() -> None:
    policy = TerritorialPolicy(
        _snapshot(GrowthRule(criteria=RuleCriteria(allow=False)), flags=ControlFlags(plant_growth=False)),
        _registry(),
    )

    assert policy.can_plant_grow(OVERWORLD, (0, 64, 0), "minecraft:plains", "minecraft:wheat") is True
    assert policy.get_cache_size() == 0


def test_biome_lookup_failure_degrades_to_uncached_decision(caplog) -> None:
    policy = TerritorialPolicy(
        _snapshot(GrowthRule(criteria=RuleCriteria(biomes=("minecraft:plains",), allow=False))),
        FailingRegistry(),
        logger=logging.getLogger("tests.policy"),
    )

    with caplog.at_level(logging.DEBUG, logger="tests.policy"):
        allowed = policy.can_plant_grow(OVERWORLD, (0, 64, 0), "minecraft:plains", "minecraft:wheat")

    assert allowed is True
    assert policy.get_cache_size() == 0
    assert any(record.getMessage().startswith("biome_lookup_failed") for record in caplog.records)


def test_reset_performance_stats() -> None:
    policy = TerritorialPolicy(_snapshot(), _registry())
    policy.can_plant_grow(OVERWORLD, (0, 0, 0), "minecraft:plains", "minecraft:wheat")

    assert policy.get_performance_stats().total_evaluations == 1
    policy.reset_performance_stats()

    stats = policy.get_performance_stats()
    assert stats.total_evaluations == 0
    assert stats.cache_hits == 0
    assert stats.describe() == "No evaluations performed yet"


def test_evaluate_explains_without_touching_cache() -> None:
    rule = GrowthRule(criteria=RuleCriteria(x_min=0, x_max=10, allow=False), crop_types=("minecraft:wheat",))
    policy = TerritorialPolicy(_snapshot(rule), _registry())

    decision = policy.evaluate(RuleCategory.GROWTH, OVERWORLD, (3, 64, 0), "minecraft:plains", "minecraft:wheat")

    assert decision.allowed is False
    assert decision.winner == rule
    assert policy.get_cache_size() == 0
    assert policy.get_performance_stats().total_evaluations == 0


def test_validate_and_specificity_passthroughs() -> None:
    assert TerritorialPolicy.validate({"x_min": 5, "x_max": 1}, RuleCategory.GROWTH) is False
    assert TerritorialPolicy.validate({"crop_types": ["minecraft:*"]}, RuleCategory.GROWTH) is True
    assert TerritorialPolicy.specificity(GrowthRule(crop_types=("minecraft:*",))) == 1
