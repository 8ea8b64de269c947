"""Query facade combining the verdict cache with the decision engine."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Mapping

from territorial import engine, schema
from territorial.cache import DEFAULT_CACHE_SIZE, RuleCache
from territorial.engine import Decision
from territorial.models import Biome, BlockPos, QueryContext, Rule, RuleCategory
from territorial.models import specificity as rule_specificity
from territorial.ruleset import PolicySnapshot
from territorial.world import BiomeRegistry

Position = BlockPos | tuple[int, int, int]


@dataclass(frozen=True, slots=True)
class PerformanceStats:
    total_evaluations: int
    cache_hits: int
    cache_misses: int
    total_evaluation_time_ns: int
    cache_size: int

    @property
    def average_evaluation_ms(self) -> float:
        if not self.total_evaluations:
            return 0.0
        return self.total_evaluation_time_ns / self.total_evaluations / 1_000_000

    @property
    def cache_hit_rate(self) -> float:
        if not self.total_evaluations:
            return 0.0
        return self.cache_hits / self.total_evaluations

    def describe(self) -> str:
        if not self.total_evaluations:
            return "No evaluations performed yet"
        average = self.average_evaluation_ms
        return (
            "Performance Stats:\n"
            f"  Total Evaluations: {self.total_evaluations}\n"
            f"  Avg Evaluation Time: {average:.3f}ms ({average * 1000:.1f}us)\n"
            f"  Cache Hits: {self.cache_hits} ({self.cache_hit_rate * 100:.1f}%)\n"
            f"  Cache Misses: {self.cache_misses}\n"
            f"  Cache Size: {self.cache_size} entries"
        )


class _Counters:
    """Monotonic evaluation counters; reads may interleave with increments."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self.evaluations = 0
            self.hits = 0
            self.misses = 0
            self.elapsed_ns = 0

    def record(self, *, hit: bool, elapsed_ns: int) -> None:
        with self._lock:
            self.evaluations += 1
            if hit:
                self.hits += 1
            else:
                self.misses += 1
            self.elapsed_ns += elapsed_ns


class TerritorialPolicy:
    """Answers allow/deny queries for plant growth and animal breeding events.

    Owns the active snapshot handle and the verdict cache. Swapping the
    snapshot through :meth:`apply_snapshot` clears the cache in the same step,
    so a reload can never leave stale verdicts behind.
    """

    def __init__(
        self,
        snapshot: PolicySnapshot,
        biomes: BiomeRegistry,
        *,
        cache_size: int = DEFAULT_CACHE_SIZE,
        logger: logging.Logger | None = None,
    ) -> None:
        self._snapshot = snapshot
        self._biomes = biomes
        self._cache = RuleCache(max_size=cache_size)
        self._counters = _Counters()
        self._publish_lock = threading.Lock()
        self._logger = logger or logging.getLogger("territorial.policy")

    @property
    def snapshot(self) -> PolicySnapshot:
        return self._snapshot

    def apply_snapshot(self, snapshot: PolicySnapshot) -> None:
        """Publish a new rule set and control flags, dropping every cached verdict."""
        with self._publish_lock:
            self._snapshot = snapshot
            self._cache.clear()
        self._logger.info(
            "policy_snapshot_applied",
            extra={
                "plant_growth_rules": len(snapshot.rules.growth),
                "animal_breeding_rules": len(snapshot.rules.breeding),
                "invalid_rules": snapshot.rules.invalid_count,
            },
        )

    def decide(
        self,
        category: RuleCategory,
        dimension_id: str,
        position: Position,
        biome_id: str | None,
        subject_type: str,
    ) -> bool:
        """Return ``True`` when the event may happen, consulting the cache first."""
        context = self.build_context(category, dimension_id, position, biome_id, subject_type)
        started = time.perf_counter_ns()

        key = context.cache_key()
        cached = self._cache.get(key)
        if cached is not None:
            self._counters.record(hit=True, elapsed_ns=time.perf_counter_ns() - started)
            return cached

        snapshot = self._snapshot
        decision = engine.evaluate(context, snapshot)
        if decision.cacheable:
            with self._publish_lock:
                # A reload in between would make this verdict stale.
                if self._snapshot is snapshot:
                    self._cache.put(key, decision.allowed)

        self._counters.record(hit=False, elapsed_ns=time.perf_counter_ns() - started)
        if not decision.allowed:
            self._logger.debug(
                "event_denied",
                extra={"context": str(context), "reason": decision.reason.value},
            )
        return decision.allowed

    def can_plant_grow(self, dimension_id: str, position: Position, biome_id: str | None, crop_type: str) -> bool:
        return self.decide(RuleCategory.GROWTH, dimension_id, position, biome_id, crop_type)

    def can_animal_breed(
        self,
        dimension_id: str,
        position: Position,
        biome_id: str | None,
        animal_type: str,
    ) -> bool:
        return self.decide(RuleCategory.BREEDING, dimension_id, position, biome_id, animal_type)

    def evaluate(
        self,
        category: RuleCategory,
        dimension_id: str,
        position: Position,
        biome_id: str | None,
        subject_type: str,
    ) -> Decision:
        """Run the engine without touching the cache or counters, for diagnostics."""
        context = self.build_context(category, dimension_id, position, biome_id, subject_type)
        return engine.evaluate(context, self._snapshot)

    def build_context(
        self,
        category: RuleCategory,
        dimension_id: str,
        position: Position,
        biome_id: str | None,
        subject_type: str,
    ) -> QueryContext:
        return QueryContext(
            category=RuleCategory(category),
            dimension_id=dimension_id,
            position=BlockPos.of(position),
            subject_type=subject_type,
            biome_id=biome_id,
            biome=self._resolve_biome(biome_id),
        )

    def invalidate_cache(self) -> None:
        self._cache.clear()
        self._logger.debug("rule_cache_cleared")

    def get_cache_size(self) -> int:
        return self._cache.size()

    def get_performance_stats(self) -> PerformanceStats:
        counters = self._counters
        return PerformanceStats(
            total_evaluations=counters.evaluations,
            cache_hits=counters.hits,
            cache_misses=counters.misses,
            total_evaluation_time_ns=counters.elapsed_ns,
            cache_size=self.get_cache_size(),
        )

    def reset_performance_stats(self) -> None:
        self._counters.reset()
        self._logger.debug("performance_stats_reset")

    @staticmethod
    def validate(raw_rule: Mapping[str, Any], category: RuleCategory) -> bool:
        return schema.validate_raw(category, raw_rule)

    @staticmethod
    def specificity(rule: Rule) -> int:
        return rule_specificity(rule)

    def _resolve_biome(self, biome_id: str | None) -> Biome | None:
        if not biome_id:
            return None
        try:
            return self._biomes.resolve(biome_id)
        except Exception:  # noqa: BLE001 - lookup failures degrade to a non-match.
            self._logger.debug("biome_lookup_failed", extra={"biome_id": biome_id}, exc_info=True)
            return None
