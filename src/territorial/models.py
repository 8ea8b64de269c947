from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

GLOBAL_WILDCARD = "*"
NAMESPACE_WILDCARD_SUFFIX = ":*"


class RuleCategory(str, Enum):
    """Event categories a rule can govern. Values match the rules file sections."""

    GROWTH = "plant_growth"
    BREEDING = "animal_breeding"


@dataclass(frozen=True, slots=True)
class RuleCriteria:
    """Match criteria shared by every rule category."""

    enabled: bool = True
    allow: bool = True
    biomes: tuple[str, ...] = ()
    temperature_min: float | None = None
    temperature_max: float | None = None
    x_min: int | None = None
    x_max: int | None = None
    y_min: int | None = None
    y_max: int | None = None
    z_min: int | None = None
    z_max: int | None = None
    dimensions: tuple[str, ...] = ()
    dimensions_blacklist: tuple[str, ...] = ()

    @property
    def has_x_bounds(self) -> bool:
        return self.x_min is not None or self.x_max is not None

    @property
    def has_y_bounds(self) -> bool:
        return self.y_min is not None or self.y_max is not None

    @property
    def has_z_bounds(self) -> bool:
        return self.z_min is not None or self.z_max is not None

    @property
    def has_temperature_bounds(self) -> bool:
        return self.temperature_min is not None or self.temperature_max is not None


@dataclass(frozen=True, slots=True)
class GrowthRule:
    """Plant growth rule; ``crop_types`` holds block id patterns."""

    category: ClassVar[RuleCategory] = RuleCategory.GROWTH

    criteria: RuleCriteria = field(default_factory=RuleCriteria)
    crop_types: tuple[str, ...] = ()

    @property
    def subject_patterns(self) -> tuple[str, ...]:
        return self.crop_types


@dataclass(frozen=True, slots=True)
class BreedingRule:
    """Animal breeding rule; ``animal_types`` holds entity id patterns."""

    category: ClassVar[RuleCategory] = RuleCategory.BREEDING

    criteria: RuleCriteria = field(default_factory=RuleCriteria)
    animal_types: tuple[str, ...] = ()

    @property
    def subject_patterns(self) -> tuple[str, ...]:
        return self.animal_types


Rule = Union[GrowthRule, BreedingRule]


def is_wildcard(pattern: str) -> bool:
    return pattern == GLOBAL_WILDCARD or pattern.endswith(NAMESPACE_WILDCARD_SUFFIX)


def validate(rule: Rule) -> bool:
    """Return whether ``rule`` is structurally valid.

    A valid rule has no inverted temperature or coordinate range and does not
    declare a dimension whitelist and blacklist at the same time.
    """
    criteria = rule.criteria
    bounds = (
        (criteria.temperature_min, criteria.temperature_max),
        (criteria.x_min, criteria.x_max),
        (criteria.y_min, criteria.y_max),
        (criteria.z_min, criteria.z_max),
    )
    for lower, upper in bounds:
        if lower is not None and upper is not None and lower > upper:
            return False

    if criteria.dimensions and criteria.dimensions_blacklist:
        return False

    return True


def specificity(rule: Rule) -> int:
    """Score how narrowly ``rule`` constrains its match; higher wins conflicts."""
    criteria = rule.criteria
    score = 0

    # Coordinate bounds outrank every other criterion.
    for bounded in (criteria.has_x_bounds, criteria.has_y_bounds, criteria.has_z_bounds):
        if bounded:
            score += 10

    if criteria.has_temperature_bounds:
        score += 5

    if criteria.biomes:
        score += 3

    if criteria.dimensions:
        score += 2
    elif criteria.dimensions_blacklist:
        score += 1

    patterns = rule.subject_patterns
    if patterns:
        score += 1 if any(is_wildcard(pattern) for pattern in patterns) else 2

    return score


@dataclass(frozen=True, slots=True)
class BlockPos:
    x: int
    y: int
    z: int

    @classmethod
    def of(cls, position: BlockPos | tuple[int, int, int]) -> BlockPos:
        if isinstance(position, BlockPos):
            return position
        x, y, z = position
        return cls(int(x), int(y), int(z))

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


@dataclass(frozen=True, slots=True)
class Biome:
    """Biome attributes supplied by the host world model."""

    id: str
    temperature: float
    tags: frozenset[str] = frozenset()

    def is_tagged(self, tag_id: str) -> bool:
        return tag_id in self.tags


@dataclass(frozen=True, slots=True)
class CacheKey:
    category: RuleCategory
    dimension_id: str
    position: BlockPos
    biome_id: str
    subject_type: str


@dataclass(frozen=True, slots=True)
class QueryContext:
    """Everything one decision needs to know about the event being judged."""

    category: RuleCategory
    dimension_id: str
    position: BlockPos
    subject_type: str
    biome_id: str | None = None
    biome: Biome | None = None

    @property
    def temperature(self) -> float | None:
        return self.biome.temperature if self.biome is not None else None

    def cache_key(self) -> CacheKey | None:
        """Return the canonical cache key, or ``None`` when biome data is unavailable."""
        if not self.biome_id or self.biome is None:
            return None
        return CacheKey(
            category=self.category,
            dimension_id=self.dimension_id,
            position=self.position,
            biome_id=self.biome_id,
            subject_type=self.subject_type,
        )

    def __str__(self) -> str:
        return (
            f"{self.category.value} {self.subject_type} at {self.position} "
            f"in {self.dimension_id} biome={self.biome_id or 'unknown'}"
        )
