"""Boundary to the host world model for biome temperature and tag lookups."""

from __future__ import annotations

from typing import Iterable, Mapping, Protocol

from territorial.models import Biome


class BiomeRegistry(Protocol):
    def resolve(self, biome_id: str) -> Biome | None:
        """Return the biome for ``biome_id``, or ``None`` when it is unknown."""


class StaticBiomeRegistry:
    """In-memory registry, used by the CLI and tests in place of a running game."""

    def __init__(self, biomes: Iterable[Biome] = ()) -> None:
        self._biomes: dict[str, Biome] = {biome.id: biome for biome in biomes}

    @classmethod
    def from_mapping(cls, table: Mapping[str, tuple[float, Iterable[str]]]) -> StaticBiomeRegistry:
        return cls(
            Biome(id=biome_id, temperature=float(temperature), tags=frozenset(tags))
            for biome_id, (temperature, tags) in table.items()
        )

    def register(self, biome: Biome) -> None:
        self._biomes[biome.id] = biome

    def resolve(self, biome_id: str) -> Biome | None:
        return self._biomes.get(biome_id)

    def __contains__(self, biome_id: object) -> bool:
        return biome_id in self._biomes

    def __len__(self) -> int:
        return len(self._biomes)


# Base temperatures and a few common tags for vanilla overworld/nether/end biomes.
VANILLA_BIOMES: dict[str, tuple[float, tuple[str, ...]]] = {
    "minecraft:plains": (0.8, ("minecraft:is_overworld",)),
    "minecraft:sunflower_plains": (0.8, ("minecraft:is_overworld",)),
    "minecraft:forest": (0.7, ("minecraft:is_overworld", "minecraft:is_forest")),
    "minecraft:birch_forest": (0.6, ("minecraft:is_overworld", "minecraft:is_forest")),
    "minecraft:dark_forest": (0.7, ("minecraft:is_overworld", "minecraft:is_forest")),
    "minecraft:taiga": (0.25, ("minecraft:is_overworld", "minecraft:is_taiga")),
    "minecraft:snowy_plains": (0.0, ("minecraft:is_overworld", "forge:is_snowy")),
    "minecraft:snowy_taiga": (-0.5, ("minecraft:is_overworld", "minecraft:is_taiga", "forge:is_snowy")),
    "minecraft:ice_spikes": (0.0, ("minecraft:is_overworld", "forge:is_snowy")),
    "minecraft:desert": (2.0, ("minecraft:is_overworld", "forge:is_desert", "forge:is_hot")),
    "minecraft:savanna": (2.0, ("minecraft:is_overworld", "minecraft:is_savanna", "forge:is_hot")),
    "minecraft:badlands": (2.0, ("minecraft:is_overworld", "minecraft:is_badlands", "forge:is_hot")),
    "minecraft:jungle": (0.95, ("minecraft:is_overworld", "minecraft:is_jungle", "forge:is_hot")),
    "minecraft:swamp": (0.8, ("minecraft:is_overworld", "forge:is_swamp")),
    "minecraft:mushroom_fields": (0.9, ("minecraft:is_overworld", "forge:is_mushroom")),
    "minecraft:cherry_grove": (0.5, ("minecraft:is_overworld", "minecraft:is_mountain")),
    "minecraft:meadow": (0.5, ("minecraft:is_overworld", "minecraft:is_mountain")),
    "minecraft:frozen_peaks": (-0.7, ("minecraft:is_overworld", "minecraft:is_mountain", "forge:is_snowy")),
    "minecraft:ocean": (0.5, ("minecraft:is_overworld", "minecraft:is_ocean")),
    "minecraft:beach": (0.8, ("minecraft:is_overworld", "minecraft:is_beach")),
    "minecraft:nether_wastes": (2.0, ("minecraft:is_nether", "forge:is_hot")),
    "minecraft:crimson_forest": (2.0, ("minecraft:is_nether", "forge:is_hot")),
    "minecraft:soul_sand_valley": (2.0, ("minecraft:is_nether", "forge:is_hot")),
    "minecraft:the_end": (0.5, ("minecraft:is_end",)),
}


def vanilla_registry() -> StaticBiomeRegistry:
    return StaticBiomeRegistry.from_mapping(VANILLA_BIOMES)
