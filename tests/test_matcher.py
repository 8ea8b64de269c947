from __future__ import annotations

from territorial.matcher import (
    matches_biome,
    matches_coordinates,
    matches_dimension,
    matches_subject_type,
    matches_temperature,
    parse_resource_location,
)
from territorial.models import Biome, BlockPos

DESERT = Biome(id="minecraft:desert", temperature=2.0, tags=frozenset({"minecraft:is_overworld", "forge:is_hot"}))
MODDED = Biome(id="biomesoplenty:lavender_field", temperature=0.7)


def test_subject_type_wildcards() -> None:
    assert matches_subject_type("minecraft:wheat", ["minecraft:*"]) is True
    assert matches_subject_type("minecraft:wheat", ["minecraft:carrots"]) is False
    assert matches_subject_type("minecraft:wheat", []) is True
    assert matches_subject_type("farmersdelight:tomatoes", ["*"]) is True
    assert matches_subject_type("farmersdelight:tomatoes", ["minecraft:*"]) is False
    assert matches_subject_type("minecraft:wheat", ["", "minecraft:wheat"]) is True


def test_namespace_wildcard_does_not_match_prefix_namespaces() -> None:
    assert matches_subject_type("minecraftplus:wheat", ["minecraft:*"]) is False


def test_biome_patterns() -> None:
    assert matches_biome(DESERT, []) is True
    assert matches_biome(DESERT, ["*"]) is True
    assert matches_biome(DESERT, ["minecraft:desert"]) is True
    assert matches_biome(DESERT, ["minecraft:*"]) is True
    assert matches_biome(MODDED, ["minecraft:*"]) is False
    assert matches_biome(MODDED, ["biomesoplenty:*"]) is True
    assert matches_biome(DESERT, ["minecraft:plains"]) is False


def test_biome_tags() -> None:
    assert matches_biome(DESERT, ["#forge:is_hot"]) is True
    assert matches_biome(DESERT, ["#is_overworld"]) is True
    assert matches_biome(DESERT, ["#minecraft:is_ocean"]) is False
    assert matches_biome(MODDED, ["#forge:is_hot"]) is False


def test_malformed_tag_is_skipped_not_fatal() -> None:
    assert matches_biome(DESERT, ["#Not A Tag!", "minecraft:desert"]) is True
    assert matches_biome(DESERT, ["#"]) is False


def test_unknown_biome_only_matches_empty_pattern_list() -> None:
    assert matches_biome(None, []) is True
    assert matches_biome(None, ["*"]) is False


def test_parse_resource_location() -> None:
    assert parse_resource_location("forge:is_hot") == "forge:is_hot"
    assert parse_resource_location("is_hot") == "minecraft:is_hot"
    assert parse_resource_location("Bad:Tag") is None
    assert parse_resource_location("forge:") is None


def test_temperature_range_is_inclusive() -> None:
    assert matches_temperature(1.5, 1.5, None) is True
    assert matches_temperature(1.49, 1.5, None) is False
    assert matches_temperature(2.0, None, 2.0) is True
    assert matches_temperature(0.3, 0.0, 0.3) is True
    assert matches_temperature(-0.5, -0.2, 0.3) is False
    assert matches_temperature(None, None, None) is True
    assert matches_temperature(None, 0.0, None) is False


def test_coordinate_range_is_inclusive() -> None:
    assert matches_coordinates(BlockPos(100, 64, 0), x_min=100, x_max=100) is True
    assert matches_coordinates(BlockPos(101, 64, 0), x_min=100, x_max=100) is False
    assert matches_coordinates(BlockPos(0, 200, 0), y_min=150) is True
    assert matches_coordinates(BlockPos(0, 149, 0), y_min=150) is False
    assert matches_coordinates(BlockPos(0, 0, -501), z_min=-500, z_max=500) is False
    assert matches_coordinates(BlockPos(-7, -64, 9)) is True


def test_dimension_whitelist_and_blacklist() -> None:
    assert matches_dimension("minecraft:overworld", [], []) is True
    assert matches_dimension("minecraft:overworld", ["minecraft:overworld"], []) is True
    assert matches_dimension("minecraft:the_nether", ["minecraft:overworld"], []) is False
    assert matches_dimension("minecraft:the_nether", [], ["minecraft:the_nether"]) is False
    assert matches_dimension("minecraft:the_end", [], ["minecraft:the_nether"]) is True
    # Whitelist wins when both are (invalidly) present.
    assert matches_dimension("minecraft:the_nether", ["minecraft:the_nether"], ["minecraft:the_nether"]) is True
