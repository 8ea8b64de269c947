"""Loading, default generation and hot reload of the TOML rules file."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from territorial.errors import RuleParseError
from territorial.models import Rule, RuleCategory
from territorial.ruleset import ControlFlags, PolicySnapshot, RuleSet
from territorial.schema import rule_from_mapping

if TYPE_CHECKING:
    from territorial.config import Settings
    from territorial.policy import TerritorialPolicy

logger = logging.getLogger("territorial.config_loader")

DEFAULT_RULES_FILE = """\
# ================================================================================
# Territorial - Event Control Configuration
# ================================================================================
#
# Configure where crops may grow and animals may breed based on:
# - Biome types (exact ID, namespace wildcards, or tags)
# - Temperature ranges (hot, cold, temperate climates)
# - Coordinate ranges (X/Y/Z boundaries)
# - Dimensions (whitelist or blacklist)
#
# With no rules configured, ALL events are ALLOWED everywhere.
#
# ================================================================================
# Rule fields
# ================================================================================
#
# Common to all rule types:
#   enabled              - true/false (default true)
#   allow                - true (allow event) / false (block event), default true
#   biomes               - list of biome IDs or patterns
#   temperature_min      - minimum biome temperature (about -2.0 to 2.0)
#   temperature_max      - maximum biome temperature
#   x_min, x_max         - X coordinate range (inclusive)
#   y_min, y_max         - Y coordinate range (inclusive)
#   z_min, z_max         - Z coordinate range (inclusive)
#   dimensions           - dimension whitelist, e.g. ["minecraft:overworld"]
#   dimensions_blacklist - dimension blacklist (cannot be combined with dimensions)
#
# Plant growth rules:  crop_types   - list of crop/plant block IDs
# Animal breeding:     animal_types - list of entity type IDs
#
# Patterns:
#   "minecraft:desert"   - exact ID
#   "minecraft:*"        - every ID in the minecraft namespace
#   "*"                  - everything
#   "#minecraft:is_hot"  - biome tag (biomes only)
#
# When several rules match, the MOST SPECIFIC one wins:
#   coordinates (+10 per axis) > temperature (+5) > biomes (+3)
#   > dimension whitelist (+2) / blacklist (+1) > exact types (+2) / wildcards (+1)
# Rules with equal specificity resolve to the one declared first.
#
# ================================================================================
# Examples
# ================================================================================
#
# ---- Wheat cannot grow in hot biomes ----
# [[plant_growth.rules]]
#     temperature_min = 1.5
#     crop_types = ["minecraft:wheat"]
#     allow = false
#
# ---- Protected spawn area: no farming or breeding ----
# [[plant_growth.rules]]
#     x_min = -500
#     x_max = 500
#     z_min = -500
#     z_max = 500
#     allow = false
#
# [[animal_breeding.rules]]
#     x_min = -500
#     x_max = 500
#     z_min = -500
#     z_max = 500
#     allow = false
#
# ---- Desert farming only ----
# [[plant_growth.rules]]
#     biomes = ["minecraft:desert"]
#     allow = true
#
# [[plant_growth.rules]]
#     allow = false
#
# ---- No breeding above Y=150 ----
# [[animal_breeding.rules]]
#     y_min = 150
#     allow = false
#
# ---- Only nether wart grows in the nether ----
# [[plant_growth.rules]]
#     dimensions = ["minecraft:the_nether"]
#     crop_types = ["minecraft:nether_wart"]
#     allow = true
#
# [[plant_growth.rules]]
#     dimensions = ["minecraft:the_nether"]
#     allow = false
#
# ================================================================================
# Add your rules below
# ================================================================================
"""


def write_default_config(path: str | Path) -> Path:
    """Write the commented example rules file, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(DEFAULT_RULES_FILE, encoding="utf-8")
    logger.info("default_rules_file_created", extra={"path": str(target), "bytes": len(DEFAULT_RULES_FILE)})
    return target


def _section_rules(document: dict[str, Any], category: RuleCategory) -> list[Any]:
    section = document.get(category.value)
    if section is None:
        return []
    if not isinstance(section, dict):
        logger.warning("rules_section_malformed", extra={"section": category.value})
        return []
    tables = section.get("rules", [])
    if not isinstance(tables, list):
        logger.warning("rules_section_malformed", extra={"section": category.value})
        return []
    return tables


def parse_rules_document(document: dict[str, Any]) -> RuleSet:
    """Build a rule set from a decoded rules document.

    Malformed tables are skipped with a warning; structurally invalid rules are
    dropped and counted in ``RuleSet.invalid_count``.
    """
    parsed: list[Rule] = []
    for category in RuleCategory:
        for index, table in enumerate(_section_rules(document, category)):
            if not isinstance(table, dict):
                logger.warning("rule_table_malformed", extra={"section": category.value, "index": index})
                continue
            try:
                parsed.append(rule_from_mapping(category, table))
            except RuleParseError as exc:
                logger.warning(
                    "rule_parse_failed",
                    extra={"section": category.value, "index": index, "error": str(exc)},
                )

    rule_set = RuleSet.from_rules(parsed)
    if rule_set.invalid_count:
        logger.warning("invalid_rules_rejected", extra={"invalid_rules": rule_set.invalid_count})
    return rule_set


def load_rule_set(path: str | Path, *, create_default: bool = True) -> RuleSet:
    """Load rules from ``path``; any failure yields an empty set, which allows everything."""
    config_path = Path(path)
    logger.info("loading_rules", extra={"path": str(config_path)})

    if not config_path.exists():
        if not create_default:
            logger.warning("rules_file_missing", extra={"path": str(config_path)})
            return RuleSet()
        try:
            write_default_config(config_path)
        except OSError:
            logger.exception("default_rules_file_failed", extra={"path": str(config_path)})
            return RuleSet()

    try:
        with config_path.open("rb") as handle:
            document = tomllib.load(handle)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        logger.exception("rules_file_unreadable", extra={"path": str(config_path)})
        logger.warning("using_default_settings_allow_all")
        return RuleSet()

    rule_set = parse_rules_document(document)
    logger.info(
        "rules_loaded",
        extra={
            "plant_growth_rules": len(rule_set.growth),
            "animal_breeding_rules": len(rule_set.breeding),
            "invalid_rules": rule_set.invalid_count,
        },
    )
    if rule_set.is_empty:
        logger.info("no_rules_configured_all_events_allowed")
    return rule_set


def load_snapshot(settings: Settings, path: str | Path | None = None) -> PolicySnapshot:
    return PolicySnapshot(
        flags=ControlFlags.from_settings(settings),
        rules=load_rule_set(path or settings.rules_path),
    )


class RuleReloader:
    """Reload path: owns rule loading and hands each new snapshot to the policy."""

    def __init__(self, policy: TerritorialPolicy, settings: Settings, path: str | Path | None = None) -> None:
        self._policy = policy
        self._settings = settings
        self._path = Path(path or settings.rules_path)

    @property
    def path(self) -> Path:
        return self._path

    def reload(self) -> PolicySnapshot:
        logger.info("reloading_rules", extra={"path": str(self._path)})
        snapshot = load_snapshot(self._settings, self._path)
        self._policy.apply_snapshot(snapshot)
        return snapshot
