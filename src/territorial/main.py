"""CLI entrypoint for Territorial."""

from __future__ import annotations

from pathlib import Path

import typer
from rich import print

from territorial.almanac import generate_almanac
from territorial.config import settings
from territorial.config_loader import load_rule_set, load_snapshot, write_default_config
from territorial.models import Rule, RuleCategory, specificity
from territorial.policy import TerritorialPolicy
from territorial.telemetry import configure_logging
from territorial.world import vanilla_registry

app = typer.Typer(help="Territorial biome/coordinate policy engine")

_RULE_LIST_CHOICES = ("all", RuleCategory.GROWTH.value, RuleCategory.BREEDING.value)


@app.callback()
def _setup(log_level: str = typer.Option(None, help="Override TERRITORIAL_LOG_LEVEL")) -> None:
    configure_logging(log_level or settings.log_level)


def _rules_path(rules_file: str | None) -> Path:
    return Path(rules_file or settings.rules_path)


def _build_policy(rules_file: str | None) -> TerritorialPolicy:
    snapshot = load_snapshot(settings, _rules_path(rules_file))
    return TerritorialPolicy(snapshot, vanilla_registry(), cache_size=settings.cache_size)


def _describe_rule(index: int, rule: Rule) -> dict:
    criteria = rule.criteria
    summary = {
        "rule": index,
        "status": "ENABLED" if criteria.enabled else "DISABLED",
        "verdict": "ALLOW" if criteria.allow else "DENY",
        "specificity": specificity(rule),
    }
    if rule.subject_patterns:
        key = "crops" if rule.category is RuleCategory.GROWTH else "animals"
        summary[key] = ", ".join(rule.subject_patterns)
    if criteria.biomes:
        summary["biomes"] = ", ".join(criteria.biomes)
    if criteria.dimensions:
        summary["dimensions"] = ", ".join(criteria.dimensions)
    if criteria.dimensions_blacklist:
        summary["dimensions_blacklist"] = ", ".join(criteria.dimensions_blacklist)
    return summary


@app.command("show-config")
def show_config() -> None:
    """Show effective runtime settings."""
    print(settings.model_dump())


@app.command("init-config")
def init_config(
    rules_file: str = typer.Option(None, help="Rules file to create"),
    force: bool = typer.Option(False, help="Overwrite an existing rules file"),
) -> None:
    """Write the commented default rules file."""
    path = _rules_path(rules_file)
    if path.exists() and not force:
        print({"error": f"Rules file already exists: {path}", "hint": "Pass --force to overwrite"})
        raise typer.Exit(code=1)
    print({"created": str(write_default_config(path))})


@app.command("validate")
def validate_rules(rules_file: str = typer.Option(None, help="Rules file to check")) -> None:
    """Load the rules file and report how many rules were accepted or rejected."""
    rule_set = load_rule_set(_rules_path(rules_file), create_default=False)
    counts = rule_set.counts()
    print(
        {
            "plant_growth_rules": counts[RuleCategory.GROWTH],
            "animal_breeding_rules": counts[RuleCategory.BREEDING],
            "invalid_rules": rule_set.invalid_count,
        }
    )
    if rule_set.invalid_count:
        raise typer.Exit(code=1)


@app.command("rules")
def list_rules(
    rule_type: str = typer.Argument("all", help="all, plant_growth or animal_breeding"),
    rules_file: str = typer.Option(None, help="Rules file to list"),
) -> None:
    """List configured rules with their verdict and specificity."""
    if rule_type not in _RULE_LIST_CHOICES:
        raise typer.BadParameter(f"Expected one of: {', '.join(_RULE_LIST_CHOICES)}")

    rule_set = load_rule_set(_rules_path(rules_file), create_default=False)
    for category in RuleCategory:
        if rule_type not in ("all", category.value):
            continue
        rules = rule_set.rules_for(category)
        print({"category": category.value, "count": len(rules)})
        if not rules:
            noun = "growth" if category is RuleCategory.GROWTH else "breeding"
            print(f"  (no rules configured - all {noun} allowed)")
        for index, rule in enumerate(rules, start=1):
            print(_describe_rule(index, rule))


@app.command("check")
def check(
    category: RuleCategory = typer.Option(RuleCategory.GROWTH, help="plant_growth or animal_breeding"),
    subject: str = typer.Option(..., help="Crop block id or animal entity id, e.g. minecraft:wheat"),
    biome: str = typer.Option("minecraft:plains", help="Biome id at the position"),
    dimension: str = typer.Option("minecraft:overworld", help="Dimension id"),
    x: int = typer.Option(0, help="Block X"),
    y: int = typer.Option(64, help="Block Y"),
    z: int = typer.Option(0, help="Block Z"),
    rules_file: str = typer.Option(None, help="Rules file to evaluate"),
) -> None:
    """Explain the decision for one event at one location."""
    policy = _build_policy(rules_file)
    decision = policy.evaluate(category, dimension, (x, y, z), biome, subject)
    winner = decision.winner
    print(
        {
            "category": category.value,
            "subject": subject,
            "position": [x, y, z],
            "dimension": dimension,
            "biome": biome,
            "verdict": decision.verdict,
            "reason": decision.reason.value,
            "matched_rules": decision.matched_rules,
            "winner": _describe_rule(policy.snapshot.rules.rules_for(category).index(winner) + 1, winner)
            if winner is not None
            else None,
        }
    )


@app.command("almanac")
def almanac(rules_file: str = typer.Option(None, help="Rules file to describe")) -> None:
    """Print the Farmer's Almanac pages for the configured rules."""
    pages = generate_almanac(load_rule_set(_rules_path(rules_file), create_default=False))
    for number, page in enumerate(pages, start=1):
        print(f"--- page {number}/{len(pages)} ---")
        print(page)


@app.command("stats")
def stats(
    samples: int = typer.Option(1_000, help="Number of repeated queries to run"),
    rules_file: str = typer.Option(None, help="Rules file to evaluate"),
) -> None:
    """Run a repeated query sample and report cache and timing statistics."""
    policy = _build_policy(rules_file)
    biomes = ("minecraft:plains", "minecraft:desert", "minecraft:taiga", "minecraft:jungle")
    for index in range(samples):
        policy.can_plant_grow(
            "minecraft:overworld",
            (index % 16, 64, index % 8),
            biomes[index % len(biomes)],
            "minecraft:wheat",
        )
    print(policy.get_performance_stats().describe())


if __name__ == "__main__":
    app()
