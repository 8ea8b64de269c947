"""Plain-text "Farmer's Almanac" pages describing the active rules."""

from __future__ import annotations

from typing import Sequence

from territorial.models import GLOBAL_WILDCARD, Rule, RuleCategory, RuleCriteria
from territorial.ruleset import RuleSet

MAX_PAGE_LENGTH = 256
TITLE = "Farmer's Almanac"

_SECTIONS = {
    RuleCategory.GROWTH: ("Plant Growth Rules", "Crops", "All crops"),
    RuleCategory.BREEDING: ("Animal Breeding Rules", "Animals", "All animals"),
}

NO_RULES_PAGE = (
    "No territorial rules are currently configured.\n\n"
    "All crops can grow and animals can breed anywhere."
)


def title_page() -> str:
    return (
        f"{TITLE}\n\n"
        "A guide to the territorial rules governing this world.\n\n"
        "This book reflects the rules loaded when it was written."
    )


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:].lower()


def format_ids(ids: Sequence[str], *, replace_underscores: bool = False) -> str:
    names = []
    for identifier in ids:
        namespace, sep, path = identifier.partition(":")
        name = path if sep and path and ":" not in path else identifier
        if replace_underscores:
            name = name.replace("_", " ")
        names.append(_capitalize(name))
    return ", ".join(names)


def format_range(lower: float | None, upper: float | None) -> str:
    if lower is not None and upper is not None:
        return f"{lower} to {upper}"
    if lower is not None:
        return f"at least {lower}"
    if upper is not None:
        return f"at most {upper}"
    return "any"


def format_conditions(criteria: RuleCriteria) -> str:
    lines = []
    if criteria.biomes:
        lines.append(f"- In biomes: {format_ids(criteria.biomes, replace_underscores=True)}")
    if criteria.has_temperature_bounds:
        lines.append(f"- Temperature: {format_range(criteria.temperature_min, criteria.temperature_max)}")
    for axis, lower, upper in (
        ("X", criteria.x_min, criteria.x_max),
        ("Y", criteria.y_min, criteria.y_max),
        ("Z", criteria.z_min, criteria.z_max),
    ):
        if lower is not None or upper is not None:
            lines.append(f"- {axis}: {format_range(lower, upper)}")
    if criteria.dimensions:
        lines.append(f"- In dimensions: {format_ids(criteria.dimensions, replace_underscores=True)}")
    if criteria.dimensions_blacklist:
        lines.append(f"- Not in dimensions: {format_ids(criteria.dimensions_blacklist, replace_underscores=True)}")
    if not lines:
        lines.append("- Anywhere")
    return "\n".join(lines) + "\n"


def format_rule(rule: Rule, number: int) -> str:
    _, subject_label, all_subjects = _SECTIONS[rule.category]
    patterns = rule.subject_patterns
    if patterns and GLOBAL_WILDCARD not in patterns:
        subjects = f"{subject_label}: {format_ids(patterns)}"
    else:
        subjects = all_subjects
    verdict = "ALLOWED" if rule.criteria.allow else "BLOCKED"
    return f"Rule {number}\n{subjects}\n{verdict} when:\n{format_conditions(rule.criteria)}"


def section_pages(category: RuleCategory, rules: Sequence[Rule]) -> list[str]:
    """Lay out enabled rules of one category, starting a new page at the length limit."""
    heading = _SECTIONS[category][0]
    pages: list[str] = []
    current = f"{heading}\n\n"
    number = 1
    for rule in rules:
        if not rule.criteria.enabled:
            continue
        text = format_rule(rule, number)
        number += 1
        if len(current) + len(text) > MAX_PAGE_LENGTH and current:
            pages.append(current)
            current = ""
        current += text + "\n"
    if current:
        pages.append(current)
    return pages


def generate_almanac(rule_set: RuleSet) -> list[str]:
    pages = [title_page()]
    for category in RuleCategory:
        rules = rule_set.rules_for(category)
        if rules:
            pages.extend(section_pages(category, rules))
    if len(pages) == 1:
        pages.append(NO_RULES_PAGE)
    return pages
