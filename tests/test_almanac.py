from __future__ import annotations

from territorial.almanac import (
    MAX_PAGE_LENGTH,
    NO_RULES_PAGE,
    format_conditions,
    format_ids,
    format_range,
    format_rule,
    generate_almanac,
)
from territorial.models import BreedingRule, GrowthRule, RuleCriteria
from territorial.ruleset import RuleSet


def test_no_rules_page() -> None:
    pages = generate_almanac(RuleSet())

    assert len(pages) == 2
    assert pages[0].startswith("Farmer's Almanac")
    assert pages[1] == NO_RULES_PAGE


def test_format_ids_and_ranges() -> None:
    assert format_ids(["minecraft:sweet_berry_bush", "wheat"]) == "Sweet_berry_bush, Wheat"
    assert format_ids(["minecraft:the_nether"], replace_underscores=True) == "The nether"
    assert format_range(-500, 500) == "-500 to 500"
    assert format_range(1.5, None) == "at least 1.5"
    assert format_range(None, 120) == "at most 120"


def test_rule_text_lists_conditions() -> None:
    rule = GrowthRule(
        criteria=RuleCriteria(
            allow=False,
            biomes=("minecraft:desert",),
            temperature_min=1.5,
            y_min=60,
            dimensions_blacklist=("minecraft:the_end",),
        ),
        crop_types=("minecraft:wheat",),
    )

    text = format_rule(rule, 3)

    assert text.startswith("Rule 3\nCrops: Wheat\nBLOCKED when:\n")
    assert "- In biomes: Desert" in text
    assert "- Temperature: at least 1.5" in text
    assert "- Y: at least 60" in text
    assert "- Not in dimensions: The end" in text


def test_unconstrained_rule_applies_anywhere() -> None:
    assert format_conditions(RuleCriteria()) == "- Anywhere\n"
    assert "All animals" in format_rule(BreedingRule(animal_types=("*",)), 1)


def test_sections_skip_disabled_rules_and_split_pages() -> None:
    growth = tuple(
        GrowthRule(criteria=RuleCriteria(x_min=-index, x_max=index, biomes=("minecraft:plains",)))
        for index in range(8)
    )
    breeding = (
        BreedingRule(criteria=RuleCriteria(enabled=False), animal_types=("minecraft:pig",)),
        BreedingRule(animal_types=("minecraft:cow",)),
    )

    pages = generate_almanac(RuleSet(growth=growth, breeding=breeding))

    growth_pages = [page for page in pages if "Crops" in page or "All crops" in page]
    assert len(growth_pages) > 1
    assert all(len(page) <= MAX_PAGE_LENGTH + 1 for page in growth_pages)
    assert pages[1].startswith("Plant Growth Rules")
    breeding_text = "".join(page for page in pages if "Animal" in page)
    assert "Pig" not in breeding_text
    assert "Rule 1\nAnimals: Cow" in breeding_text
