"""Predicates testing a single rule criterion against a query.

Every predicate is vacuously true when its criterion is absent.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

from territorial.models import GLOBAL_WILDCARD, NAMESPACE_WILDCARD_SUFFIX, Biome, BlockPos

logger = logging.getLogger("territorial.matcher")

DEFAULT_NAMESPACE = "minecraft"
TAG_PREFIX = "#"

_NAMESPACE_RE = re.compile(r"^[a-z0-9_.-]+$")
_PATH_RE = re.compile(r"^[a-z0-9_./-]+$")


def parse_resource_location(text: str) -> str | None:
    """Normalize ``namespace:path`` ids; a bare path gets the default namespace.

    Returns ``None`` when the text is not a valid resource location.
    """
    namespace, sep, path = text.partition(":")
    if not sep:
        namespace, path = DEFAULT_NAMESPACE, text
    if not namespace or not path:
        return None
    if not _NAMESPACE_RE.match(namespace) or not _PATH_RE.match(path):
        return None
    return f"{namespace}:{path}"


def _matches_id_pattern(identifier: str, pattern: str) -> bool:
    if pattern == GLOBAL_WILDCARD:
        return True
    if pattern.endswith(NAMESPACE_WILDCARD_SUFFIX):
        namespace = pattern[: -len(NAMESPACE_WILDCARD_SUFFIX)]
        return identifier.startswith(f"{namespace}:")
    return pattern == identifier


def matches_biome(biome: Biome | None, patterns: Sequence[str]) -> bool:
    """Match a biome against id, namespace wildcard, global wildcard and tag patterns."""
    if not patterns:
        return True

    if biome is None:
        logger.debug("biome_unavailable", extra={"patterns": list(patterns)})
        return False

    for pattern in patterns:
        if not pattern or not pattern.strip():
            continue

        if pattern.startswith(TAG_PREFIX):
            tag_id = parse_resource_location(pattern[len(TAG_PREFIX) :])
            if tag_id is None:
                logger.debug("invalid_biome_tag", extra={"pattern": pattern})
                continue
            if biome.is_tagged(tag_id):
                return True
            continue

        if _matches_id_pattern(biome.id, pattern):
            return True

    return False


def matches_temperature(temperature: float | None, minimum: float | None, maximum: float | None) -> bool:
    if minimum is None and maximum is None:
        return True
    if temperature is None:
        return False
    if minimum is not None and temperature < minimum:
        return False
    if maximum is not None and temperature > maximum:
        return False
    return True


def _within(value: int, lower: int | None, upper: int | None) -> bool:
    if lower is not None and value < lower:
        return False
    if upper is not None and value > upper:
        return False
    return True


def matches_coordinates(
    pos: BlockPos,
    x_min: int | None = None,
    x_max: int | None = None,
    y_min: int | None = None,
    y_max: int | None = None,
    z_min: int | None = None,
    z_max: int | None = None,
) -> bool:
    """Inclusive bounds check on each axis; each bound is independently optional."""
    return (
        _within(pos.x, x_min, x_max)
        and _within(pos.y, y_min, y_max)
        and _within(pos.z, z_min, z_max)
    )


def matches_dimension(dimension_id: str, whitelist: Sequence[str], blacklist: Sequence[str]) -> bool:
    """Whitelist membership if a whitelist exists, else blacklist exclusion."""
    if whitelist:
        return dimension_id in whitelist
    if blacklist:
        return dimension_id not in blacklist
    return True


def matches_subject_type(subject_id: str, patterns: Sequence[str]) -> bool:
    """Match a crop or animal id against exact, ``ns:*`` and ``*`` patterns."""
    if not patterns:
        return True

    for pattern in patterns:
        if not pattern:
            continue
        if _matches_id_pattern(subject_id, pattern):
            return True

    return False
