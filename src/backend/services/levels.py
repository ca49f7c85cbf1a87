"""
Badge level thresholds and helpers.

Levels are a coarse tier derived from the total point balance. The table is
ordered by threshold; a user's level is the highest tier whose threshold is
at or below their balance.
"""

from typing import TypedDict


class LevelDefinition(TypedDict):
    """Type for level definition entries."""

    level: int
    name: str
    points_required: int


LEVEL_DEFINITIONS: list[LevelDefinition] = [
    {"level": 1, "name": "Freshman", "points_required": 0},
    {"level": 2, "name": "Intermediate", "points_required": 50},
    {"level": 3, "name": "Advanced", "points_required": 200},
    {"level": 4, "name": "Expert", "points_required": 500},
    {"level": 5, "name": "Master", "points_required": 1000},
]

LEVEL_NAMES: list[str] = [definition["name"] for definition in LEVEL_DEFINITIONS]
MAX_LEVEL: str = LEVEL_NAMES[-1]


def calculate_level(points: int) -> str:
    """Return the name of the highest level reached with `points`."""
    current = LEVEL_NAMES[0]
    for definition in LEVEL_DEFINITIONS:
        if points >= definition["points_required"]:
            current = definition["name"]
    return current


def get_next_level(current_level: str) -> str:
    """Level after `current_level`; Master is its own successor."""
    index = LEVEL_NAMES.index(current_level)
    if index < len(LEVEL_NAMES) - 1:
        return LEVEL_NAMES[index + 1]
    return MAX_LEVEL


def points_for_level(level: str) -> int:
    """Threshold of a level by name."""
    for definition in LEVEL_DEFINITIONS:
        if definition["name"] == level:
            return definition["points_required"]
    raise ValueError(f"Unknown level: {level}")


def points_to_next_level(points: int) -> int:
    """Points still needed for the next level, 0 once at Master."""
    current = calculate_level(points)
    if current == MAX_LEVEL:
        return 0
    return max(points_for_level(get_next_level(current)) - points, 0)
