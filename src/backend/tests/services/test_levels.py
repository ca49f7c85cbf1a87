"""
Tests for badge level helpers.
"""

import pytest

from services.levels import calculate_level, get_next_level, points_for_level, points_to_next_level


@pytest.mark.unit
class TestLevels:
    """Tests for level thresholds."""

    @pytest.mark.parametrize(
        "points,level",
        [(0, "Freshman"), (49, "Freshman"), (50, "Intermediate"), (199, "Intermediate"),
         (200, "Advanced"), (500, "Expert"), (999, "Expert"), (1000, "Master"), (5000, "Master")],
    )
    def test_calculate_level(self, points: int, level: str) -> None:
        assert calculate_level(points) == level

    def test_next_level(self) -> None:
        assert get_next_level("Freshman") == "Intermediate"
        assert get_next_level("Expert") == "Master"
        assert get_next_level("Master") == "Master"

    def test_points_for_level(self) -> None:
        assert points_for_level("Advanced") == 200

    def test_points_for_unknown_level_raises(self) -> None:
        with pytest.raises(ValueError):
            points_for_level("Grandmaster")

    @pytest.mark.parametrize("points,remaining", [(0, 50), (49, 1), (50, 150), (500, 500), (1200, 0)])
    def test_points_to_next_level(self, points: int, remaining: int) -> None:
        assert points_to_next_level(points) == remaining
