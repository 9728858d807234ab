"""Tests for the spatial layout patterns."""

import pytest

from levelforge.config import Bounds, GraphPattern
from levelforge.patterns import PATTERN_REGISTRY, get_pattern, list_patterns


BOUNDS = Bounds(center_x=3.0, center_z=-2.0, size_x=20.0, size_z=16.0)


def _inside(pos, bounds):
    x, y, z = pos
    return y == 0.0 and bounds.min_x <= x <= bounds.max_x and bounds.min_z <= z <= bounds.max_z


# ── Registry ─────────────────────────────────────────────────────────

def test_registry_covers_every_pattern():
    assert set(PATTERN_REGISTRY) == {p.value for p in GraphPattern}
    assert list_patterns() == sorted(p.value for p in GraphPattern)


def test_lookup_by_enum_or_name():
    assert get_pattern(GraphPattern.GRID) is get_pattern("grid")


def test_unknown_pattern():
    with pytest.raises(ValueError, match="Unknown pattern"):
        get_pattern("spiral")


# ── Layouts ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("name", [p.value for p in GraphPattern])
class TestLayouts:
    @pytest.mark.parametrize("count", [1, 2, 7, 12, 30])
    def test_at_most_count_inside_bounds(self, name, count):
        positions = get_pattern(name)().positions(count, BOUNDS)
        assert 0 < len(positions) <= count
        assert all(_inside(p, BOUNDS) for p in positions)

    def test_zero_count(self, name):
        assert get_pattern(name)().positions(0, BOUNDS) == []

    def test_deterministic(self, name):
        pattern = get_pattern(name)()
        assert pattern.positions(10, BOUNDS) == pattern.positions(10, BOUNDS)


@pytest.mark.parametrize("name", ["grid", "circular", "triangular", "tree"])
def test_exact_fill(name):
    assert len(get_pattern(name)().positions(11, BOUNDS)) == 11


def test_grid_is_wider_than_tall():
    positions = get_pattern("grid")().positions(12, BOUNDS)
    xs = {round(p[0], 6) for p in positions}
    zs = {round(p[2], 6) for p in positions}
    assert len(xs) > len(zs)


def test_circular_rings_grow_outward():
    positions = get_pattern("circular")().positions(5, BOUNDS)
    first, outer = positions[0], positions[1]
    ring_radius = ((first[0] - BOUNDS.center_x) ** 2 + (first[2] - BOUNDS.center_z) ** 2) ** 0.5
    outer_radius = ((outer[0] - BOUNDS.center_x) ** 2 + (outer[2] - BOUNDS.center_z) ** 2) ** 0.5
    assert ring_radius < outer_radius
