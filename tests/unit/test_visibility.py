#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""Tests for visibility rules and the resolver."""

import pytest
from frozendict import frozendict

from pixeltree.rules import (
    COMMON_RULES,
    EFFECT_RULES,
    bool_value,
    count_gate,
    hidden_in_mode,
    hidden_unless_mode,
    hidden_when,
    int_value,
)
from pixeltree.types import KnownEffect
from pixeltree.visibility import (
    hidden_parameters,
    hidden_reason,
    is_visible,
    visible_parameters,
)


def visible_ids(effect, values):
    return [param.id for param in visible_parameters(effect, values)]


# ─────────────────────────────────────────────────────────────────────────────
# Rule building blocks
# ─────────────────────────────────────────────────────────────────────────────


class TestRuleFactories:
    """Tests for the predicate factories."""

    def test_value_fallbacks(self):
        values = {"flag": 1, "count": True, "level": 3.0}

        assert bool_value(values, "flag", True) is True
        assert bool_value(values, "missing", False) is False
        assert int_value(values, "count", 4) == 4
        assert int_value(values, "level", 0) == 3

    def test_count_gate(self):
        rules = count_gate("numColors", 3, 5, default=4)

        assert [rule.parameter for rule in rules] == ["color3", "color4", "color5"]
        assert [rule({"numColors": 3}) for rule in rules] == [False, True, True]
        assert [rule({}) for rule in rules] == [False, False, True]

    def test_hidden_when(self):
        rule = hidden_when("color", "rainbowMode", True, default=False)

        assert rule({"rainbowMode": True})
        assert not rule({"rainbowMode": False})
        assert not rule({})
        assert rule.description == "hidden when rainbowMode is on"

    def test_mode_rules(self):
        unless = hidden_unless_mode("palette", "colorMode", 1, default=1)
        during = hidden_in_mode("color", "mode", 2, default=0)

        assert not unless({"colorMode": 1})
        assert unless({"colorMode": 0})
        assert not unless({})
        assert during({"mode": 2})
        assert not during({})

    def test_tables_cover_known_effects(self):
        assert set(EFFECT_RULES) == set(KnownEffect)
        assert {rule.gate for rule in COMMON_RULES} == {
            "threePoint",
            "numColors",
            "rainbowMode",
            "sparkleEnabled",
        }


# ─────────────────────────────────────────────────────────────────────────────
# Resolver
# ─────────────────────────────────────────────────────────────────────────────


class TestResolver:
    """Tests for the visibility resolver."""

    def test_no_effect(self):
        assert visible_parameters(None, {}) == ()
        assert hidden_parameters(None, {}) == {}

    def test_count_gate_hides_extra_colors(self, catalog):
        gradient = catalog.get(1)
        ids = visible_ids(gradient, {"numColors": 4, "threePoint": True})

        assert ids[:5] == ["numColors", "color1", "color2", "color3", "color4"]
        for k in range(5, 9):
            assert f"color{k}" not in ids

    def test_count_gate_default(self, catalog):
        fade = catalog.get(39)
        ids = visible_ids(fade, {})

        assert "color4" in ids
        assert "color5" not in ids

    def test_rainbow_mode_hides_color(self, catalog):
        solid = catalog.get(0)

        assert visible_ids(solid, {"rainbowMode": True}) == ["rainbowMode"]
        assert visible_ids(solid, {"rainbowMode": False}) == ["rainbowMode", "color"]

    def test_declared_dependency_toggle(self, catalog):
        pulse = catalog.get(2)
        on = visible_ids(pulse, {"trail": True})
        off = visible_ids(pulse, {"trail": False})

        assert "trailLength" not in off
        assert on == ["speed", "trail", "trailLength", "direction", "palette"]
        assert on.index("trailLength") == 2

    def test_missing_dependency_value_counts_as_enabled(self, catalog):
        pulse = catalog.get(2)
        assert "trailLength" in visible_ids(pulse, {})

    def test_three_point_hides_middle_color(self, catalog):
        gradient = catalog.get(1)
        param = gradient.parameter("colorMiddle")

        assert not is_visible(gradient, param, {"threePoint": False})
        assert is_visible(gradient, param, {"threePoint": True})

    def test_scanner_counts_dots(self, catalog):
        scanner = catalog.get(9)
        ids = visible_ids(scanner, {"numDots": 3})

        assert ids == ["numDots", "color1", "color2", "color3"]
        assert visible_ids(scanner, {}) == ["numDots", "color1"]

    def test_scanner_color_count_defaults_to_four(self, catalog):
        scanner = catalog.get(9)
        ids = visible_ids(scanner, {"numDots": 8})
        hidden = hidden_parameters(scanner, {"numDots": 8})

        assert ids == ["numDots", "color1", "color2", "color3", "color4"]
        assert list(hidden) == [f"color{k}" for k in range(5, 9)]
        assert hidden["color5"] == "hidden when numColors < 5"

    def test_twinkle_color_mode(self, catalog):
        twinkle = catalog.get(13)

        assert visible_ids(twinkle, {"colorMode": 0}) == ["colorMode", "twinkleColor"]
        assert visible_ids(twinkle, {"colorMode": 1}) == ["colorMode", "palette"]

    def test_dissolve_random_colors(self, catalog):
        dissolve = catalog.get(38)

        assert visible_ids(dissolve, {}) == ["randomColors"]
        assert visible_ids(dissolve, {"randomColors": False}) == ["randomColors", "color"]

    def test_strobe_mode(self, catalog):
        strobe = catalog.get(41)

        assert visible_ids(strobe, {"mode": 2}) == ["mode"]
        assert visible_ids(strobe, {"mode": 1}) == ["mode", "color"]

    def test_hidden_reasons(self, catalog):
        pulse = catalog.get(2)
        hidden = hidden_parameters(pulse, {"trail": False})

        assert hidden == {"trailLength": "hidden when trail is off"}
        assert hidden_reason(pulse, pulse.parameter("speed"), {}) is None

    def test_deterministic(self, catalog):
        fade = catalog.get(39)
        values = frozendict({"numColors": 5})

        first = visible_parameters(fade, values)
        second = visible_parameters(fade, values)

        assert first == second
        assert values == {"numColors": 5}

    @pytest.mark.parametrize("count,expected", [(1, 2), (3, 3), (8, 8), (0, 2)])
    def test_fade_counts(self, catalog, count, expected):
        fade = catalog.get(39)
        colors = [pid for pid in visible_ids(fade, {"numColors": count}) if pid != "numColors"]

        assert len(colors) == expected
