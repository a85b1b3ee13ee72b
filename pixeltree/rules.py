#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Visibility rules for effect parameters.

A rule names one parameter and a predicate over the current values;
when the predicate holds, the parameter is hidden. Rules never make
a parameter visible again.

COMMON_RULES apply to every effect which declares the parameter, and
EFFECT_RULES are keyed by effect id. A gating value the effect doesn't
declare falls back to the rule's default, so an effect without
numColors still shows at most four colorK.
"""
from __future__ import annotations

from typing import Callable, Mapping, NamedTuple

from frozendict import frozendict

from pixeltree.types import KnownEffect


MAX_COLORS = 8


def bool_value(values: Mapping, key: str, default: bool) -> bool:
    """
    Fetch a boolean value, falling back to default if unset or mistyped
    """
    value = values.get(key)
    if isinstance(value, bool):
        return value
    return default


def int_value(values: Mapping, key: str, default: int) -> int:
    """
    Fetch an integer value, falling back to default if unset or mistyped
    """
    value = values.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return int(value)


class VisibilityRule(NamedTuple):
    """
    Hide `parameter` whenever `hides(values)` is true
    """
    parameter: str
    gate: str
    hides: Callable[[Mapping], bool]
    description: str

    def __call__(self, values: Mapping) -> bool:
        return self.hides(values)


def count_gate(count_param: str, first: int, last: int = MAX_COLORS,
               default: int = 1, prefix: str = 'color') -> tuple:
    """
    Hide colorK for every K in first..last greater than the count
    """
    return tuple(VisibilityRule(
        '%s%d' % (prefix, k), count_param,
        lambda values, k=k: int_value(values, count_param, default) < k,
        'hidden when %s < %d' % (count_param, k)) for k in range(first, last + 1))


def hidden_when(parameter: str, toggle: str, state: bool, default: bool) -> VisibilityRule:
    """
    Hide a parameter while a boolean is in the given state
    """
    return VisibilityRule(
        parameter, toggle,
        lambda values: bool_value(values, toggle, default) == state,
        'hidden when %s is %s' % (toggle, 'on' if state else 'off'))


def hidden_unless_mode(parameter: str, mode_param: str, mode: int, default: int) -> VisibilityRule:
    """
    Show a parameter only in one mode of a mode index
    """
    return VisibilityRule(
        parameter, mode_param,
        lambda values: int_value(values, mode_param, default) != mode,
        'hidden unless %s == %d' % (mode_param, mode))


def hidden_in_mode(parameter: str, mode_param: str, mode: int, default: int) -> VisibilityRule:
    """
    Hide a parameter in one mode of a mode index
    """
    return VisibilityRule(
        parameter, mode_param,
        lambda values: int_value(values, mode_param, default) == mode,
        'hidden when %s == %d' % (mode_param, mode))


COMMON_RULES = (
    hidden_when('colorMiddle', 'threePoint', False, default=True),
    *count_gate('numColors', 3, default=4),
    hidden_when('color', 'rainbowMode', True, default=False),
    hidden_when('sparkleColor', 'sparkleEnabled', False, default=True),
)


EFFECT_RULES = frozendict({
    KnownEffect.SCANNER: count_gate('numDots', 2, default=1),
    KnownEffect.RUNNING_LIGHTS: count_gate('numColors', 2, 4, default=4),
    KnownEffect.TWINKLE: (
        hidden_unless_mode('palette', 'colorMode', 1, default=1),
        hidden_unless_mode('twinkleColor', 'colorMode', 0, default=1)),
    KnownEffect.SPARKLE: (hidden_when('colorSpark', 'darkMode', True, default=False),),
    KnownEffect.GLITTER: (hidden_when('colorBg', 'rainbowBg', True, default=True),),
    KnownEffect.FAIRY: (hidden_unless_mode('palette', 'colorMode', 3, default=0),),
    KnownEffect.DISSOLVE: (hidden_when('color', 'randomColors', True, default=True),),
    KnownEffect.FADE: count_gate('numColors', 3, default=4),
    KnownEffect.STROBE: (hidden_in_mode('color', 'mode', 2, default=0),),
})


def rules_for(effect) -> tuple:
    """
    Collect the rules which apply to an effect definition

    :param effect: an EffectDefinition (its own rules are ignored)
    :return: tuple of VisibilityRule, common rules first
    """
    declared = set(effect.parameter_ids)

    rules = [rule for rule in COMMON_RULES if rule.parameter in declared]

    rules.extend(rule for rule in EFFECT_RULES.get(effect.id, ()) \
            if rule.parameter in declared)

    return tuple(rules)
