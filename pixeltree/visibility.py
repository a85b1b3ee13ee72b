#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Parameter visibility resolver.

Decides, from an effect and the current parameter values, which
parameters are meaningful right now. Everything here is a pure
function of its inputs and is re-evaluated on every change.
"""
from __future__ import annotations

from collections import OrderedDict
from typing import Mapping

from pixeltree.rules import bool_value


def hidden_reason(effect, param, values: Mapping) -> str | None:
    """
    Explain why a parameter is hidden

    :param effect: the EffectDefinition owning the parameter
    :param param: the ParameterDefinition to check
    :param values: current parameter values
    :return: a short description, or None if the parameter is visible
    """
    # a missing dependency value counts as enabled
    if param.depends_on is not None and not bool_value(values, param.depends_on, True):
        return 'hidden when %s is off' % param.depends_on

    for rule in effect.rules:
        if rule.parameter == param.id and rule(values):
            return rule.description

    return None


def is_visible(effect, param, values: Mapping) -> bool:
    return hidden_reason(effect, param, values) is None


def visible_parameters(effect, values: Mapping) -> tuple:
    """
    Parameters of the effect to expose for editing, in declared order
    """
    if effect is None:
        return ()
    return tuple(param for param in effect.parameters if is_visible(effect, param, values))


def hidden_parameters(effect, values: Mapping) -> OrderedDict:
    """
    Ids of the hidden parameters of the effect mapped to the reason,
    in declared order
    """
    hidden = OrderedDict()
    if effect is None:
        return hidden
    for param in effect.parameters:
        reason = hidden_reason(effect, param, values)
        if reason is not None:
            hidden[param.id] = reason
    return hidden
