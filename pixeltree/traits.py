#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#

# pylint: disable=protected-access, invalid-name, no-member
"""
Traits used to validate parameter values before they are dispatched.

Each effect gets a stub HasTraits object carrying one trait per
parameter, so the checks are the same ones traitlets applies
everywhere else.
"""
from grapefruit import Color
from traitlets import Bool, HasTraits, Int, TraitError, TraitType

from pixeltree.errors import ValidationError
from pixeltree.types import ParameterType


def to_hex_color(value) -> str:
    """
    Normalize an HTML color (hex code or name) to '#rrggbb'

    :raises ValueError: if the value isn't a color
    """
    if isinstance(value, Color):
        return value.html
    if not isinstance(value, str) or value.strip() == '':
        raise ValueError('Unable to parse color from %r' % (value,))
    try:
        return Color.NewFromHtml(value.strip()).html
    except (ValueError, KeyError, IndexError) as err:
        raise ValueError('Unable to parse color from %r' % (value,)) from err


class HexColorTrait(TraitType):
    """
    A traitlet which holds a 24-bit color as an HTML hex string
    and performs coercion as needed.
    """
    info_text = 'an RGB hex color'
    default_value = '#000000'

    def validate(self, obj, value):
        try:
            return to_hex_color(value)
        except ValueError:
            self.error(obj, value)


class StrictInt(Int):
    """
    Subclass of Int which refuses booleans
    """
    def validate(self, obj, value):
        if isinstance(value, bool):
            self.error(obj, value)
        return super().validate(obj, value)


class StrictBool(Bool):
    """
    Subclass of Bool which refuses 0 and 1
    """
    def validate(self, obj, value):
        if not isinstance(value, bool):
            self.error(obj, value)
        return value


def trait_for_parameter(param) -> TraitType:
    """
    Create the trait which validates values of a parameter

    :param param: the ParameterDefinition
    :return: an unbound trait
    """
    if param.type == ParameterType.BOOL:
        return StrictBool()

    if param.type == ParameterType.COLOR:
        return HexColorTrait()

    low, high = param.domain
    return StrictInt(min=low, max=high)


class ParameterSchema(object):
    """
    Validator for the parameters of one effect
    """
    def __init__(self, parameters):
        self._holder = HasTraits()
        self._holder.add_traits(**{p.id: trait_for_parameter(p) for p in parameters})


    def validate(self, key: str, value):
        """
        Validate (and normalize) a value for the given parameter

        :raises ValidationError: for unknown keys or bad values
        """
        if not self._holder.has_trait(key):
            raise ValidationError('Unknown parameter: %s' % key)
        try:
            setattr(self._holder, key, value)
        except TraitError as err:
            raise ValidationError(str(err)) from err
        return getattr(self._holder, key)
