#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
# pylint: disable=invalid-name
"""
Common types and enumerations which are used by everything.
"""
from enum import Enum, IntEnum


class ParameterType(Enum):
    """
    Enumeration of effect parameter types, valued by their wire names
    """
    UINT8 = 'uint8'
    BOOL = 'bool'
    COLOR = 'color'
    PALETTE = 'palette'
    ENUM = 'enum'

    @classmethod
    def from_wire(cls, name: str) -> 'ParameterType':
        """
        Look up a type by the name the device uses for it

        :raises ValueError: for an unknown type name
        """
        if not isinstance(name, str):
            raise ValueError('Parameter type must be a string (was: %r)' % (name,))

        key = name.strip().lower()
        if key in ('bool_', 'boolean'):
            key = 'bool'
        elif key in ('enumtype', 'enum_type'):
            key = 'enum'
        return cls(key)


class KnownEffect(IntEnum):
    """
    Effects which carry their own visibility rules, by device id
    """
    SCANNER = 9
    RUNNING_LIGHTS = 11
    TWINKLE = 13
    SPARKLE = 15
    GLITTER = 16
    FAIRY = 25
    DISSOLVE = 38
    FADE = 39
    STROBE = 41
