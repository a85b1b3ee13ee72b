#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Data model shared by the controller core.

Definitions are immutable tuples which are parsed once from the
device's JSON and then passed around by reference.
"""
from __future__ import annotations

from collections import OrderedDict
from typing import Any, NamedTuple

from pixeltree.errors import ProtocolError, ValidationError
from pixeltree.types import ParameterType
from pixeltree.util import clamp


BRIGHTNESS_MIN = 0
BRIGHTNESS_MAX = 255

# Palette count assumed when the catalog doesn't declare one
DEFAULT_PALETTE_COUNT = 256


def _require(data: dict, key: str, types, what: str):
    if key not in data:
        raise ProtocolError("%s is missing '%s'" % (what, key))
    value = data[key]
    if not isinstance(types, tuple):
        types = (types,)
    # bool is an int, but never a valid stand-in for one on the wire
    if (isinstance(value, bool) and bool not in types) or not isinstance(value, types):
        raise ProtocolError("%s has an invalid '%s': %r" % (what, key, value))
    return value


class ParameterDefinition(NamedTuple):
    """
    A single tunable parameter of an effect
    """
    id: str
    type: ParameterType
    default: Any
    name: str = None
    min: int = None
    max: int = None
    options: tuple = None
    depends_on: str = None


    @property
    def domain(self) -> tuple | None:
        """
        Inclusive (low, high) bounds for integer-valued types, None otherwise
        """
        if self.type == ParameterType.UINT8:
            low = BRIGHTNESS_MIN if self.min is None else self.min
            high = BRIGHTNESS_MAX if self.max is None else self.max
            return (clamp(low, 0, 255), clamp(high, 0, 255))

        if self.type == ParameterType.PALETTE:
            if self.options:
                return (0, len(self.options) - 1)
            if self.max is not None:
                return (0, self.max)
            return (0, DEFAULT_PALETTE_COUNT - 1)

        if self.type == ParameterType.ENUM:
            if self.options:
                return (0, len(self.options) - 1)
            return (0, self.max)

        return None


    @property
    def display_name(self) -> str:
        return self.name or self.id


    @classmethod
    def from_json(cls, data: dict) -> ParameterDefinition:
        """
        Parse a parameter definition as served by /api/led/effects

        :raises ProtocolError: if the definition is malformed
        """
        if not isinstance(data, dict):
            raise ProtocolError('Parameter definition must be an object (was: %r)' % (data,))

        pid = _require(data, 'id', str, 'Parameter')
        what = "Parameter '%s'" % pid
        try:
            ptype = ParameterType.from_wire(_require(data, 'type', str, what))
        except ValueError as err:
            raise ProtocolError('%s: %s' % (what, err)) from err

        if 'default' in data:
            default = data['default']
        elif 'defaultValue' in data:
            default = data['defaultValue']
        else:
            raise ProtocolError("%s is missing 'default'" % what)

        bounds = {}
        for key in ('min', 'max'):
            value = data.get(key)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise ProtocolError("%s has an invalid '%s': %r" % (what, key, value))
            bounds[key] = value

        options = data.get('options', data.get('enumValues'))
        if options is not None:
            if not isinstance(options, (list, tuple)) or \
                    not all(isinstance(x, str) for x in options):
                raise ProtocolError('%s has invalid options: %r' % (what, options))
            options = tuple(options)

        if ptype == ParameterType.ENUM and not options and bounds['max'] is None:
            raise ProtocolError('%s is an enum without options' % what)

        depends_on = data.get('dependsOn')
        if depends_on is not None and not isinstance(depends_on, str):
            raise ProtocolError("%s has an invalid 'dependsOn': %r" % (what, depends_on))

        name = data.get('name')
        return cls(id=pid, type=ptype, default=default,
                   name=name if isinstance(name, str) else None,
                   min=bounds['min'], max=bounds['max'], options=options,
                   depends_on=depends_on)


class EffectDefinition(NamedTuple):
    """
    A device effect and its ordered parameters

    The visibility rules are attached when the catalog is built.
    """
    id: int
    name: str
    category: str
    parameters: tuple
    rules: tuple = ()


    def parameter(self, key: str) -> ParameterDefinition | None:
        """
        Get a parameter definition by id
        """
        for param in self.parameters:
            if param.id == key:
                return param
        return None


    @property
    def parameter_ids(self) -> tuple:
        return tuple(param.id for param in self.parameters)


    def defaults(self) -> OrderedDict:
        """
        Default values for all parameters, in declared order
        """
        return OrderedDict((param.id, param.default) for param in self.parameters)


    @classmethod
    def from_json(cls, data: dict) -> EffectDefinition:
        """
        Parse an effect entry from /api/led/effects, without rules

        :raises ProtocolError: if the entry is malformed
        """
        if not isinstance(data, dict):
            raise ProtocolError('Effect definition must be an object (was: %r)' % (data,))

        effect_id = _require(data, 'id', int, 'Effect')
        if effect_id < 0:
            raise ProtocolError('Effect id must not be negative (was: %d)' % effect_id)

        what = 'Effect %d' % effect_id
        name = data.get('name') or ('Effect %d' % effect_id)
        category = data.get('category') or 'uncategorized'

        raw_params = data.get('parameters', [])
        if not isinstance(raw_params, list):
            raise ProtocolError('%s has invalid parameters: %r' % (what, raw_params))

        return cls(id=effect_id, name=str(name), category=str(category).lower(),
                   parameters=tuple(ParameterDefinition.from_json(p) for p in raw_params))


class DeviceStatus(NamedTuple):
    """
    Snapshot of the device's global state, as pulled from /api/led/status
    """
    power: bool
    brightness: int
    effect_id: int
    effect_name: str = ''


    @classmethod
    def from_json(cls, data) -> DeviceStatus:
        """
        :raises ProtocolError: if the response is not a well-formed status
        """
        if not isinstance(data, dict):
            raise ProtocolError('Status must be an object (was: %r)' % (data,))

        power = _require(data, 'power', bool, 'Status')
        brightness = _require(data, 'brightness', int, 'Status')
        effect_id = _require(data, 'effect', int, 'Status')
        if not BRIGHTNESS_MIN <= brightness <= BRIGHTNESS_MAX:
            raise ProtocolError('Status brightness out of range: %d' % brightness)

        effect_name = data.get('effectName')
        return cls(power=power, brightness=brightness, effect_id=effect_id,
                   effect_name=effect_name if isinstance(effect_name, str) else '')


class PendingCommand(NamedTuple):
    """
    A value waiting in a dispatch channel
    """
    channel: str
    value: Any
    enqueued_at: float


def validate_brightness(value) -> int:
    """
    Check a global brightness level

    :raises ValidationError: if not an integer in 0..255
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError('Brightness must be an integer (was: %r)' % (value,))
    if not BRIGHTNESS_MIN <= value <= BRIGHTNESS_MAX:
        raise ValidationError('Brightness must be between %d and %d (was: %d)'
                              % (BRIGHTNESS_MIN, BRIGHTNESS_MAX, value))
    return value
