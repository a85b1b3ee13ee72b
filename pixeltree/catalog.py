#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
The effect catalog.

Built once, from the device's effect list or from a file, and shared
by reference afterwards. Nothing in here is mutable.
"""
from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

from frozendict import frozendict
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from pixeltree.errors import ProtocolError, ValidationError
from pixeltree.log import Log
from pixeltree.model import EffectDefinition
from pixeltree.rules import rules_for
from pixeltree.traits import ParameterSchema
from pixeltree.types import ParameterType


def _check_dependencies(effect: EffectDefinition):
    params = {}
    for param in effect.parameters:
        if param.id in params:
            raise ProtocolError("Effect %d declares '%s' twice" % (effect.id, param.id))
        params[param.id] = param

    for param in effect.parameters:
        if param.depends_on is None:
            continue
        target = params.get(param.depends_on)
        if target is None or target.id == param.id:
            raise ProtocolError("Effect %d: '%s' depends on unknown parameter '%s'" \
                    % (effect.id, param.id, param.depends_on))
        if target.type != ParameterType.BOOL:
            raise ProtocolError("Effect %d: '%s' depends on non-boolean '%s'" \
                    % (effect.id, param.id, param.depends_on))

    for param in effect.parameters:
        seen = set()
        current = param
        while current.depends_on is not None:
            if current.id in seen:
                raise ProtocolError("Effect %d: dependency cycle through '%s'" \
                        % (effect.id, param.id))
            seen.add(current.id)
            current = params[current.depends_on]


class EffectCatalog(object):
    """
    Immutable collection of effect definitions, keyed by effect id
    """
    def __init__(self, effects: Iterable[EffectDefinition]):
        self._logger = Log.get('pixeltree.catalog')

        built = {}
        schemas = {}
        for effect in effects:
            if effect.id in built:
                raise ProtocolError('Duplicate effect id: %d' % effect.id)

            _check_dependencies(effect)
            schema = ParameterSchema(effect.parameters)

            params = []
            for param in effect.parameters:
                try:
                    default = schema.validate(param.id, param.default)
                except ValidationError as err:
                    raise ProtocolError("Effect %d: bad default for '%s': %s" \
                            % (effect.id, param.id, err)) from err
                params.append(param._replace(default=default))

            effect = effect._replace(parameters=tuple(params))
            built[effect.id] = effect._replace(rules=rules_for(effect))
            schemas[effect.id] = schema

        self._effects = frozendict((k, built[k]) for k in sorted(built))
        self._schemas = frozendict(schemas)

        self._logger.debug('Catalog ready: %d effects', len(self._effects))


    @classmethod
    def from_json(cls, data) -> EffectCatalog:
        """
        Build the catalog from the /api/led/effects payload

        :raises ProtocolError: if the payload is malformed
        """
        if isinstance(data, dict) and 'effects' in data:
            data = data['effects']
        if not isinstance(data, list):
            raise ProtocolError('Effect list must be an array (was: %s)' % type(data).__name__)

        return cls(EffectDefinition.from_json(entry) for entry in data)


    @classmethod
    def load(cls, filename: str) -> EffectCatalog:
        """
        Load a catalog from a YAML or JSON file in the wire format
        """
        try:
            with open(filename, 'r') as catalog_file:
                data = YAML(typ='safe').load(catalog_file)
        except YAMLError as err:
            raise ProtocolError('Unable to parse catalog %s: %s' % (filename, err)) from err

        return cls.from_json(data)


    @classmethod
    async def fetch(cls, gateway) -> EffectCatalog:
        """
        Download the catalog from the device
        """
        return cls.from_json(await gateway.get_effects())


    def __len__(self):
        return len(self._effects)


    def __iter__(self):
        return iter(self._effects.values())


    def __contains__(self, effect_id):
        return effect_id in self._effects


    def get(self, effect_id: int) -> EffectDefinition | None:
        return self._effects.get(effect_id)


    def require(self, effect_id) -> EffectDefinition:
        """
        Get an effect which must exist

        :raises ValidationError: if the id is unknown
        """
        if isinstance(effect_id, bool) or not isinstance(effect_id, int) \
                or effect_id not in self._effects:
            raise ValidationError('Unknown effect id: %r' % (effect_id,))
        return self._effects[effect_id]


    def find(self, spec: str) -> EffectDefinition | None:
        """
        Look up an effect by id or (case-insensitive) name
        """
        spec = str(spec).strip()
        if spec.isdigit():
            return self.get(int(spec))

        lowered = spec.lower()
        for effect in self._effects.values():
            if effect.name.lower() == lowered:
                return effect
        return None


    def categories(self) -> OrderedDict:
        """
        Effects grouped by category, in order of first appearance
        """
        groups = OrderedDict()
        for effect in self._effects.values():
            groups.setdefault(effect.category, []).append(effect)
        return OrderedDict((k, tuple(v)) for k, v in groups.items())


    def validate_value(self, effect_id: int, key: str, value):
        """
        Validate a parameter value for an effect

        :return: the normalized value
        :raises ValidationError: if the effect, key, or value is invalid
        """
        self.require(effect_id)
        return self._schemas[effect_id].validate(key, value)
