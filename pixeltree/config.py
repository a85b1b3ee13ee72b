#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
# pylint: disable=no-member, protected-access
import os

from collections import OrderedDict
from typing import NamedTuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from pixeltree.dispatcher import DEFAULT_DEBOUNCE_DELAY, DEFAULT_THROTTLE_WINDOW
from pixeltree.gateway import DEFAULT_BASE_URL, DEFAULT_PROBE_TIMEOUT, DEFAULT_TIMEOUT
from pixeltree.log import Log


CONFIG_PATH = os.path.join(os.path.expanduser('~'), '.config', 'pixeltree', 'devices.yaml')


def _inherited(field):
    def getter(self):
        return self.get(field)
    return getter


class Configuration(object):
    """
    Configuration hierarchy

    This is a hierarchical hack to namedtuple. When a null attribute
    is queried, ask for the parent recursively.

    Also supports loading from YAML with type coercion.

    Call "create" to generate an instance.
    """

    _children = None
    _field_types = None

    @classmethod
    def create(cls, name, fields):
        """
        Create a new Configuration class type.
        """
        mixin_name = "_%sMixin" % name
        mixin = NamedTuple(mixin_name, fields)
        mixin.__new__.__defaults__ = (None,) * len(mixin._fields)

        namespace = {field: property(_inherited(field)) \
                for field in mixin._fields if field != 'parent'}
        namespace['_field_types'] = OrderedDict(fields)

        return type(name, (cls, mixin), namespace)


    def __init__(self, parent=None, *args, **kwargs):
        if isinstance(parent, Configuration):
            parent._add_child(self)


    @property
    def children(self) -> tuple:
        """
        Children which inherit properties of this instance
        """
        return self._children if self._children is not None else ()


    def _add_child(self, child):
        if self._children is None:
            self._children = (child,)
        else:
            self._children = (*self._children, child)


    def _remove_child(self, child):
        if self._children is None:
            return

        self._children = tuple([x for x in self._children if x is not child])


    def own(self, key: str):
        """
        Get a field as set on this node, without inheritance
        """
        return tuple.__getitem__(self, self._fields.index(key))


    def __getitem__(self, key):
        """
        Intercepts calls to fetch from the tuple and searches up the
        hierarchy if necessary to populate fields.
        """
        item = super().__getitem__(key)

        if key != self._fields.index('parent') and item is None and self.parent is not None:
            return self.parent.__getitem__(key)

        return item


    def get(self, key: str, default=None):
        """
        Get a field by name

        :param key: Field name
        :param default: Default value if None
        :return: Value of the field
        """
        value = self.__getitem__(self._fields.index(key))
        if value is None:
            return default
        return value


    def sparsedict(self) -> OrderedDict:
        """
        Fields set on this node only, without inherited values
        """
        fields = tuple([x for x in self._fields if x != 'parent'])
        return OrderedDict([x for x in zip(fields, tuple.__iter__(self)) if x[1] is not None])


    @classmethod
    def _coerce_types(cls, mapping):
        """
        Convert simple types where necessary and ensure ordering
        """
        odict = OrderedDict()
        for field, field_type in cls._field_types.items():
            if field == 'parent' or field not in mapping:
                continue

            val = mapping[field]
            if val is None:
                continue

            if isinstance(val, bool) and field_type is not bool:
                raise ValueError("Can't coerce %s to type %s (from %s [%s])" %
                                 (field, field_type.__name__, val, type(val).__name__))

            if isinstance(val, field_type):
                odict[field] = val
                continue

            if isinstance(val, (dict, list)):
                raise ValueError("Can't coerce %s to type %s (from %s [%s])" %
                                 (field, field_type.__name__, val, type(val).__name__))
            try:
                odict[field] = field_type(val)
            except (TypeError, ValueError):
                raise ValueError("Can't coerce %s to type %s (from %s [%s])" %
                                 (field, field_type.__name__, val, type(val).__name__))

        unknown = set(mapping) - set(cls._field_types) - {'children'}
        if unknown:
            raise ValueError('Unknown configuration fields: %s' % ', '.join(sorted(unknown)))

        return odict


    @classmethod
    def from_dict(cls, mapping, parent=None):
        """
        Recursively create Configuration objects with the parent
        correctly set, returning the top-most parent.
        """
        if mapping is None:
            return None
        if not isinstance(mapping, dict):
            raise ValueError('Configuration node must be a mapping (was: %s)' \
                    % type(mapping).__name__)

        mapping = dict(mapping)
        children = mapping.pop('children', None)
        config = cls(**cls._coerce_types(mapping), parent=parent)

        if children is not None:
            if not isinstance(children, list):
                raise ValueError('children must be a list')
            for child in children:
                cls.from_dict(child, parent=config)

        return config


    @classmethod
    def load_yaml(cls, filename: str):
        """
        Load a hierarchy of sparse objects from a YAML file.

        :param filename: The filename to open.
        :return: The configuration object hierarchy
        """
        try:
            with open(filename, 'r') as yaml_file:
                data = YAML(typ='safe').load(yaml_file)
        except YAMLError as err:
            raise ValueError('Unable to parse %s: %s' % (filename, err)) from err

        return cls.from_dict(data)


BaseDeviceConfig = Configuration.create("DeviceConfig", [ \
    ('name', str),
    ('address', str),
    ('timeout', float),
    ('probe_timeout', float),
    ('throttle_window', float),
    ('debounce_delay', float),
    ('catalog', str),
    ('parent', object)])


class DeviceConfig(BaseDeviceConfig):
    """
    Connection settings for a device

    The root node of the hierarchy holds the defaults, its children
    are the named devices.
    """

    @classmethod
    def _coerce_types(cls, mapping):
        odict = super()._coerce_types(mapping)
        for field in ('timeout', 'probe_timeout', 'throttle_window', 'debounce_delay'):
            if field in odict and odict[field] <= 0:
                raise ValueError('%s must be positive (was: %s)' % (field, odict[field]))
        return odict


    def find(self, spec: str) -> 'DeviceConfig':
        """
        Find a device by name, falling back to treating the spec
        as the address of an unnamed device
        """
        lowered = spec.strip().lower()
        for child in self.children:
            name = child.own('name')
            if name is not None and name.lower() == lowered:
                return child

        device = DeviceConfig(address=spec.strip(), parent=self)
        self._remove_child(device)
        return device


    @classmethod
    def load(cls, filename: str = None) -> 'DeviceConfig':
        """
        Load the device configuration

        A missing default file yields the built-in defaults. An
        explicitly named file must exist.
        """
        logger = Log.get('pixeltree.config')

        if filename is None:
            filename = CONFIG_PATH
            if not os.path.exists(filename):
                logger.debug('No configuration at %s, using defaults', filename)
                return defaults()

        logger.debug('Loading configuration from %s', filename)
        config = cls.load_yaml(filename)
        if config is None:
            return defaults()

        # anything the file leaves out comes from the built-in defaults
        root = defaults()
        return cls.from_dict(_merge(root.sparsedict(), config), parent=None)


def _merge(base: OrderedDict, config: DeviceConfig) -> dict:
    merged = dict(base)
    merged.update(config.sparsedict())
    merged['children'] = [_subtree(child) for child in config.children]
    return merged


def _subtree(config: DeviceConfig) -> dict:
    node = dict(config.sparsedict())
    node['children'] = [_subtree(child) for child in config.children]
    return node


def defaults() -> DeviceConfig:
    """
    Built-in defaults, used when no configuration file exists
    """
    return DeviceConfig(name='default', address=DEFAULT_BASE_URL,
                        timeout=DEFAULT_TIMEOUT, probe_timeout=DEFAULT_PROBE_TIMEOUT,
                        throttle_window=DEFAULT_THROTTLE_WINDOW,
                        debounce_delay=DEFAULT_DEBOUNCE_DELAY)
