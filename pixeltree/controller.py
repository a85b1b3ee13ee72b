#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
In-memory mirror of the device's state.

The mirror is updated optimistically on local edits and replaced
wholesale by every successful refresh. Any transport or protocol
failure drops it and moves to the disconnected state; nothing is
retried until the consumer asks for it.
"""
from __future__ import annotations

from frozendict import frozendict
from traitlets import Bool, HasTraits, Instance, Int

from pixeltree.dispatcher import CommandDispatcher
from pixeltree.errors import NotConnectedError, PixelTreeError, ValidationError
from pixeltree.log import Log
from pixeltree.model import validate_brightness
from pixeltree.monitor import ConnectionMonitor
from pixeltree.util import Signal, ensure_future
from pixeltree.visibility import hidden_parameters, visible_parameters


class ControllerState(HasTraits):
    """
    Local view of one device, driven by user input

    Observe the traits for changes. The disconnected signal fires
    with the causing exception when a connected controller loses
    the device.
    """
    connected = Bool(default_value=False, read_only=True)
    power = Bool(default_value=False, read_only=True)
    brightness = Int(default_value=0, min=0, max=255, read_only=True)
    effect_id = Int(default_value=None, allow_none=True, read_only=True)
    values = Instance(klass=frozendict, args=(), read_only=True)


    def __init__(self, catalog, gateway, dispatcher: CommandDispatcher = None,
                 monitor: ConnectionMonitor = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._logger = Log.get('pixeltree.controller')
        self._catalog = catalog
        self._gateway = gateway
        self._dispatcher = dispatcher if dispatcher is not None else CommandDispatcher(gateway)
        self._monitor = monitor if monitor is not None else ConnectionMonitor(gateway)
        self._status = None
        self._generation = 0

        self.disconnected = Signal()

        self._dispatcher.dispatch_failed.connect(self._dispatch_failed)


    @property
    def catalog(self):
        return self._catalog


    @property
    def address(self) -> str:
        return self._gateway.base_url


    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher


    @property
    def monitor(self) -> ConnectionMonitor:
        return self._monitor


    @property
    def status(self):
        """
        The last status fetched from the device, None when disconnected
        """
        return self._status


    @property
    def effect(self):
        """
        Definition of the active effect
        """
        if self.effect_id is None:
            return None
        return self._catalog.get(self.effect_id)


    def visible_parameters(self) -> tuple:
        """
        Parameters of the active effect which are meaningful right now
        """
        return visible_parameters(self.effect, self.values)


    def hidden_parameters(self):
        return hidden_parameters(self.effect, self.values)


    def _require_connected(self):
        if not self.connected:
            raise NotConnectedError('Not connected to %s' % self._gateway.base_url)


    def _snapshot(self, effect_id: int, device_values: dict) -> frozendict:
        # defaults first, so parameters the device didn't report still have a value
        effect = self._catalog.get(effect_id)
        if effect is None:
            self._logger.warning('Device reports unknown effect %s', effect_id)
            return frozendict()

        values = effect.defaults()
        for key in effect.parameter_ids:
            if key not in device_values:
                continue
            try:
                values[key] = self._catalog.validate_value(effect_id, key, device_values[key])
            except ValidationError as err:
                self._logger.warning('Ignoring device value for %s: %s', key, err)

        return frozendict(values)


    def _handle_failure(self, err: Exception):
        was_connected = self.connected
        self._logger.warning('Lost connection to %s: %s', self._gateway.base_url, err)

        # invalidates refreshes which are still in flight
        self._generation += 1
        self._dispatcher.cancel()
        self._monitor.mark_disconnected()
        self._status = None

        with self.hold_trait_notifications():
            self.set_trait('values', frozendict())
            self.set_trait('connected', False)

        if was_connected:
            self.disconnected.fire(err)


    def _dispatch_failed(self, channel: str, err: Exception):
        if isinstance(err, ValidationError):
            # the device refused the value; our mirror is now wrong
            self._logger.warning('Device rejected %s: %s', channel, err)
            if self.connected:
                ensure_future(self.refresh_from_device())
            return

        self._handle_failure(err)


    def _restore(self, previous: dict):
        with self.hold_trait_notifications():
            for name, value in previous.items():
                self.set_trait(name, value)


    async def _device_call(self, coro, previous: dict = None) -> bool:
        try:
            await coro
        except ValidationError:
            # refused by the device, so undo the optimistic update
            if previous:
                self._restore(previous)
            raise
        except PixelTreeError as err:
            self._handle_failure(err)
            return False
        return True


    async def connect(self) -> bool:
        """
        Probe the device and load its state
        """
        if not await self._monitor.probe():
            self._handle_failure(self._monitor_error())
            return False
        return await self.refresh_from_device()


    def _monitor_error(self):
        return NotConnectedError('%s did not answer' % self._gateway.base_url)


    async def retry(self) -> bool:
        """
        Manual reconnection: probe again and reload everything
        """
        self._logger.info('Retrying connection to %s', self._gateway.base_url)
        return await self.connect()


    async def refresh_from_device(self) -> bool:
        """
        Replace the mirror with a fresh snapshot from the device

        The result is dropped if another refresh or a disconnection
        happened in the meantime.
        """
        self._generation += 1
        generation = self._generation

        try:
            status = await self._gateway.get_status()
            device_values = await self._gateway.get_params()
        except PixelTreeError as err:
            if generation == self._generation:
                self._handle_failure(err)
            return False

        if generation != self._generation:
            self._logger.debug('Discarding superseded refresh')
            return False

        self._status = status
        with self.hold_trait_notifications():
            self.set_trait('power', status.power)
            self.set_trait('brightness', status.brightness)
            self.set_trait('effect_id', status.effect_id)
            self.set_trait('values', self._snapshot(status.effect_id, device_values))
            self.set_trait('connected', True)

        self._logger.debug('Refreshed: %s %r', status, dict(self.values))
        return True


    def apply_local_edit(self, key: str, value):
        """
        Change one parameter of the active effect

        The mirror is updated right away and the device follows once
        the edit settles.

        :return: the normalized value
        :raises NotConnectedError: while disconnected
        :raises ValidationError: if the value is invalid; nothing is sent
        """
        self._require_connected()
        effect = self.effect
        if effect is None:
            raise ValidationError('No active effect')

        value = self._catalog.validate_value(effect.id, key, value)

        values = dict(self.values)
        values[key] = value
        self.set_trait('values', frozendict(values))

        self._dispatcher.set_param(key, value)
        return value


    def set_brightness(self, value: int):
        """
        Brightness while adjusting (throttled)
        """
        self._require_connected()
        value = validate_brightness(value)
        self.set_trait('brightness', value)
        self._dispatcher.set_brightness(value)


    async def commit_brightness(self, value: int) -> bool:
        """
        Final brightness of an adjustment, persisted by the device
        """
        self._require_connected()
        value = validate_brightness(value)
        self.set_trait('brightness', value)
        return await self._device_call(self._dispatcher.commit_brightness(value, save=True))


    async def set_power(self, on: bool) -> bool:
        self._require_connected()
        previous = {'power': self.power}
        self.set_trait('power', bool(on))
        return await self._device_call(self._gateway.set_power(bool(on)), previous)


    async def select_effect(self, effect_id: int) -> bool:
        """
        Switch effects and load the new effect's parameters

        :raises ValidationError: for an unknown effect; nothing changes
        :raises RejectedError: if the device refuses the switch; the
            previous effect and values are restored
        """
        self._require_connected()
        effect = self._catalog.require(effect_id)

        # edits still pending belong to the previous effect
        dropped = self._dispatcher.cancel_params()

        previous = {'effect_id': self.effect_id, 'values': self.values}
        with self.hold_trait_notifications():
            self.set_trait('effect_id', effect.id)
            self.set_trait('values', frozendict(effect.defaults()))

        try:
            if not await self._device_call(self._gateway.set_effect(effect.id), previous):
                return False
        except ValidationError:
            if dropped:
                # the restored values include edits that were never sent
                ensure_future(self.refresh_from_device())
            raise

        self._generation += 1
        generation = self._generation
        try:
            device_values = await self._gateway.get_params()
        except PixelTreeError as err:
            if generation == self._generation:
                self._handle_failure(err)
            return False

        if generation == self._generation:
            self.set_trait('values', self._snapshot(effect.id, device_values))
        return True


    async def close(self):
        self._dispatcher.close()
        await self._gateway.close()
