#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Rate control between user input and the device.

Brightness goes through a throttle: the first change is sent right
away and later ones are coalesced until the cool-down ends.
Parameter edits are debounced, with an independent timer per key so
that editing one parameter never cancels the delivery of another.

Every channel serializes its own sends with a lock, so requests for
the same channel reach the device in the order they were made.
Different channels are not ordered relative to each other.
"""
from __future__ import annotations

import asyncio
import time
from contextlib import AsyncExitStack

from pixeltree.errors import PixelTreeError
from pixeltree.log import Log
from pixeltree.model import PendingCommand, validate_brightness
from pixeltree.util import Signal, ensure_future


DEFAULT_THROTTLE_WINDOW = 0.05
DEFAULT_DEBOUNCE_DELAY = 0.05

BRIGHTNESS_CHANNEL = 'brightness'


def param_channel_name(key: str) -> str:
    return 'param:%s' % key


class DispatchChannel(object):
    """
    Base for a single rate-limited lane

    :param name: channel name, used in logs and failure reports
    :param sender: coroutine function which delivers one value
    :param on_error: called with (name, exception) when a timed send fails
    """
    def __init__(self, name: str, sender, on_error=None):
        self._logger = Log.get('pixeltree.dispatcher')
        self._name = name
        self._sender = sender
        self._on_error = on_error
        self._lock = asyncio.Lock()
        self._timer = None
        self._pending = None
        self._inflight = set()
        self._closed = False


    @property
    def name(self) -> str:
        return self._name


    @property
    def pending(self) -> PendingCommand | None:
        """
        The value waiting to be sent, if any
        """
        return self._pending


    @property
    def busy(self) -> bool:
        """
        True while a timer is armed or a send is in flight
        """
        return self._timer is not None or len(self._inflight) > 0


    @property
    def lock(self) -> asyncio.Lock:
        return self._lock


    def _check_open(self):
        if self._closed:
            raise RuntimeError('Channel %s is closed' % self._name)


    def _enqueue(self, value):
        self._pending = PendingCommand(self._name, value, time.monotonic())


    def _arm(self, delay: float, callback):
        self._timer = asyncio.get_running_loop().call_later(delay, callback)


    def _dispatch(self, value):
        task = ensure_future(self._send(value))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)


    async def _send(self, value):
        async with self._lock:
            self._logger.debug('%s: sending %r', self._name, value)
            try:
                await self._sender(value)
            except PixelTreeError as err:
                self._logger.warning('%s: send of %r failed: %s', self._name, value, err)
                self._pending = None
                if self._on_error is not None:
                    self._on_error(self._name, err)


    async def commit(self, value, sender=None):
        """
        Send a value now, bypassing rate control

        Anything pending on this channel is dropped first. Errors
        are raised to the caller.
        """
        self._check_open()
        self.cancel()
        if sender is None:
            sender = self._sender
        await self.settle()

        async with self._lock:
            self._logger.debug('%s: committing %r', self._name, value)
            return await sender(value)


    async def settle(self):
        """
        Wait for sends which already started
        """
        if self._inflight:
            await asyncio.wait(list(self._inflight))


    def cancel(self):
        """
        Disarm the timer and drop the pending value. Sends which
        already started are not affected.
        """
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = None


    def close(self):
        self.cancel()
        self._closed = True


    async def drain(self):
        """
        Wait until nothing is pending or in flight on this channel
        """
        while self.busy:
            if self._inflight:
                await asyncio.wait(list(self._inflight))
            else:
                await asyncio.sleep(0.01)


class ThrottledChannel(DispatchChannel):
    """
    Sends at most one value per cool-down window, never losing the last
    """
    def __init__(self, name: str, sender, window: float = DEFAULT_THROTTLE_WINDOW,
                 on_error=None):
        super().__init__(name, sender, on_error=on_error)
        self._window = window
        self._throttled = False
        self._last_sent = None


    @property
    def throttled(self) -> bool:
        return self._throttled


    def submit(self, value):
        self._check_open()
        self._enqueue(value)
        if not self._throttled:
            self._send_pending()


    def _send_pending(self):
        value = self._pending.value
        self._pending = None
        self._last_sent = value
        self._throttled = True
        self._dispatch(value)
        self._arm(self._window, self._window_elapsed)


    def _window_elapsed(self):
        self._timer = None
        self._throttled = False

        if self._pending is not None and self._pending.value != self._last_sent:
            self._send_pending()
        else:
            self._pending = None


    def cancel(self):
        super().cancel()
        self._throttled = False


    async def commit(self, value, sender=None):
        result = await super().commit(value, sender=sender)
        self._last_sent = value
        return result


class DebouncedChannel(DispatchChannel):
    """
    Sends the latest value once input has been quiet for the delay
    """
    def __init__(self, name: str, sender, delay: float = DEFAULT_DEBOUNCE_DELAY,
                 on_error=None):
        super().__init__(name, sender, on_error=on_error)
        self._delay = delay


    def submit(self, value):
        self._check_open()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._enqueue(value)
        self._arm(self._delay, self._delay_elapsed)


    def _delay_elapsed(self):
        self._timer = None
        pending = self._pending
        self._pending = None
        if pending is not None:
            self._dispatch(pending.value)


class CommandDispatcher(object):
    """
    Turns bursts of local changes into a bounded stream of device requests

    Timed sends are fire-and-forget; their failures are reported
    through the dispatch_failed signal as (channel_name, exception).
    Explicit commits raise instead.
    """
    def __init__(self, gateway, throttle_window: float = DEFAULT_THROTTLE_WINDOW,
                 debounce_delay: float = DEFAULT_DEBOUNCE_DELAY):
        self._logger = Log.get('pixeltree.dispatcher')
        self._gateway = gateway
        self._debounce_delay = debounce_delay
        self._closed = False

        self.dispatch_failed = Signal()

        self._brightness = ThrottledChannel(BRIGHTNESS_CHANNEL, gateway.set_brightness,
                                            window=throttle_window,
                                            on_error=self._channel_failed)
        self._params = {}


    def _channel_failed(self, name, err):
        self.dispatch_failed.fire(name, err)


    def _param_channel(self, key: str) -> DebouncedChannel:
        channel = self._params.get(key)
        if channel is None:
            async def send_param(value, key=key):
                return await self._gateway.set_params({key: value})

            channel = DebouncedChannel(param_channel_name(key), send_param,
                                       delay=self._debounce_delay,
                                       on_error=self._channel_failed)
            self._params[key] = channel
        return channel


    def _check_open(self):
        if self._closed:
            raise RuntimeError('Dispatcher is closed')


    @property
    def channels(self) -> tuple:
        return (self._brightness, *self._params.values())


    @property
    def pending(self) -> tuple:
        """
        Values currently waiting in any channel
        """
        return tuple(ch.pending for ch in self.channels if ch.pending is not None)


    @property
    def busy(self) -> bool:
        return any(ch.busy for ch in self.channels)


    def set_brightness(self, value: int):
        """
        Throttled brightness update, for continuous controls
        """
        self._check_open()
        self._brightness.submit(validate_brightness(value))


    async def commit_brightness(self, value: int, save: bool = True) -> int:
        """
        Send the final brightness of an adjustment immediately

        :param save: ask the device to persist the level
        """
        self._check_open()
        value = validate_brightness(value)

        async def send_final(level):
            return await self._gateway.set_brightness(level, save=save)

        return await self._brightness.commit(value, sender=send_final)


    def set_param(self, key: str, value):
        """
        Debounced update of a single parameter
        """
        self._check_open()
        self._param_channel(key).submit(value)


    async def commit_params(self, params: dict) -> int:
        """
        Send several parameters in one request, right now

        Pending edits of the same keys are dropped; the channel locks
        are held so the request is ordered after earlier sends.
        """
        self._check_open()
        channels = [self._param_channel(key) for key in sorted(params)]
        for channel in channels:
            channel.cancel()
        for channel in channels:
            await channel.settle()

        async with AsyncExitStack() as stack:
            for channel in channels:
                await stack.enter_async_context(channel.lock)
            self._logger.debug('Committing parameters %r', params)
            return await self._gateway.set_params(params)


    async def drain(self):
        """
        Wait until every channel is idle
        """
        while self.busy:
            for channel in self.channels:
                await channel.drain()


    def cancel(self):
        """
        Drop everything pending. Used when the device is considered gone.
        """
        for channel in self.channels:
            channel.cancel()


    def cancel_params(self) -> tuple:
        """
        Drop pending parameter edits, leaving brightness alone

        :return: keys whose pending value was dropped
        """
        dropped = tuple(key for key, channel in self._params.items()
                        if channel.pending is not None)
        for channel in self._params.values():
            channel.cancel()
        return dropped


    def close(self):
        """
        Cancel all timers and refuse further updates
        """
        self._closed = True
        for channel in self.channels:
            channel.close()
