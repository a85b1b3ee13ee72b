#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
from __future__ import annotations

from pixeltree.errors import PixelTreeError
from pixeltree.log import Log
from pixeltree.util import Signal


class ConnectionMonitor(object):
    """
    Liveness probe for the device

    probe() answers a yes/no question and never raises device errors.
    It doesn't retry; callers decide when to probe again.
    """
    def __init__(self, gateway):
        self._logger = Log.get('pixeltree.monitor')
        self._gateway = gateway
        self._connected = None
        self._last_status = None

        self.connection_changed = Signal()


    @property
    def connected(self) -> bool | None:
        """
        Result of the last probe, None if never probed
        """
        return self._connected


    @property
    def last_status(self):
        """
        Status returned by the last successful probe
        """
        return self._last_status


    def _set_connected(self, connected: bool):
        if connected == self._connected:
            return

        self._connected = connected
        self._logger.info('Device at %s is %s', self._gateway.base_url,
                          'reachable' if connected else 'unreachable')
        self.connection_changed.fire(connected)


    def mark_disconnected(self):
        """
        Record a connectivity loss observed elsewhere
        """
        self._set_connected(False)


    async def probe(self) -> bool:
        """
        Check if the device answers a status request in time
        """
        try:
            self._last_status = await self._gateway.probe_status()
        except PixelTreeError as err:
            self._logger.debug('Probe failed: %s', err)
            self._last_status = None
            self._set_connected(False)
            return False

        self._set_connected(True)
        return True
