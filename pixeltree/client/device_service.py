#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Device service layer for CLI commands.

Bridges the device configuration, the controller core and the
commands. Each command runs as a single coroutine against a
freshly connected controller.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from pixeltree.catalog import EffectCatalog
from pixeltree.config import DeviceConfig
from pixeltree.controller import ControllerState
from pixeltree.dispatcher import CommandDispatcher
from pixeltree.errors import NotConnectedError
from pixeltree.gateway import DeviceGateway
from pixeltree.log import Log
from pixeltree.monitor import ConnectionMonitor


class DeviceService:
    """
    Service layer for device operations.

    Provides:
    - Device selection from the configuration
    - Controller setup and teardown around each command
    """

    def __init__(self):
        self._logger = Log.get("pixeltree.client")
        self._configs: dict[str | None, DeviceConfig] = {}

    # ─────────────────────────────────────────────────────────────────────────
    # Device Selection
    # ─────────────────────────────────────────────────────────────────────────

    def load_config(self, path: str | None = None) -> DeviceConfig:
        """Load (and cache) the device configuration."""
        if path not in self._configs:
            self._configs[path] = DeviceConfig.load(path)
        return self._configs[path]

    def resolve(
        self, device_spec: str | None = None, host: str | None = None, config: str | None = None
    ) -> DeviceConfig:
        """
        Select the device to talk to.

        An explicit host wins over a device name. Without either, the
        only configured device is used if there is exactly one, the
        defaults otherwise.
        """
        root = self.load_config(config)

        if host is not None:
            return root.find(host)
        if device_spec is not None:
            return root.find(device_spec)
        if len(root.children) == 1:
            return root.children[0]
        return root

    def resolve_args(self, args) -> DeviceConfig:
        return self.resolve(
            getattr(args, "device_spec", None),
            getattr(args, "host", None),
            getattr(args, "config", None),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Controller lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def create_gateway(self, device: DeviceConfig) -> DeviceGateway:
        return DeviceGateway(
            device.address, timeout=device.timeout, probe_timeout=device.probe_timeout
        )

    async def open(self, device: DeviceConfig) -> ControllerState:
        """
        Connect to a device and load its catalog and state.

        Raises NotConnectedError if the device doesn't answer.
        """
        gateway = self.create_gateway(device)
        try:
            monitor = ConnectionMonitor(gateway)
            if not await monitor.probe():
                raise NotConnectedError(f"No answer from {gateway.base_url}")

            if device.catalog is not None:
                catalog = EffectCatalog.load(device.catalog)
            else:
                catalog = await EffectCatalog.fetch(gateway)

            dispatcher = CommandDispatcher(
                gateway,
                throttle_window=device.throttle_window,
                debounce_delay=device.debounce_delay,
            )
            controller = ControllerState(catalog, gateway, dispatcher=dispatcher, monitor=monitor)
            if not await controller.refresh_from_device():
                raise NotConnectedError(f"Unable to read state from {gateway.base_url}")

        except BaseException:
            await gateway.close()
            raise

        return controller

    async def probe(self, device: DeviceConfig) -> bool:
        """Check if the device answers, without loading anything."""
        async with self.create_gateway(device) as gateway:
            return await ConnectionMonitor(gateway).probe()

    def run(self, device: DeviceConfig, action: Callable[[ControllerState], Awaitable[Any]]):
        """
        Run an action against a connected controller.

        The controller is closed afterwards, whatever the outcome.
        """

        async def runner():
            controller = await self.open(device)
            try:
                return await action(controller)
            finally:
                await controller.close()

        return asyncio.run(runner())

    def run_probe(self, device: DeviceConfig) -> bool:
        return asyncio.run(self.probe(device))


# Global service instance
_service: DeviceService | None = None


def get_device_service() -> DeviceService:
    """Get the global device service instance."""
    global _service
    if _service is None:
        _service = DeviceService()
    return _service
