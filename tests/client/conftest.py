#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""Shared fixtures for CLI tests."""

import pytest

from pixeltree.client.device_service import DeviceService
from pixeltree.config import DeviceConfig, defaults
from pixeltree.controller import ControllerState
from pixeltree.dispatcher import CommandDispatcher
from pixeltree.errors import NotConnectedError


class MockDeviceService(DeviceService):
    """Device service that talks to an in-memory gateway instead of the network."""

    def __init__(self, catalog, gateway):
        super().__init__()
        self.catalog = catalog
        self.gateway = gateway
        self.reachable = True
        self.opened = []

    def load_config(self, path=None):
        if path not in self._configs:
            self._configs[path] = DeviceConfig.from_dict(
                dict(
                    defaults().sparsedict(),
                    children=[
                        {"name": "porch", "address": "10.0.0.7"},
                        {"name": "tree", "address": "10.0.0.8"},
                    ],
                )
            )
        return self._configs[path]

    async def open(self, device):
        self.opened.append(device)
        if not self.reachable:
            raise NotConnectedError(f"No answer from {device.address}")

        dispatcher = CommandDispatcher(self.gateway, throttle_window=0.01, debounce_delay=0.01)
        controller = ControllerState(self.catalog, self.gateway, dispatcher=dispatcher)
        await controller.connect()
        return controller

    async def probe(self, device):
        return self.reachable


@pytest.fixture(autouse=True)
def service(catalog, gateway, monkeypatch):
    """Replace the device service singleton with a mock."""
    mock = MockDeviceService(catalog, gateway)
    monkeypatch.setattr("pixeltree.client.device_service._service", mock)
    monkeypatch.setattr("pixeltree.client.commands.base.get_device_service", lambda: mock)
    return mock
