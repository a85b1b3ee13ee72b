#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""Tests for device selection and controller setup."""

import json
from argparse import Namespace

import pytest

import pixeltree.client.device_service as device_service
from pixeltree.client.device_service import DeviceService, get_device_service
from pixeltree.config import DeviceConfig, defaults
from pixeltree.errors import NotConnectedError, TransportError
from pixeltree.gateway import DeviceGateway


class GatewayService(DeviceService):
    """Device service wired to an in-memory gateway."""

    def __init__(self, gateway):
        super().__init__()
        self.gateway = gateway

    def create_gateway(self, device):
        return self.gateway


def write_config(tmp_path, text):
    path = tmp_path / "devices.yaml"
    path.write_text(text)
    return str(path)


TWO_DEVICES = """\
children:
  - name: porch
    address: "10.0.0.7"
  - name: tree
    address: "10.0.0.8"
    timeout: 9
"""


# ─────────────────────────────────────────────────────────────────────────────
# Selection
# ─────────────────────────────────────────────────────────────────────────────


class TestDeviceSelection:
    """Test resolving which device to talk to."""

    def test_defaults_without_devices(self, tmp_path):
        config = write_config(tmp_path, "timeout: 3\n")

        device = DeviceService().resolve(config=config)

        assert device.address == "http://192.168.4.1"
        assert device.timeout == 3.0

    def test_single_device_is_selected(self, tmp_path):
        config = write_config(tmp_path, "children:\n  - name: porch\n    address: '10.0.0.7'\n")

        assert DeviceService().resolve(config=config).own("name") == "porch"

    def test_several_devices_need_a_name(self, tmp_path):
        config = write_config(tmp_path, TWO_DEVICES)
        service = DeviceService()

        assert service.resolve(config=config).own("name") == "default"
        assert service.resolve("tree", config=config).timeout == 9.0
        assert service.resolve("Porch", config=config).address == "10.0.0.7"

    def test_unknown_name_is_an_address(self, tmp_path):
        config = write_config(tmp_path, TWO_DEVICES)

        device = DeviceService().resolve("192.168.1.50", config=config)

        assert device.address == "192.168.1.50"
        assert device.timeout == 5.0

    def test_host_wins(self, tmp_path):
        config = write_config(tmp_path, TWO_DEVICES)

        device = DeviceService().resolve("porch", host="10.9.9.9", config=config)

        assert device.address == "10.9.9.9"

    def test_resolve_args(self, tmp_path):
        config = write_config(tmp_path, TWO_DEVICES)
        args = Namespace(device_spec="tree", host=None, config=config)

        assert DeviceService().resolve_args(args).address == "10.0.0.8"

    def test_config_is_cached(self, tmp_path):
        config = write_config(tmp_path, TWO_DEVICES)
        service = DeviceService()

        assert service.load_config(config) is service.load_config(config)

    def test_create_gateway(self):
        gateway = DeviceService().create_gateway(defaults())

        assert isinstance(gateway, DeviceGateway)
        assert gateway.base_url == "http://192.168.4.1"
        assert gateway.timeout == 5.0
        assert gateway.probe_timeout == 2.0


# ─────────────────────────────────────────────────────────────────────────────
# Controller lifecycle
# ─────────────────────────────────────────────────────────────────────────────


class TestControllerLifecycle:
    """Test opening and closing controllers."""

    def test_run_fetches_catalog(self, gateway):
        service = GatewayService(gateway)

        async def action(controller):
            return controller.connected, controller.effect.name, len(controller.catalog)

        assert service.run(defaults(), action) == (True, "Gradient", 8)
        assert gateway.sent("get_effects") == [()]
        assert gateway.closed is True

    def test_catalog_file(self, tmp_path, gateway, effects_json):
        path = tmp_path / "effects.json"
        path.write_text(json.dumps(effects_json[:2]))
        device = DeviceConfig(catalog=str(path), parent=defaults())

        async def action(controller):
            return len(controller.catalog)

        assert GatewayService(gateway).run(device, action) == 2
        assert gateway.sent("get_effects") == []

    def test_unreachable(self, gateway):
        gateway.errors["probe_status"] = TransportError("timed out")

        with pytest.raises(NotConnectedError):
            GatewayService(gateway).run(defaults(), lambda controller: None)

        assert gateway.closed is True
        assert gateway.sent("get_effects") == []

    def test_state_unreadable(self, gateway):
        gateway.errors["get_params"] = TransportError("reset")

        with pytest.raises(NotConnectedError):
            GatewayService(gateway).run(defaults(), lambda controller: None)

        assert gateway.closed is True

    def test_action_error_closes(self, gateway):
        async def action(controller):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            GatewayService(gateway).run(defaults(), action)

        assert gateway.closed is True

    def test_run_probe(self, gateway):
        service = GatewayService(gateway)

        assert service.run_probe(defaults()) is True
        gateway.error = TransportError("timed out")
        assert service.run_probe(defaults()) is False


class TestServiceSingleton:
    def test_get_device_service(self, monkeypatch):
        monkeypatch.setattr(device_service, "_service", None)

        service = get_device_service()

        assert isinstance(service, DeviceService)
        assert get_device_service() is service
