#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Status and probe commands.
"""

from argparse import ArgumentParser, Namespace
from typing import ClassVar

from pixeltree.client.commands.base import Command


class StatusCommand(Command):
    """Show power, brightness and the active effect."""

    name = "status"
    help = "Show device status"
    aliases: ClassVar[list[str]] = ["st"]

    def configure_parser(self, parser: ArgumentParser) -> None:
        pass

    def run(self, args: Namespace) -> int:
        return self.run_on_device(args, self._show)

    async def _show(self, controller) -> int:
        effect = controller.effect
        if effect is not None:
            effect_name = effect.name
        else:
            effect_name = controller.status.effect_name or "unknown"

        self.print(self.device_label(controller))
        rows = [
            ("power", self.out.value("on" if controller.power else "off")),
            ("brightness", self.out.value(str(controller.brightness))),
            ("effect", f"{self.out.value(effect_name)} {self.out.muted(f'#{controller.effect_id}')}"),
        ]
        for line in self.out.columns(rows):
            self.print(line)

        return 0


class ProbeCommand(Command):
    """Check if the device answers."""

    name = "probe"
    help = "Check if the device is reachable"
    aliases: ClassVar[list[str]] = ["ping"]

    def configure_parser(self, parser: ArgumentParser) -> None:
        pass

    def run(self, args: Namespace) -> int:
        device = self.service.resolve_args(args)

        if self.service.run_probe(device):
            return self.success(f"{self.out.device(device.address)} is reachable")

        return self.error(f"{self.out.device(device.address)} is not reachable")
