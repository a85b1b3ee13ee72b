#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Brightness command: get/set global brightness.
"""

from argparse import ArgumentParser, Namespace
from typing import ClassVar

from pixeltree.client.commands.base import Command


class BrightnessCommand(Command):
    """Get or set the global brightness."""

    name = "brightness"
    help = "Get or set brightness"
    aliases: ClassVar[list[str]] = ["bright", "br"]

    def configure_parser(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            "value",
            type=int,
            nargs="?",
            metavar="LEVEL",
            help="brightness level (0-255), omit to query",
        )
        parser.add_argument(
            "--save",
            action="store_true",
            help="ask the device to keep the level across restarts",
        )

    def run(self, args: Namespace) -> int:
        if args.value is None:
            return self.run_on_device(args, self._get_brightness)

        return self.run_on_device(
            args, lambda controller: self._set_brightness(controller, args.value, args.save)
        )

    async def _get_brightness(self, controller) -> int:
        self.print(f"{self.device_label(controller)}: {self.out.value(str(controller.brightness))}")
        return 0

    async def _set_brightness(self, controller, value: int, save: bool) -> int:
        if save:
            ok = await controller.commit_brightness(value)
        else:
            controller.set_brightness(value)
            await controller.dispatcher.drain()
            ok = controller.connected

        if not ok:
            return self.error(f"Lost connection to {controller.address}")

        suffix = " (saved)" if save else ""
        return self.success(f"Brightness set to {value}{suffix}")
