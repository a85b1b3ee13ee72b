#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Power command: query or switch the strip.
"""

from argparse import ArgumentParser, Namespace
from typing import ClassVar

from pixeltree.client.commands.base import Command


class PowerCommand(Command):
    """Query or switch the strip's power."""

    name = "power"
    help = "Switch the strip on or off"
    aliases: ClassVar[list[str]] = ["pw"]

    def configure_parser(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            "state",
            nargs="?",
            choices=["on", "off", "toggle"],
            help="new power state, omit to query",
        )

    def run(self, args: Namespace) -> int:
        return self.run_on_device(args, lambda controller: self._power(controller, args.state))

    async def _power(self, controller, state: str | None) -> int:
        if state is None:
            self.print(f"{self.device_label(controller)}: {self.out.value('on' if controller.power else 'off')}")
            return 0

        on = (not controller.power) if state == "toggle" else state == "on"
        if not await controller.set_power(on):
            return self.error(f"Lost connection to {controller.address}")

        return self.success(f"Power {'on' if on else 'off'}")
