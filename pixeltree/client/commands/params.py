#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Parameter commands: show and change the active effect's parameters.
"""

from argparse import ArgumentParser, Namespace
from typing import ClassVar

from pixeltree.client.commands.base import Command
from pixeltree.client.param_display import ParamDisplay, parse_value
from pixeltree.util import camel_to_snake


def find_parameter(effect, key: str):
    """
    Look up a parameter by id, case-insensitively, or by its snake_case form
    """
    param = effect.parameter(key)
    if param is not None:
        return param

    lowered = key.lower()
    for param in effect.parameters:
        if param.id.lower() == lowered or camel_to_snake(param.id) == lowered:
            return param
    return None


class ParamsCommand(Command):
    """Show the parameters of the active effect."""

    name = "params"
    help = "Show parameters of the active effect"
    aliases: ClassVar[list[str]] = ["p"]

    def configure_parser(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            "-a",
            "--all",
            action="store_true",
            help="include parameters which currently have no effect",
        )

    def run(self, args: Namespace) -> int:
        return self.run_on_device(args, lambda controller: self._show(controller, args.all))

    async def _show(self, controller, show_all: bool) -> int:
        effect = controller.effect
        if effect is None:
            return self.error(f"Unknown effect #{controller.effect_id}")

        display = ParamDisplay(self.out)
        hidden = controller.hidden_parameters()

        self.print(self.out.header(f"{effect.name} {self.out.muted(f'#{effect.id}')}"))
        if not effect.parameters:
            self.print(self.out.muted("  no parameters"))
            return 0

        for param in effect.parameters:
            reason = hidden.get(param.id)
            if reason is not None and not show_all:
                continue

            line = display.format_param_line(param, controller.values.get(param.id))
            if reason is not None:
                line = f"{line} {self.out.muted(f'(hidden: {reason})')}"
            self.print(line)

        return 0


class SetCommand(Command):
    """Change parameters of the active effect."""

    name = "set"
    help = "Change parameters of the active effect"

    def configure_parser(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            "assignments",
            nargs="+",
            metavar="KEY=VALUE",
            help="parameter assignments, e.g. numColors=3 color1=#ff0000",
        )

    def run(self, args: Namespace) -> int:
        pairs = []
        for assignment in args.assignments:
            key, sep, text = assignment.partition("=")
            if not sep or not key.strip():
                return self.error(f"Expected KEY=VALUE, got '{assignment}'")
            pairs.append((key.strip(), text))

        return self.run_on_device(args, lambda controller: self._apply(controller, pairs))

    async def _apply(self, controller, pairs: list[tuple[str, str]]) -> int:
        effect = controller.effect
        if effect is None:
            return self.error(f"Unknown effect #{controller.effect_id}")

        failures = []
        controller.dispatcher.dispatch_failed.connect(lambda name, err: failures.append(err))

        applied = []
        for key, text in pairs:
            param = find_parameter(effect, key)
            if param is None:
                return self.error(f"{effect.name} has no parameter '{key}'")
            applied.append((param, controller.apply_local_edit(param.id, parse_value(param, text))))

        await controller.dispatcher.drain()

        if failures:
            return self.error(str(failures[0]))
        if not controller.connected:
            return self.error(f"Lost connection to {controller.address}")

        display = ParamDisplay(self.out)
        for param, value in applied:
            self.print(self.out.success(f"{self.out.key(param.id)} = {display.format_value(param, value)}"))

        return 0
