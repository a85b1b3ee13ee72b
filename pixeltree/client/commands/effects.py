#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Effect commands: list the catalog and switch effects.
"""

from argparse import ArgumentParser, Namespace
from typing import ClassVar

from pixeltree.client.commands.base import Command


class EffectsCommand(Command):
    """List the effects the device offers."""

    name = "effects"
    help = "List available effects"
    aliases: ClassVar[list[str]] = ["ls"]

    def configure_parser(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            "-c",
            "--category",
            type=str,
            metavar="NAME",
            help="only show effects of this category",
        )

    def run(self, args: Namespace) -> int:
        return self.run_on_device(args, lambda controller: self._list(controller, args.category))

    async def _list(self, controller, category: str | None) -> int:
        categories = controller.catalog.categories()
        if category is not None:
            wanted = category.strip().lower()
            if wanted not in categories:
                known = ", ".join(categories) or "none"
                return self.error(f"Unknown category '{category}' (known: {known})")
            categories = {wanted: categories[wanted]}

        for name, effects in categories.items():
            self.print()
            self.print(self.out.header(f" {name.title()}"))
            for effect in effects:
                if effect.id == controller.effect_id:
                    marker = self.out.active("*")
                else:
                    marker = " "
                self.print(f"  {marker} {self.out.muted(f'{effect.id:3d}')}  {effect.name}")

        self.print()
        return 0


class EffectCommand(Command):
    """Activate an effect by id or name."""

    name = "effect"
    help = "Activate an effect"
    aliases: ClassVar[list[str]] = ["fx"]

    def configure_parser(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            "effect",
            type=str,
            metavar="ID|NAME",
            help="effect id or name",
        )

    def run(self, args: Namespace) -> int:
        return self.run_on_device(args, lambda controller: self._select(controller, args.effect))

    async def _select(self, controller, spec: str) -> int:
        effect = controller.catalog.find(spec)
        if effect is None:
            return self.error(f"Unknown effect: {spec}")

        if not await controller.select_effect(effect.id):
            return self.error(f"Lost connection to {controller.address}")

        return self.success(f"Effect set to {self.out.value(effect.name)}")
