#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Base command class for CLI commands.
"""

from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace
from typing import ClassVar

from pixeltree.client.cli_base import PixelTreeCLI
from pixeltree.client.device_service import get_device_service


class Command(ABC):
    """
    Base class for CLI commands.

    Subclasses must implement:
    - name: Command name (used as subparser name)
    - help: Short help text
    - configure_parser(): Add command-specific arguments
    - run(): Execute the command
    """

    name: ClassVar[str]
    help: ClassVar[str]
    aliases: ClassVar[list[str]] = []

    def __init__(self, cli: PixelTreeCLI):
        self.cli = cli

    @property
    def out(self):
        # the CLI swaps its Output when --no-color is parsed
        return self.cli.out

    @property
    def service(self):
        return get_device_service()

    @classmethod
    def register(cls, cli: PixelTreeCLI, subparsers) -> "Command":
        """
        Register this command with the CLI.

        Creates the subparser and returns a command instance.
        """
        instance = cls(cli)

        parser = subparsers.add_parser(
            cls.name,
            help=cls.help,
            aliases=cls.aliases,
        )
        instance.configure_parser(parser)
        parser.set_defaults(cmd_instance=instance)

        return instance

    @abstractmethod
    def configure_parser(self, parser: ArgumentParser) -> None:
        """Add command-specific arguments to the parser."""
        ...

    @abstractmethod
    def run(self, args: Namespace) -> int:
        """
        Execute the command.

        Args:
            args: Parsed arguments

        Returns:
            Exit code (0 for success)
        """
        ...

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def run_on_device(self, args: Namespace, action):
        """
        Run a coroutine function against the selected device.

        The function receives a connected ControllerState.
        """
        device = self.service.resolve_args(args)
        return self.service.run(device, action)

    def device_label(self, controller) -> str:
        return self.out.device(controller.address)

    def print(self, *args, **kwargs):
        """Print to stdout."""
        print(*args, **kwargs)

    def error(self, message: str) -> int:
        """Print error and return exit code 1."""
        print(self.out.error(message))
        return 1

    def success(self, message: str) -> int:
        """Print success and return exit code 0."""
        print(self.out.success(message))
        return 0
