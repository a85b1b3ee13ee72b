#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
CLI base infrastructure.

Provides the foundation for the pixeltree CLI with:
- Device selection (@device syntax, --device or --host)
- Output styling integration
- Subcommand registration
"""

import logging
import sys
from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter

from pixeltree.client.output import Output
from pixeltree.log import Log
from pixeltree.version import __version__


class PixelTreeCLI:
    """
    Base CLI handler with device selection and semantic output.

    Usage:
        cli = PixelTreeCLI()
        subparsers = cli.add_subparsers()
        # Register commands...
        args = cli.parse_args()
    """

    def __init__(self):
        self.out = Output()
        self.parser = self._create_parser()
        self._subparsers = None

    def _create_parser(self) -> ArgumentParser:
        """Create the root argument parser."""
        parser = ArgumentParser(
            prog="pixeltree",
            description="Control for networked addressable LED strips",
            formatter_class=RawDescriptionHelpFormatter,
            epilog=self._epilog(),
        )

        parser.add_argument(
            "-v",
            "--version",
            action="version",
            version=f"pixeltree {__version__}",
        )
        parser.add_argument(
            "-d",
            "--device",
            type=str,
            metavar="DEVICE",
            help="configured device name or address (or use @device prefix)",
        )
        parser.add_argument(
            "-H",
            "--host",
            type=str,
            metavar="HOST",
            help="device address, bypassing the configuration",
        )
        parser.add_argument(
            "--config",
            type=str,
            metavar="PATH",
            help="device configuration file",
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="enable debug output",
        )
        parser.add_argument(
            "--no-color",
            action="store_true",
            help="disable colored output",
        )

        return parser

    def _epilog(self) -> str:
        """Generate help epilog with examples."""
        return """\
Device Selection:
  @porch             Select a configured device by name
  @192.168.1.40      Select by address
  -d NAME            Explicit flag
  -H HOST            Address only, ignoring the configuration

Examples:
  pixeltree status                 Show power, brightness and effect
  pixeltree @porch effect fade     Activate the Fade effect
  pixeltree set numColors=3        Change a parameter of the active effect
  pixeltree brightness 128 --save  Set and persist brightness
"""

    def _extract_device_spec(self, args: list[str]) -> tuple[str | None, list[str]]:
        """
        Extract @device specifier from argument list.

        Only extracts the first @-prefixed argument.

        Returns:
            (device_spec, remaining_args)
        """
        device_spec = None
        remaining = []

        for arg in args:
            if arg.startswith("@") and len(arg) > 1 and device_spec is None:
                device_spec = arg[1:]
            else:
                remaining.append(arg)

        return device_spec, remaining

    def add_subparsers(self):
        """
        Add subparser container for commands.

        Returns the same subparsers object on subsequent calls.
        """
        if self._subparsers is None:
            self._subparsers = self.parser.add_subparsers(
                title="commands",
                dest="command",
                metavar="COMMAND",
            )
        return self._subparsers

    def parse_args(self, args: list[str] | None = None) -> Namespace:
        """
        Parse command line arguments.

        Handles @device extraction before standard parsing.
        The --device flag takes precedence over @device syntax.
        """
        if args is None:
            args = sys.argv[1:]

        at_device_spec, remaining = self._extract_device_spec(args)

        parsed = self.parser.parse_args(remaining)

        if parsed.device is not None:
            parsed.device_spec = parsed.device
        else:
            parsed.device_spec = at_device_spec

        if parsed.no_color:
            self.out = Output(force_color=False)

        self._configure_logging(parsed)

        return parsed

    def _configure_logging(self, parsed: Namespace) -> None:
        Log.enable_color(self.out.color_enabled)
        Log.set_level(logging.DEBUG if parsed.debug else logging.WARNING)

    # ─────────────────────────────────────────────────────────────────────────
    # Output helpers
    # ─────────────────────────────────────────────────────────────────────────

    def error(self, message: str) -> int:
        """Print error message to stderr, returning exit code 1."""
        print(self.out.error(message), file=sys.stderr)
        return 1

