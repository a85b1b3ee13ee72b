#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
CLI main entry point.

Run with:
    python -m pixeltree.client.main
    or via the 'pixeltree' console script
"""

import sys

from pixeltree.client.cli_base import PixelTreeCLI
from pixeltree.client.commands import COMMANDS


def main(args: list[str] | None = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    cli = PixelTreeCLI()

    subparsers = cli.add_subparsers()
    for cmd_cls in COMMANDS:
        cmd_cls.register(cli, subparsers)

    parsed = cli.parse_args(args)

    if getattr(parsed, "command", None) is None or not hasattr(parsed, "cmd_instance"):
        cli.parser.print_help()
        return 0

    try:
        return parsed.cmd_instance.run(parsed)
    except KeyboardInterrupt:
        print()
        return 130
    except Exception as e:
        if parsed.debug:
            raise
        return cli.error(str(e))


def cli_entry() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
