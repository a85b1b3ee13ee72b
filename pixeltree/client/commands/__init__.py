#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
CLI command implementations.

Each command module registers itself via the COMMANDS list.
"""

from pixeltree.client.commands.base import Command
from pixeltree.client.commands.brightness import BrightnessCommand
from pixeltree.client.commands.effects import EffectCommand, EffectsCommand
from pixeltree.client.commands.params import ParamsCommand, SetCommand
from pixeltree.client.commands.power import PowerCommand
from pixeltree.client.commands.status import ProbeCommand, StatusCommand

# Order determines help output order
COMMANDS: list[type[Command]] = [
    StatusCommand,
    ProbeCommand,
    EffectsCommand,
    EffectCommand,
    ParamsCommand,
    SetCommand,
    PowerCommand,
    BrightnessCommand,
]

__all__ = ["COMMANDS", "Command"]
