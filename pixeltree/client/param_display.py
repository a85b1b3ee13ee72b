#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Parameter display and text parsing.

Converts effect parameters to display lines and command line text
to parameter values.
"""

from typing import Any

from pixeltree.client.output import Output
from pixeltree.errors import ValidationError
from pixeltree.model import ParameterDefinition
from pixeltree.types import ParameterType

_TRUE = ("on", "true", "yes", "1")
_FALSE = ("off", "false", "no", "0")


class ParamDisplay:
    """
    Formats parameter definitions and values for the terminal.
    """

    def __init__(self, out: Output):
        self.out = out

    def get_constraints(self, param: ParameterDefinition) -> str:
        """
        Get constraint string for a parameter (range or choices).

        Returns empty string if no constraints.
        """
        if param.options:
            choices = [x.lower() for x in param.options]
            if len(choices) > 4:
                return f"[{', '.join(choices[:4])}, ...]"
            return f"[{', '.join(choices)}]"

        domain = param.domain
        if domain is None:
            return ""
        return f"[min: {domain[0]}, max: {domain[1]}]"

    def format_value(self, param: ParameterDefinition, value: Any) -> str:
        if value is None:
            display = "none"
        elif param.type == ParameterType.BOOL:
            display = "on" if value else "off"
        elif param.options and isinstance(value, int) and 0 <= value < len(param.options):
            display = f"{param.options[value]} ({value})"
        else:
            display = str(value)

        return self.out.value(display)

    def format_param_line(self, param: ParameterDefinition, value: Any) -> str:
        """
        Format a single parameter for display.

        Returns a line like:
            numColors (uint8) = 4 [min: 1, max: 8]
        """
        return self.out.param_line(
            param.id, param.type.value, self.format_value(param, value), self.get_constraints(param)
        )


def parse_value(param: ParameterDefinition, text: str) -> Any:
    """
    Convert command line text to a value of the parameter's type.

    Enum and palette parameters accept an option name as well as an
    index. Range checks are left to the catalog.
    """
    text = text.strip()

    if param.type == ParameterType.BOOL:
        if text.lower() in _TRUE:
            return True
        if text.lower() in _FALSE:
            return False
        raise ValidationError(f"{param.id} expects on/off, got '{text}'")

    if param.type == ParameterType.COLOR:
        return text

    if param.options:
        lowered = [x.lower() for x in param.options]
        if text.lower() in lowered:
            return lowered.index(text.lower())

    try:
        return int(text, 0)
    except ValueError:
        raise ValidationError(f"{param.id} expects a number, got '{text}'") from None
