#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Terminal styling for the pixeltree CLI.

Commands ask for roles (device, key, value, ...) and never for colors;
the palette below is the only place colors are chosen.
"""

import os
import sys

# role -> (rgb or None, bold)
PALETTE = {
    'device': ((255, 170, 60), True),
    'key': ((120, 200, 255), False),
    'value': ((255, 170, 60), False),
    'header': (None, True),
    'success': ((80, 250, 123), False),
    'error': ((255, 99, 99), False),
    'muted': ((128, 128, 128), False),
    'active': ((80, 250, 123), True),
}

RESET = '\x1b[0m'


def color_wanted(stream=None) -> bool:
    """
    Color only for a real terminal, unless NO_COLOR is set
    """
    if os.environ.get('NO_COLOR'):
        return False
    if stream is None:
        stream = sys.stdout
    if not getattr(stream, 'isatty', None) or not stream.isatty():
        return False
    return os.environ.get('TERM') != 'dumb'


class Output:
    """
    Formats CLI text by role

    :param force_color: True or False to override terminal detection
    """

    def __init__(self, force_color: bool | None = None):
        self._color = color_wanted() if force_color is None else force_color


    @property
    def color_enabled(self) -> bool:
        return self._color


    def style(self, role: str, text) -> str:
        text = str(text)
        if not self._color:
            return text

        rgb, bold = PALETTE[role]
        codes = []
        if bold:
            codes.append('1')
        if rgb is not None:
            codes.append('38;2;%d;%d;%d' % rgb)
        return '\x1b[%sm%s%s' % (';'.join(codes), text, RESET)


    def device(self, text) -> str:
        return self.style('device', text)


    def key(self, text) -> str:
        return self.style('key', text)


    def value(self, text) -> str:
        return self.style('value', text)


    def header(self, text) -> str:
        return self.style('header', text)


    def muted(self, text) -> str:
        return self.style('muted', text)


    def active(self, text) -> str:
        return self.style('active', text)


    def success(self, message: str) -> str:
        return '%s %s' % (self.style('success', '✓'), message)


    def error(self, message: str) -> str:
        return '%s %s' % (self.style('error', '✗'), message)


    def columns(self, rows: list) -> list:
        """
        Right-align the labels of (label, text) rows
        """
        width = max((len(label) for label, _ in rows), default=0)
        return ['  %s │ %s' % (self.header(label.rjust(width)), text)
                for label, text in rows]


    def param_line(self, name: str, type_name: str, current: str | None = None,
                   constraints: str = '') -> str:
        """
        One parameter: name, type, value and constraints
        """
        line = '  %s %s' % (self.key(name), self.muted('(%s)' % type_name))
        if current is not None:
            line += ' = %s' % current
        if constraints:
            line += ' %s' % self.muted(constraints)
        return line
