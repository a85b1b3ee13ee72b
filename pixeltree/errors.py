#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
"""
Exceptions raised by the controller core.

Transport and protocol failures mean the device can no longer be
trusted and are surfaced as a disconnection. Validation failures are
local and never reach the network.
"""


class PixelTreeError(Exception):
    """Base class for all controller errors."""


class TransportError(PixelTreeError):
    """The device could not be reached (connect failure, timeout, reset)."""


class NotConnectedError(TransportError):
    """An edit was attempted while the controller is disconnected."""


class ProtocolError(PixelTreeError):
    """The device answered with something we don't understand."""

    def __init__(self, message: str, status: int = None):
        super().__init__(message)
        self.status = status


class ValidationError(PixelTreeError, ValueError):
    """A value is outside the domain declared for it."""


class RejectedError(ValidationError):
    """The device refused a request with a 4xx response."""

    def __init__(self, message: str, status: int):
        super().__init__('%s (HTTP %d)' % (message, status))
        self.status = status
        self.device_message = message
