#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
from .catalog import EffectCatalog
from .controller import ControllerState
from .dispatcher import CommandDispatcher
from .errors import (NotConnectedError, PixelTreeError, ProtocolError, RejectedError,
                     TransportError, ValidationError)
from .gateway import DeviceGateway
from .monitor import ConnectionMonitor
from .version import __version__
