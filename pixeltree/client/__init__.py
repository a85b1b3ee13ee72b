#
# Copyright (C) 2026 PixelTree Developers — LGPL-3.0-or-later
#
