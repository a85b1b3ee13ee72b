# pixeltree test configuration and shared fixtures
from __future__ import annotations

import asyncio

import pytest

from pixeltree.catalog import EffectCatalog
from pixeltree.log import Log
from pixeltree.model import DeviceStatus


# ─────────────────────────────────────────────────────────────────────────────
# Catalog fixtures
# ─────────────────────────────────────────────────────────────────────────────


def color_params(count: int, start: int = 1) -> list[dict]:
    """colorN parameter definitions, as served by the device."""
    return [
        {"id": f"color{k}", "name": f"Color {k}", "type": "color", "default": "#FF0000"}
        for k in range(start, start + count)
    ]


EFFECTS = [
    {
        "id": 0,
        "name": "Solid",
        "category": "Basic",
        "parameters": [
            {"id": "rainbowMode", "name": "Rainbow", "type": "bool", "default": False},
            {"id": "color", "name": "Color", "type": "color", "default": "#00ff00"},
        ],
    },
    {
        "id": 1,
        "name": "Gradient",
        "category": "Basic",
        "parameters": [
            {"id": "numColors", "type": "uint8", "min": 1, "max": 8, "default": 4},
            *color_params(8),
            {"id": "threePoint", "type": "bool", "default": True},
            {"id": "colorMiddle", "type": "color", "default": "white"},
        ],
    },
    {
        "id": 2,
        "name": "Pulse",
        "category": "Animated",
        "parameters": [
            {"id": "speed", "type": "uint8", "default": 128},
            {"id": "trail", "type": "bool", "default": True},
            {"id": "trailLength", "type": "uint8", "min": 1, "max": 50, "default": 10,
             "dependsOn": "trail"},
            {"id": "direction", "type": "enum", "enumValues": ["Left", "Right"],
             "defaultValue": 0},
            {"id": "palette", "type": "palette", "max": 15, "default": 3},
        ],
    },
    {
        "id": 9,
        "name": "Scanner",
        "category": "Animated",
        "parameters": [
            {"id": "numDots", "type": "uint8", "min": 1, "max": 8, "default": 1},
            *color_params(8),
        ],
    },
    {
        "id": 13,
        "name": "Twinkle",
        "category": "Sparkle",
        "parameters": [
            {"id": "colorMode", "type": "enum", "options": ["Single", "Palette"], "default": 1},
            {"id": "palette", "type": "palette", "default": 0},
            {"id": "twinkleColor", "type": "color", "default": "#ffffff"},
        ],
    },
    {
        "id": 38,
        "name": "Dissolve",
        "category": "Animated",
        "parameters": [
            {"id": "randomColors", "type": "bool", "default": True},
            {"id": "color", "type": "color", "default": "#0000ff"},
        ],
    },
    {
        "id": 39,
        "name": "Fade",
        "category": "Animated",
        "parameters": [
            {"id": "numColors", "type": "uint8", "min": 1, "max": 8, "default": 4},
            *color_params(8),
        ],
    },
    {
        "id": 41,
        "name": "Strobe",
        "category": "Party",
        "parameters": [
            {"id": "mode", "type": "enum", "options": ["Solid", "Rainbow", "Random"], "default": 0},
            {"id": "color", "type": "color", "default": "#ffffff"},
        ],
    },
]


@pytest.fixture
def effects_json() -> list[dict]:
    """The raw effect list, as returned by /api/led/effects."""
    return [dict(effect) for effect in EFFECTS]


@pytest.fixture
def catalog() -> EffectCatalog:
    return EffectCatalog.from_json(EFFECTS)


# ─────────────────────────────────────────────────────────────────────────────
# Fake device
# ─────────────────────────────────────────────────────────────────────────────


class FakeGateway:
    """
    In-memory stand-in for DeviceGateway.

    Records every call as (name, *args). Set `error` to make every call
    fail, or `errors[name]` to fail a single operation.
    """

    def __init__(self, status: DeviceStatus | None = None, params: dict | None = None):
        self.base_url = "http://fake.local"
        self.probe_timeout = 2.0
        self.status = status or DeviceStatus(
            power=True, brightness=100, effect_id=1, effect_name="Gradient"
        )
        self.params = dict(params) if params is not None else {"numColors": 3}
        self.effects = [dict(effect) for effect in EFFECTS]
        self.calls: list[tuple] = []
        self.error: Exception | None = None
        self.errors: dict[str, Exception] = {}
        self.delay = 0.0
        self.closed = False

    async def _call(self, name: str, *args):
        self.calls.append((name, *args))
        if self.delay:
            await asyncio.sleep(self.delay)
        error = self.errors.get(name, self.error)
        if error is not None:
            raise error

    def sent(self, name: str) -> list[tuple]:
        """Arguments of every recorded call to an operation."""
        return [call[1:] for call in self.calls if call[0] == name]

    async def get_status(self, timeout=None):
        await self._call("get_status")
        return self.status

    async def probe_status(self):
        await self._call("probe_status")
        return self.status

    async def get_effects(self):
        await self._call("get_effects")
        return self.effects

    async def get_params(self):
        await self._call("get_params")
        return dict(self.params)

    async def set_effect(self, effect_id):
        await self._call("set_effect", effect_id)
        self.status = self.status._replace(effect_id=effect_id)
        return {"status": "ok", "effect": effect_id}

    async def set_params(self, params):
        await self._call("set_params", dict(params))
        self.params.update(params)
        return len(params)

    async def set_power(self, on):
        await self._call("set_power", on)
        return on

    async def set_brightness(self, value, save=False):
        await self._call("set_brightness", value, save)
        return value

    async def close(self):
        self.closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture(autouse=True)
def quiet_logs():
    """Keep controller warnings out of captured output."""
    Log.set_level(100)
    yield
