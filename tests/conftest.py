import asyncio
import os
import sys
from collections import Counter

import pytest

# Ensure runtime/adventure modules can be imported
sys.path.append(os.getcwd())

from runtime.core.errors import AssetNotFound
from runtime.resources.loaders import AssetLoader
from runtime.transitions import TransitionEffect


class GatedLoader(AssetLoader):
    """
    Loader whose loads block until the test opens the gate.

    Addresses in `failures` raise OSError once the gate opens.
    """

    def __init__(self, assets=None, failures=()):
        self.assets = dict(assets or {})
        self.failures = set(failures)
        self.load_counts = Counter()
        self.released = []
        self.gate = asyncio.Event()

    async def load(self, address):
        self.load_counts[address] += 1
        await self.gate.wait()
        if address in self.failures:
            raise OSError(f"disk error reading {address}")
        if address not in self.assets:
            raise AssetNotFound(address)
        return self.assets[address]

    def release(self, address, asset):
        self.released.append(address)


class RecordingTransition(TransitionEffect):
    """Transition that records calls into a shared log and can be held open."""

    def __init__(self, log):
        self.log = log
        self.out_gate = asyncio.Event()
        self.in_gate = asyncio.Event()
        self.out_gate.set()
        self.in_gate.set()

    async def fade_out(self):
        self.log.append("fade_out")
        await self.out_gate.wait()

    async def fade_in(self):
        self.log.append("fade_in_start")
        await self.in_gate.wait()
        self.log.append("fade_in_done")


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from runtime.core.events import EventBus
    return EventBus()


@pytest.fixture
def gated_loader():
    return GatedLoader()


@pytest.fixture
def call_log():
    return []


@pytest.fixture
def recording_transition(call_log):
    return RecordingTransition(call_log)


@pytest.fixture
def database_data():
    """Raw scene database as it comes out of a JSON file."""
    return {
        "scenes": [
            {
                "sceneId": "town",
                "sceneName": "Riverside Town",
                "commands": [
                    {"type": "Move", "parameter": "forest", "label": "To the forest"},
                    {"type": "Shop", "parameter": "Data/Shops/Blacksmith|shop_bk", "label": "Smithy"},
                    {"type": "Talk", "parameter": "npc_elder", "label": "Elder"},
                ],
            },
            {
                "sceneId": "forest",
                "sceneName": "Whispering Wood",
                "autoTriggerStoryId": "story_forest",
                "commands": [
                    {"type": "Move", "parameter": "town", "label": "Back to town"},
                ],
            },
            {
                "sceneId": "cave",
                "sceneName": "Dark Cave",
                "commands": [],
            },
        ],
    }


@pytest.fixture
def shop_data():
    return {"shops": [{"id": "shop_bk", "stock": [{"item_id": "sword", "price": 100}]}]}


@pytest.fixture
def memory_loader(database_data, shop_data):
    from runtime.resources.loaders import MemoryLoader
    return MemoryLoader({"AdventureDatabase": database_data, "Blacksmith": shop_data})


@pytest.fixture
def cache(memory_loader, event_bus):
    from runtime.resources.cache import AssetCache
    return AssetCache(memory_loader, event_bus=event_bus)


@pytest.fixture
def scene_graph(cache):
    """SceneGraph over the sample database (not yet initialized)."""
    from adventure.scene_graph import SceneGraph
    return SceneGraph(cache)
