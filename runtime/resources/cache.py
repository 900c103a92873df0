"""
Asynchronous asset cache.

Maps a logical address to one in-flight or completed load. Concurrent
callers asking for the same address share a single backend load:

    cache = AssetCache(JsonFileLoader("data"))
    shop, same_shop = await asyncio.gather(
        cache.acquire("Blacksmith"),
        cache.acquire("Blacksmith"),
    )  # one load, two references
    cache.release("Blacksmith")

All mapping mutations happen on the event loop thread. Backends that block
run their work off-thread and hand the result back to the loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Iterable

from runtime.core.errors import LoadFailed
from runtime.core.events import AssetEvent

if TYPE_CHECKING:
    from runtime.core.events import EventBus
    from runtime.resources.loaders import AssetLoader

logger = logging.getLogger(__name__)


class AssetStatus(Enum):
    """Load status of a cache entry."""
    PENDING = auto()
    SUCCEEDED = auto()
    FAILED = auto()


@dataclass(eq=False)
class AssetHandle:
    """
    Cache entry for one address.

    Attributes:
        address: Logical asset address
        status: Load status, changes from PENDING exactly once
        result: Loaded asset (SUCCEEDED only)
        refcount: Number of successful acquires not yet released
        error: Failure cause (FAILED only)
    """
    address: str
    status: AssetStatus = AssetStatus.PENDING
    result: Any = None
    refcount: int = 0
    error: BaseException | None = None
    _done: asyncio.Future | None = field(default=None, repr=False)

    @property
    def is_done(self) -> bool:
        return self.status is not AssetStatus.PENDING


class AssetCache:
    """
    Deduplicating, reference-counted asset cache.

    Guarantees:
    - At most one handle per address
    - At most one outstanding backend load per address
    - Failed loads are not cached: the next acquire retries
    """

    def __init__(self, loader: AssetLoader, event_bus: EventBus | None = None):
        self.loader = loader
        self.event_bus = event_bus
        self._handles: dict[str, AssetHandle] = {}
        self._tasks: set[asyncio.Task] = set()
        # Loads still in flight when the cache was torn down
        self._orphans: dict[str, AssetHandle] = {}
        self._generation = 0

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, address: str) -> bool:
        return address in self._handles

    @property
    def addresses(self) -> list[str]:
        return list(self._handles)

    def get_handle(self, address: str) -> AssetHandle | None:
        """Get the current handle for an address without loading."""
        return self._handles.get(address)

    def is_cached(self, address: str) -> bool:
        """True if the address has a successfully loaded asset."""
        handle = self._handles.get(address)
        return handle is not None and handle.status is AssetStatus.SUCCEEDED

    async def acquire(self, address: str) -> Any:
        """
        Get the asset at an address, loading it if needed.

        Raises:
            LoadFailed: The backend load for this address failed
        """
        handle = self._handles.get(address)

        if handle is not None and handle.status is AssetStatus.SUCCEEDED:
            handle.refcount += 1
            return handle.result

        if handle is None:
            handle = self._adopt_orphan(address)

        if handle is None or handle.status is AssetStatus.FAILED:
            handle = self._start_load(address)

        generation = self._generation
        # Shield so a cancelled waiter never cancels the shared load
        await asyncio.shield(handle._done)

        if handle.status is AssetStatus.FAILED:
            raise LoadFailed(address, handle.error)

        if generation == self._generation:
            handle.refcount += 1
        return handle.result

    async def preload(self, addresses: Iterable[str]) -> dict[str, Any]:
        """
        Acquire several addresses concurrently.

        Failed addresses are left out of the result (the failure is
        already logged).
        """
        addresses = list(dict.fromkeys(addresses))
        results = await asyncio.gather(
            *(self.acquire(address) for address in addresses),
            return_exceptions=True,
        )

        loaded = {}
        for address, result in zip(addresses, results):
            if isinstance(result, LoadFailed):
                continue
            if isinstance(result, BaseException):
                raise result
            loaded[address] = result
        return loaded

    def release(self, address: str) -> None:
        """
        Drop one reference to an address.

        When the last reference goes, the entry is removed and the backend
        may free the asset. Unknown addresses are ignored. In-flight loads
        are never cancelled.
        """
        handle = self._handles.get(address)
        if handle is None:
            return

        if handle.status is AssetStatus.PENDING:
            logger.debug(f"[AssetCache] Release ignored, load still in flight: {address}")
            return

        if handle.status is AssetStatus.FAILED:
            del self._handles[address]
            return

        handle.refcount = max(0, handle.refcount - 1)
        if handle.refcount == 0:
            del self._handles[address]
            self._free(handle)

    def teardown(self) -> None:
        """Release every entry. The cache behaves as cold afterwards."""
        handles = list(self._handles.values())
        self._handles.clear()
        self._generation += 1

        for handle in handles:
            if handle.status is AssetStatus.PENDING:
                self._orphans[handle.address] = handle
            elif handle.status is AssetStatus.SUCCEEDED:
                handle.refcount = 0
                self._free(handle)

        logger.info(f"[AssetCache] Torn down, released {len(handles)} entries.")

    def _adopt_orphan(self, address: str) -> AssetHandle | None:
        """Reattach a load started before teardown instead of loading twice."""
        handle = self._orphans.pop(address, None)
        if handle is None or handle.is_done:
            return None
        logger.debug(f"[AssetCache] Reattaching in-flight load: {address}")
        self._handles[address] = handle
        return handle

    def _start_load(self, address: str) -> AssetHandle:
        loop = asyncio.get_running_loop()
        handle = AssetHandle(address=address, _done=loop.create_future())
        self._handles[address] = handle

        task = loop.create_task(self._run_load(handle))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.debug(f"[AssetCache] Loading asset: {address}")
        self._publish(AssetEvent.LOAD_STARTED, address=address)
        return handle

    async def _run_load(self, handle: AssetHandle) -> None:
        try:
            result = await self.loader.load(handle.address)
        except Exception as e:
            handle.status = AssetStatus.FAILED
            handle.error = e
            logger.error(f"[AssetCache] Failed to load asset at address: {handle.address} ({e})")
            self._publish(AssetEvent.LOAD_FAILED, address=handle.address, error=e)
        else:
            handle.status = AssetStatus.SUCCEEDED
            handle.result = result
            self._publish(AssetEvent.LOAD_SUCCEEDED, address=handle.address)

            if self._handles.get(handle.address) is not handle:
                # Torn down while loading; nobody owns the result
                self._free(handle)
        finally:
            if handle.status is AssetStatus.PENDING:
                handle.status = AssetStatus.FAILED
                handle.error = asyncio.CancelledError()
            if self._orphans.get(handle.address) is handle:
                del self._orphans[handle.address]
            if not handle._done.done():
                handle._done.set_result(None)

    def _free(self, handle: AssetHandle) -> None:
        try:
            self.loader.release(handle.address, handle.result)
        except Exception:
            logger.exception(f"[AssetCache] Backend failed to release: {handle.address}")
        self._publish(AssetEvent.RELEASED, address=handle.address)

    def _publish(self, event_type: AssetEvent, **data: Any) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, **data)

