"""
Auto-save of the match in progress.
----

Scoring actions never wait for storage. They hand the latest snapshot to the AutoSaver, which keeps a single pending slot:
a newer snapshot replaces one that has not been written yet, and one drain task writes them strictly in issue order.
So a slow write can never land after (and overwrite) a newer one.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from src.core.models import ActiveGame
from src.db.gateway import PersistenceGateway, Route

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingWrite:
    sequence: int
    snapshot: Optional[ActiveGame]
    # Routing decision in effect when the write was issued.
    route: Route


class AutoSaver:
    def __init__(self, gateway: PersistenceGateway) -> None:
        self.gateway = gateway
        self.issued = 0
        self.written = 0
        self.last_error: Optional[Exception] = None
        self._pending: Optional[PendingWrite] = None
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def idle(self) -> bool:
        return self._pending is None and not self._running

    def submit(self, snapshot: Optional[ActiveGame]) -> None:
        """Queue the snapshot (None clears the stored active game). Returns immediately."""
        self.issued += 1
        if self._pending is not None:
            logger.debug("Auto-save #%d superseded by #%d", self._pending.sequence, self.issued)
        self._pending = PendingWrite(self.issued, snapshot, self.gateway.route)
        self._start_drain()

    async def flush(self) -> None:
        """Wait until every submitted snapshot has been written (or has failed)."""
        while True:
            task = self._task if self._running else None
            if task is None:
                if self._pending is None:
                    return
                task = self._task = asyncio.get_running_loop().create_task(self._drain())
            await task

    @property
    def _running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _start_drain(self) -> None:
        if self._running:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop yet: the write stays pending until flush().
            return
        self._task = loop.create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending is not None:
            write, self._pending = self._pending, None
            await self._write(write)

    async def _write(self, write: PendingWrite) -> None:
        try:
            await self.gateway.save_active_game(write.snapshot, route=write.route)
        except Exception as e:
            # Nobody awaits an auto-save: log it and keep the error for inspection.
            logger.warning("Auto-save #%d to %s store failed: %s", write.sequence, write.route, e)
            self.last_error = e
            return
        self.written = write.sequence
        logger.debug("Auto-save #%d written to %s store", write.sequence, write.route)
