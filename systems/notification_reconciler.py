"""
Notification Reconciler
Keeps a local view of rows consistent with an eventually-consistent change feed
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger('TantalusBot.Reconciler')


class ChangeType(str, Enum):
    INSERT = 'INSERT'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'


@dataclass(frozen=True)
class ChangeEvent:
    change_type: ChangeType
    row: Optional[Dict[str, Any]] = None
    key: Optional[Any] = None  # DELETE feeds may omit the row


class NotificationReconciler:
    """
    Local keyed view fed by INSERT/UPDATE/DELETE events

    Change feeds can drop or truncate payloads (a bulk DELETE arrives
    without any key), so every applied event also marks the view stale
    and schedules a debounced reload from the authoritative loader.
    """

    def __init__(self, loader: Callable[[], Awaitable[List[Dict[str, Any]]]], key_field: str = 'id',
                 bulk_delete_predicate: Optional[Callable[[Dict[str, Any]], bool]] = None,
                 refresh_delay: float = 0.2):
        self.loader = loader
        self.key_field = key_field
        self.bulk_delete_predicate = bulk_delete_predicate
        self.refresh_delay = refresh_delay
        self.rows: Dict[Any, Dict[str, Any]] = {}
        self.stale = True
        self._refresh_task: Optional[asyncio.Task] = None

    def apply(self, event: ChangeEvent) -> bool:
        """
        Apply a change event to the local view

        Returns:
            True if the view changed
        """
        change_type = ChangeType(event.change_type)
        self.stale = True

        if change_type in (ChangeType.INSERT, ChangeType.UPDATE):
            if not event.row or event.row.get(self.key_field) is None:
                logger.warning(f'{change_type.value} event without a {self.key_field}, waiting for reload')
                return False
            key = event.row[self.key_field]
            self.rows[key] = dict(event.row)
            return True

        key = event.key
        if key is None and event.row:
            key = event.row.get(self.key_field)

        if key is not None:
            return self.rows.pop(key, None) is not None

        # Bulk delete: the feed does not say which rows went away
        if self.bulk_delete_predicate is None:
            return False

        removed = [k for k, row in self.rows.items() if self.bulk_delete_predicate(row)]
        for k in removed:
            del self.rows[k]
        logger.info(f'Bulk delete removed {len(removed)} rows from local view')
        return bool(removed)

    async def handle(self, event: ChangeEvent) -> bool:
        """Apply an event and schedule the authoritative reload"""
        changed = self.apply(event)
        self.schedule_refresh()
        return changed

    async def refresh(self) -> List[Dict[str, Any]]:
        """Replace the local view with the authoritative read"""
        rows = await self.loader()
        self.rows = {row[self.key_field]: dict(row) for row in rows}
        self.stale = False
        return self.items()

    def schedule_refresh(self, delay: Optional[float] = None) -> asyncio.Task:
        """Reload after a short delay; a newer request replaces a pending one"""
        if self._refresh_task and not self._refresh_task.done():
            self._refresh_task.cancel()

        self._refresh_task = asyncio.get_running_loop().create_task(
            self._delayed_refresh(self.refresh_delay if delay is None else delay)
        )
        return self._refresh_task

    async def _delayed_refresh(self, delay: float):
        await asyncio.sleep(delay)
        try:
            await self.refresh()
        except Exception as e:
            logger.warning(f'Reload after change event failed, view stays stale: {e}')

    async def close(self):
        if self._refresh_task and not self._refresh_task.done():
            self._refresh_task.cancel()
            try:
                await self._refresh_task
            except asyncio.CancelledError:
                pass

    def items(self) -> List[Dict[str, Any]]:
        return list(self.rows.values())

    @property
    def unread_count(self) -> int:
        return sum(1 for row in self.rows.values() if not row.get('is_read', True))
