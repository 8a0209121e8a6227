"""
Optimistic list-mutation controller

Keeps one entity's ListState in sync with the server. Updates and deletes
are applied to the local list immediately and confirmed by the server
afterwards; a failed confirmation puts the target item back the way it was
before the edit and re-raises the error. Only that item is touched, so
mutations of other items confirmed in the meantime survive the rollback.

Each update/delete goes idle -> optimistic-applied -> confirmed | rolled-back.
The optimistic edit and the rollback run synchronously on the event loop, so
the only interleaving points are the awaited network calls. Consequences
accepted here:

- a fetch that completes while a mutation is in flight replaces the list
  (last fetch wins); a later rollback swaps the pre-edit item back into the
  fetched list, or re-inserts it if it was a delete
- concurrent updates of the same item are not serialized
- mutations are never retried
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional, Protocol

from .errors import normalize_error
from .state import Item, ListParams, ListState, Pagination, PendingMutation

logger = logging.getLogger(__name__)


class ListAdapter(Protocol):
    path: str

    def convert_patch(self, patch: dict) -> Item: ...

    async def list(self, params: ListParams) -> tuple[list[Item], Pagination]: ...

    async def create(self, payload: dict) -> Item: ...

    async def update(self, item_id: str, patch: dict) -> Item: ...

    async def delete(self, item_id: str) -> None: ...


def _reraise(exc: Exception):
    """Raise exc as an ApiError, chaining the original when it had to be mapped"""
    error = normalize_error(exc)
    if error is exc:
        raise error
    raise error from exc


class OptimisticListController:
    def __init__(self, adapter: ListAdapter, state: Optional[ListState] = None):
        self.adapter = adapter
        self.state = state if state is not None else ListState()

    @property
    def items(self) -> list[Item]:
        return self.state.items

    def _index_of(self, item_id: str) -> Optional[int]:
        for index, item in enumerate(self.state.items):
            if item.get("id") == item_id:
                return index
        return None

    async def fetch(self, params: Optional[ListParams] = None) -> ListState:
        """Load one page and replace the list; on failure only `error` changes"""
        params = params or self.state.params
        self.state.loading = True
        try:
            items, pagination = await self.adapter.list(params)
        except Exception as e:
            self.state.error = normalize_error(e).message
            logger.error(f"❌ Failed to fetch {self.adapter.path}: {self.state.error}")
            _reraise(e)
        finally:
            self.state.loading = False

        self.state.items = items
        self.state.pagination = pagination
        self.state.params = params
        self.state.error = None
        logger.debug(f"Fetched {len(items)} of {pagination.total} from {self.adapter.path}")
        return self.state

    async def create(self, payload: dict) -> Item:
        """Create remotely, then show the server's item at the head of the list"""
        item = await self._call(self.adapter.create(payload))
        self.state.items = [item] + [i for i in self.state.items if i.get("id") != item["id"]]
        logger.info(f"✅ Created {self.adapter.path} item {item['id']}")
        return item

    def update(self, item_id: str, patch: dict) -> "asyncio.Task[Item]":
        """
        Merge patch into the item now and confirm it with the server.

        Must be called from a running event loop. The optimistic edit is
        visible as soon as this returns. Await the task for the server's
        version of the item and to see a failure; an unawaited task still
        confirms or rolls back, and its failure is only logged.
        """
        loop = asyncio.get_running_loop()
        pending = self._apply_update(item_id, patch)
        return self._track(loop.create_task(self._confirm_update(pending, patch)))

    def delete(self, item_id: str) -> "asyncio.Task[None]":
        """Drop the item now and confirm the delete with the server (await the task for errors)"""
        loop = asyncio.get_running_loop()
        pending = self._apply_delete(item_id)
        return self._track(loop.create_task(self._confirm_delete(pending)))

    @staticmethod
    def _track(task: asyncio.Task) -> asyncio.Task:
        # _confirm_* already logged the failure; mark it retrieved for fire-and-forget callers
        task.add_done_callback(lambda t: t.cancelled() or t.exception())
        return task

    def _apply_update(self, item_id: str, patch: dict) -> PendingMutation:
        pending = PendingMutation.capture(self.state, item_id)
        if pending.previous is None:
            logger.debug(f"Update of {item_id}: not in the local list, sending anyway")
            return pending

        current = pending.previous
        merged = {**current, **self.adapter.convert_patch(patch), "id": current["id"]}
        if "updatedAt" in current:
            merged["updatedAt"] = datetime.now(timezone.utc)

        items = list(self.state.items)
        items[pending.index] = merged
        self.state.items = items
        return pending

    def _apply_delete(self, item_id: str) -> PendingMutation:
        pending = PendingMutation.capture(self.state, item_id, removed=True)
        if pending.previous is None:
            logger.debug(f"Delete of {item_id}: not in the local list, sending anyway")
            return pending

        self.state.items = [i for i in self.state.items if i.get("id") != item_id]
        return pending

    async def _confirm_update(self, pending: PendingMutation, patch: dict) -> Item:
        try:
            item = await self.adapter.update(pending.item_id, patch)
        except Exception as e:
            pending.restore(self.state)
            logger.warning(f"↩️ Update of {pending.item_id} failed, item restored: {e}")
            _reraise(e)

        # Reconcile against the current list; a fetch may have replaced it meanwhile
        index = self._index_of(pending.item_id)
        if index is not None:
            items = list(self.state.items)
            items[index] = item
            self.state.items = items
        logger.info(f"✏️ Updated {self.adapter.path} item {pending.item_id}")
        return item

    async def _confirm_delete(self, pending: PendingMutation) -> None:
        try:
            await self.adapter.delete(pending.item_id)
        except Exception as e:
            pending.restore(self.state)
            logger.warning(f"↩️ Delete of {pending.item_id} failed, item restored: {e}")
            _reraise(e)

        logger.info(f"🗑️ Deleted {self.adapter.path} item {pending.item_id}")

    async def _call(self, coro):
        try:
            return await coro
        except Exception as e:
            logger.warning(f"❌ Request to {self.adapter.path} failed: {e}")
            _reraise(e)
