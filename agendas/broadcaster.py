"""Real-time inbox updates.

Subscribers are WebSocket connections. After every successful write to the
message store the full inbox and its unread count are pushed to all of them;
there is no delta protocol and no delivery guarantee. A client that missed an
event catches up on the next one or by sending ``request-initial-data``.
"""
import logging

from fastapi import WebSocket
from fastapi.concurrency import run_in_threadpool

from .logic import count_unread
from .repositories import MessageRepository, Result

logger = logging.getLogger(__name__)

MESSAGES_UPDATED = "messages-updated"
REQUEST_INITIAL_DATA = "request-initial-data"

def snapshot(repo: MessageRepository) -> dict:
    messages = repo.get_all()
    return {"messages": messages, "unreadCount": count_unread(messages)}

class MessageBroadcaster:
    def __init__(self):
        self.subscribers: set[WebSocket] = set()

    async def connect(self, ws: WebSocket):
        await ws.accept()
        self.subscribers.add(ws)
        logger.info(f"Client connecté ({len(self.subscribers)} au total)")

    def disconnect(self, ws: WebSocket):
        if ws in self.subscribers:
            self.subscribers.discard(ws)
            logger.info(f"Client déconnecté ({len(self.subscribers)} restants)")

    async def send_to(self, ws: WebSocket, payload: dict):
        await ws.send_json({"event": MESSAGES_UPDATED, "data": payload})

    async def broadcast(self, payload: dict):
        for ws in list(self.subscribers):
            try:
                await self.send_to(ws, payload)
            except Exception as e:
                # a dead socket must not keep the others from being updated
                logger.warning(f"Diffusion impossible vers un client, retiré: {e}")
                self.disconnect(ws)

class MessageInbox:
    """MessageRepository wrapper that broadcasts after each successful mutation."""

    def __init__(self, repo: MessageRepository, broadcaster: MessageBroadcaster):
        self.repo = repo
        self.broadcaster = broadcaster

    async def _apply(self, mutation, *args) -> Result:
        # file reads and writes run in the threadpool, sends stay on the loop
        result = await run_in_threadpool(mutation, *args)
        if result.success:
            await self.broadcaster.broadcast(await run_in_threadpool(snapshot, self.repo))
        return result

    async def send(self, data: dict) -> Result:
        return await self._apply(self.repo.save, data)

    async def mark_read(self, id) -> Result:
        return await self._apply(self.repo.set_read, id, True)

    async def mark_unread(self, id) -> Result:
        return await self._apply(self.repo.set_read, id, False)

    async def delete(self, id) -> Result:
        return await self._apply(self.repo.delete, id)

    async def initial_data(self, ws: WebSocket):
        await self.broadcaster.send_to(ws, await run_in_threadpool(snapshot, self.repo))
