import asyncio
import logging
from typing import Protocol, runtime_checkable

import httpx

import config
from models.event import Event

logger = logging.getLogger(__name__)


@runtime_checkable
class EventDispatcher(Protocol):
    """Accepts an event for delivery. Must not block and must not report
    delivery failures to the caller."""

    def log(self, event: Event) -> None: ...


class EventGateSink:
    """
    Delivers events to the EventGate intake endpoint.

    log() only enqueues and may be called from any thread. A single worker
    posts the queue in submission order, one event at a time. Delivery
    failures are logged and the event is dropped. Events logged before start()
    wait in the queue until the worker runs, so use the sink as an async
    context manager.
    """

    def __init__(self, client: httpx.AsyncClient, url: str = config.EVENT_INTAKE_URL):
        self.client = client
        self.url = url
        self.queue: asyncio.Queue[Event] = asyncio.Queue()
        self.worker: asyncio.Task | None = None
        self.loop: asyncio.AbstractEventLoop | None = None

    def log(self, event: Event) -> None:
        if self.worker is None:
            logger.debug("Sink not started, queueing %s event", event.name.value)
        if self.loop is not None and not self._on_loop():
            self.loop.call_soon_threadsafe(self.queue.put_nowait, event)
        else:
            self.queue.put_nowait(event)

    def _on_loop(self) -> bool:
        try:
            return asyncio.get_running_loop() is self.loop
        except RuntimeError:
            return False

    def start(self):
        if self.worker is None:
            self.loop = asyncio.get_running_loop()
            self.worker = self.loop.create_task(self._run())

    async def aclose(self):
        """Deliver everything already queued, then stop the worker"""
        if self.worker is None:
            return
        await self.queue.join()
        self.worker.cancel()
        try:
            await self.worker
        except asyncio.CancelledError:
            pass
        self.worker = None

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def _run(self):
        while True:
            event = await self.queue.get()
            try:
                await self._post(event)
            except Exception as e:
                logger.warning(
                    "Dropping %s event for session %s: %s",
                    event.name.value,
                    event.session_token,
                    e,
                )
            finally:
                self.queue.task_done()

    async def _post(self, event: Event):
        try:
            response = await self.client.post(
                self.url,
                json=[event.to_eventgate()],
                timeout=config.REQUEST_TIMEOUT,
                headers={"User-Agent": config.USER_AGENT},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(
                "Dropping %s event for session %s: %s",
                event.name.value,
                event.session_token,
                e,
            )
            return
        logger.debug("Delivered %s event for session %s", event.name.value, event.session_token)
