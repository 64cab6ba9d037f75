import asyncio
from typing import Awaitable, Callable

from loguru import logger

from clinic.domain.models import Appointment

ConfirmationTask = Callable[[Appointment], Awaitable[None]]

DEFAULT_WORKERS: int = 2
DEFAULT_QUEUE_SIZE: int = 100


class ConfirmationDispatcher:
    """Bounded pool of background workers running confirmation tasks.

    ``submit`` never waits: the job is queued and the caller moves on. Nobody
    observes a job's outcome. A job that fails or times out is logged and
    dropped, and so is a job submitted while the queue is full or the pool is
    not running.

    Start the pool from a running event loop:

        dispatcher = ConfirmationDispatcher(ConfirmationNotifier())
        await dispatcher.start()
        dispatcher.submit(appointment)
        ...
        await dispatcher.close()
    """

    def __init__(
        self,
        task: ConfirmationTask,
        *,
        workers: int = DEFAULT_WORKERS,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        timeout_seconds: float | None = None,
    ) -> None:
        self._task = task
        self._worker_count = workers
        self._timeout = timeout_seconds
        self._queue: asyncio.Queue[Appointment] = asyncio.Queue(maxsize=queue_size)
        self._workers: list[asyncio.Task[None]] = []

    @property
    def running(self) -> bool:
        return bool(self._workers)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def start(self) -> None:
        if self.running:
            return
        self._workers = [
            asyncio.create_task(self._work(), name=f"confirmation-worker-{i}")
            for i in range(self._worker_count)
        ]
        logger.info("Confirmation dispatcher started with {} worker(s)", self._worker_count)

    def submit(self, appointment: Appointment) -> bool:
        """Queue a confirmation for ``appointment``. Returns False if it was dropped."""
        if not self.running:
            logger.warning(
                "Confirmation dispatcher not running; dropping appointment {}", appointment.id
            )
            return False
        try:
            self._queue.put_nowait(appointment)
        except asyncio.QueueFull:
            logger.warning("Confirmation queue full; dropping appointment {}", appointment.id)
            return False
        logger.debug("Confirmation queued for appointment {}", appointment.id)
        return True

    async def drain(self) -> None:
        """Wait until every queued confirmation has been processed."""
        if self.running:
            await self._queue.join()

    async def close(self) -> None:
        if not self.running:
            return
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        # Queued jobs belong to this run; a later start() begins empty.
        dropped = 0
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
            dropped += 1
        if dropped:
            logger.warning("Dropped {} queued confirmation(s) on shutdown", dropped)
        logger.info("Confirmation dispatcher stopped")

    async def _work(self) -> None:
        while True:
            appointment = await self._queue.get()
            try:
                if self._timeout is None:
                    await self._task(appointment)
                else:
                    await asyncio.wait_for(self._task(appointment), self._timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    "Confirmation for appointment {} timed out after {}s; dropping it",
                    appointment.id,
                    self._timeout,
                )
            except Exception:
                logger.exception("Confirmation for appointment {} failed; dropping it", appointment.id)
            finally:
                self._queue.task_done()
