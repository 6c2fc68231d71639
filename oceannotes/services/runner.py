"""Background asyncio event loop for network-bound work."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine
    from concurrent.futures import Future

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncRunner:
    """
    Runs coroutines on a private event loop in a daemon thread.

    The Qt event loop owns the GUI thread, so all asyncio work (HTTP
    requests and the note store mutations that follow them) happens on this
    runner's single loop thread instead.

    Keyword Args:
        name: Name of the loop thread

    """

    def __init__(self, name: str = "oceannotes-io") -> None:
        #: The name of the loop thread.
        self.name = name
        #: The event loop, once started.
        self._loop: asyncio.AbstractEventLoop | None = None
        #: The thread running :attr:`_loop`.
        self._thread: threading.Thread | None = None
        #: Guards start/stop.
        self._lock = threading.Lock()
        #: Set once the loop is running.
        self._ready = threading.Event()

    @property
    def running(self) -> bool:
        """Whether the loop thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """
        Start the loop thread.  Calling it again while running does nothing.
        """
        with self._lock:
            if self.running:
                return
            self._ready.clear()
            self._loop = asyncio.new_event_loop()
            self._loop.set_exception_handler(self._handle_exception)
            self._thread = threading.Thread(
                target=self._run, name=self.name, daemon=True
            )
            self._thread.start()
        self._ready.wait()

    def _run(self) -> None:
        loop = self._loop
        if loop is None:
            return
        asyncio.set_event_loop(loop)
        loop.call_soon(self._ready.set)
        try:
            loop.run_forever()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(
                    asyncio.gather(*pending, return_exceptions=True)
                )
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()

    @staticmethod
    def _handle_exception(
        loop: asyncio.AbstractEventLoop, context: dict[str, Any]
    ) -> None:
        error = context.get("exception")
        if error is not None:
            logger.error(
                f"Unhandled error in event loop: {context.get('message')}",
                exc_info=error,
            )
        else:
            logger.error(f"Unhandled error in event loop: {context.get('message')}")

    @staticmethod
    def _log_failure(future: Future[Any]) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error("Background task failed", exc_info=error)

    def submit(self, coro: Coroutine[Any, Any, T]) -> Future[T]:
        """
        Schedule a coroutine on the loop thread.

        Exceptions escaping the coroutine are logged; the returned future
        still carries them for callers that wait on it.

        Args:
            coro: Coroutine to run

        Raises:
            RuntimeError: The runner is not running

        Returns:
            A future for the coroutine's result

        """
        if not self.running or self._loop is None:
            coro.close()
            msg = "AsyncRunner is not running"
            raise RuntimeError(msg)
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        future.add_done_callback(self._log_failure)
        return future

    def call(self, callback: Callable[..., Any], *args: Any) -> None:
        """
        Schedule a plain callable on the loop thread.

        Args:
            callback: Function to call
            *args: Positional arguments for ``callback``

        Raises:
            RuntimeError: The runner is not running

        """
        if not self.running or self._loop is None:
            msg = "AsyncRunner is not running"
            raise RuntimeError(msg)
        self._loop.call_soon_threadsafe(callback, *args)

    def run(self, coro: Coroutine[Any, Any, T], timeout: float | None = None) -> T:
        """
        Run a coroutine on the loop thread and wait for its result.

        Must not be called from the loop thread itself.

        Args:
            coro: Coroutine to run

        Keyword Args:
            timeout: Seconds to wait, ``None`` to wait forever

        Returns:
            The coroutine's result

        """
        return self.submit(coro).result(timeout)

    def stop(self, timeout: float = 5.0) -> None:
        """
        Stop the loop, cancelling outstanding tasks, and join the thread.

        Keyword Args:
            timeout: Seconds to wait for the thread to exit

        """
        with self._lock:
            loop = self._loop
            thread = self._thread
            if loop is None or thread is None:
                return
            if thread.is_alive():
                loop.call_soon_threadsafe(loop.stop)
                thread.join(timeout)
            self._loop = None
            self._thread = None
