"""Event loop management with cooperative interruption."""

import asyncio
import signal
import sys
import threading
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar, cast

T = TypeVar("T")


def _cancel_all_tasks(loop: asyncio.AbstractEventLoop) -> None:
    """Cancel all pending tasks on the event loop."""
    tasks = asyncio.all_tasks(loop)
    for task in tasks:
        task.cancel()

    if tasks:
        loop.run_until_complete(asyncio.gather(*tasks, return_exceptions=True))


def _shutdown_asyncgens(loop: asyncio.AbstractEventLoop) -> None:
    """Shutdown all async generators."""
    try:
        loop.run_until_complete(loop.shutdown_asyncgens())
    except RuntimeError:
        pass


def _shutdown_default_executor(loop: asyncio.AbstractEventLoop) -> None:
    """Shutdown the default executor."""
    try:
        loop.run_until_complete(loop.shutdown_default_executor())
    except RuntimeError:
        pass


def _run_in_fresh_loop(
    coro: Coroutine[Any, Any, T],
    on_interrupt: Callable[[], None] | None = None,
) -> T:
    """Run *coro* in a new loop.

    The first SIGINT/SIGTERM calls ``on_interrupt`` inside the loop so the
    run can stop cooperatively; a second one (or the first, without a
    callback) cancels every task.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    original_sigint = None
    original_sigterm = None
    signals_seen = 0

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal signals_seen
        signals_seen += 1
        if on_interrupt is not None and signals_seen == 1:
            loop.call_soon_threadsafe(on_interrupt)
            return
        for task in asyncio.all_tasks(loop):
            loop.call_soon_threadsafe(task.cancel)

    # Install signal handlers only on Unix main thread.
    install = sys.platform != "win32" and threading.current_thread() is threading.main_thread()
    if install:
        original_sigint = signal.signal(signal.SIGINT, signal_handler)
        original_sigterm = signal.signal(signal.SIGTERM, signal_handler)

    try:
        return loop.run_until_complete(coro)
    except asyncio.CancelledError:
        if signals_seen:
            raise KeyboardInterrupt from None
        raise
    finally:
        try:
            _cancel_all_tasks(loop)
            _shutdown_asyncgens(loop)
            _shutdown_default_executor(loop)
        finally:
            asyncio.set_event_loop(None)
            loop.close()

        if install:
            if original_sigint is not None:
                signal.signal(signal.SIGINT, original_sigint)
            if original_sigterm is not None:
                signal.signal(signal.SIGTERM, original_sigterm)


def safe_async_run(
    coro: Coroutine[Any, Any, T],
    on_interrupt: Callable[[], None] | None = None,
) -> T:
    """
    Run an async coroutine in its own event loop with signal handling.

    If an event loop is already running in this thread (e.g. pytest-asyncio),
    the coroutine is executed in a separate thread with its own event loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return _run_in_fresh_loop(coro, on_interrupt)

    result: T | None = None
    error: BaseException | None = None

    def _runner() -> None:
        nonlocal result, error
        try:
            result = _run_in_fresh_loop(coro, on_interrupt)
        except BaseException as exc:
            error = exc

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    thread.join()

    if error is not None:
        raise error

    return cast(T, result)
