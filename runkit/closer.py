"""A runner manager that also closes resources once its runners are done."""

from __future__ import annotations

import logging
import os
import queue
import threading
import types
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from .context import Context, background, with_cancel
from .runner import (
    JoinedError,
    ManagerAlreadyStartedError,
    Runner,
    RunnerManager,
    join_errors,
)

__all__ = ["ManagerAlreadyClosedError", "RunnerCloserManager"]

log = logging.getLogger("runkit.concurrency")


class ManagerAlreadyClosedError(RuntimeError):
    """Raised when a closer is added to a manager that is already closing."""

    def __init__(self, message: str = "runner manager already closed") -> None:
        super().__init__(message)


def _default_fatal_shutdown() -> None:
    log.critical("Graceful shutdown timeout exceeded, forcing shutdown")
    os._exit(1)


def _takes_argument(func: Callable[..., Any]) -> bool:
    """Whether ``func`` has a required positional parameter."""
    bound = 0
    target: Any = func
    if isinstance(func, types.MethodType):
        target = func.__func__
        bound = 1
    code = getattr(target, "__code__", None)
    if code is None:
        call = getattr(type(func), "__call__", None)
        if isinstance(call, types.FunctionType):
            target = call
            bound = 1
            code = call.__code__
    if code is None:
        return False
    defaults = getattr(target, "__defaults__", None) or ()
    required = code.co_argcount - len(defaults) - bound
    return required > 0


def _as_closer(obj: Any) -> Callable[[], object] | None:
    close = getattr(obj, "close", None)
    if callable(close):
        return close
    if callable(obj):
        if _takes_argument(obj):
            return lambda: obj(background())
        return obj
    return None


class RunnerCloserManager:
    """Runs its runners, then calls every closer once the runners are done.

    With a grace period, the process is forcibly shut down if the closers do
    not all return within it. Without one, shutdown waits indefinitely.
    """

    def __init__(
        self, grace_period: float | timedelta | None = None, *runners: Runner
    ) -> None:
        self._manager = RunnerManager(*runners)
        self._lock = threading.Lock()
        self._closers: list[Callable[[], object]] = []
        self._ret_err: JoinedError | None = None
        self._fatal_shutdown: Callable[[], None] = _default_fatal_shutdown
        self._fatal_done = threading.Event()
        self._running = False
        self._closing = False
        self._closed = False
        self._close_ctx = Context()
        self._stopped = threading.Event()

        if grace_period is None:
            log.warning(
                "Graceful shutdown timeout is infinite, will wait indefinitely to shutdown"
            )
            return

        seconds = (
            grace_period.total_seconds()
            if isinstance(grace_period, timedelta)
            else float(grace_period)
        )

        def watch_grace_period() -> None:
            log.debug("Graceful shutdown timeout: %ss", seconds)
            if not self._fatal_done.wait(seconds):
                self._fatal_shutdown()

        self._closers.append(watch_grace_period)

    def with_fatal_shutdown(self, fn: Callable[[], None]) -> None:
        """Replace the function called when the grace period is exceeded."""
        self._fatal_shutdown = fn

    def add(self, *runners: Runner) -> None:
        """Add runners; raises if the manager has already started."""
        with self._lock:
            if self._running:
                raise ManagerAlreadyStartedError()
        self._manager.add(*runners)

    def add_closer(self, *closers: Any) -> None:
        """Add closers to be called once the runners are done.

        A closer is an object with a ``close()`` method, a callable taking a
        context, or a callable taking no arguments. Unsupported values raise
        TypeError after the supported ones have been added.
        """
        with self._lock:
            if self._closing:
                raise ManagerAlreadyClosedError()
            problems = []
            for obj in closers:
                closer = _as_closer(obj)
                if closer is None:
                    problems.append(f"unsupported closer type: {type(obj).__name__}")
                else:
                    self._closers.append(closer)
        if problems:
            raise TypeError("\n".join(problems))

    def _wait_for_close(self, ctx: Context) -> None:
        either = with_cancel(ctx)
        self._close_ctx._on_done(either.cancel)
        either.wait()

    def run(self, ctx: Context | None = None) -> None:
        """Run the runners, then the closers; raise every error collected."""
        with self._lock:
            if self._running:
                raise ManagerAlreadyStartedError()
            self._running = True

        try:
            if len(self._manager) > 0:
                self._manager.add(self._wait_for_close)

            run_error: BaseException | None = None
            try:
                self._manager.run(ctx)
            except Exception as exc:  # noqa: BLE001 - reported to the caller
                run_error = exc

            with self._lock:
                self._closing = True
                closers = list(self._closers)

            results: queue.Queue[BaseException | None] = queue.Queue()

            def invoke(closer: Callable[[], object]) -> None:
                error: BaseException | None = None
                try:
                    closer()
                except Exception as exc:  # noqa: BLE001 - reported to the caller
                    error = exc
                finally:
                    results.put(error)

            for closer in closers:
                threading.Thread(target=invoke, args=(closer,), daemon=True).start()

            errors: list[BaseException | None] = [run_error]
            for index in range(1, len(closers) + 1):
                if index == len(closers):
                    self._fatal_done.set()
                errors.append(results.get())

            self._ret_err = join_errors(errors)
        finally:
            self._stopped.set()

        if self._ret_err is not None:
            raise self._ret_err

    def close(self) -> None:
        """Stop the runners, wait for the closers and raise their errors."""
        with self._lock:
            if not self._closed:
                self._closed = True
                self._close_ctx.cancel()
            if not self._running:
                self._running = True
                self._stopped.set()
        self.wait_until_shutdown()
        if self._ret_err is not None:
            raise self._ret_err

    def wait_until_shutdown(self) -> None:
        """Block until the runners and closers are all done."""
        self._stopped.wait()