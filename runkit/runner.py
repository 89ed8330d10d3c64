"""Run a set of tasks in parallel until the first of them returns."""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import CancelledError

from .context import Context, background, with_cancel

__all__ = [
    "JoinedError",
    "ManagerAlreadyStartedError",
    "Runner",
    "RunnerManager",
    "join_errors",
]

Runner = Callable[[Context], object]


class ManagerAlreadyStartedError(RuntimeError):
    """Raised when a manager is started twice or changed after starting."""

    def __init__(self, message: str = "runner manager already started") -> None:
        super().__init__(message)


class JoinedError(Exception):
    """Several errors reported together, one message per line."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors: list[BaseException] = list(errors)
        super().__init__(*self.errors)

    def __str__(self) -> str:
        return "\n".join(str(error) for error in self.errors)


def join_errors(errors: Iterable[BaseException | None]) -> JoinedError | None:
    """Combine the given errors, skipping None; return None if none remain.

    Nested joined errors are flattened into a single list.
    """
    flat: list[BaseException] = []
    for error in errors:
        if error is None:
            continue
        if isinstance(error, JoinedError):
            flat.extend(error.errors)
        else:
            flat.append(error)
    return JoinedError(flat) if flat else None


class RunnerManager:
    """Runs all runners in parallel and waits for every one of them.

    As soon as any runner returns, the context given to the others is
    cancelled. Errors raised by runners are collected and raised together;
    cancellation errors are ignored.
    """

    def __init__(self, *runners: Runner) -> None:
        self._lock = threading.Lock()
        self._runners: list[Runner] = list(runners)
        self._running = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._runners)

    def add(self, *runners: Runner) -> None:
        """Add runners; raises if the manager has already started."""
        with self._lock:
            if self._running:
                raise ManagerAlreadyStartedError()
            self._runners.extend(runners)

    def run(self, ctx: Context | None = None) -> None:
        """Run every runner and raise the collected errors, if any."""
        with self._lock:
            if self._running:
                raise ManagerAlreadyStartedError()
            self._running = True
            runners = list(self._runners)

        run_ctx = with_cancel(ctx if ctx is not None else background())
        results: queue.Queue[BaseException | None] = queue.Queue()

        def invoke(runner: Runner) -> None:
            error: BaseException | None = None
            try:
                runner(run_ctx)
            except CancelledError:
                pass
            except Exception as exc:  # noqa: BLE001 - reported to the caller
                error = exc
            finally:
                results.put(error)
                run_ctx.cancel()

        for runner in runners:
            threading.Thread(target=invoke, args=(runner,), daemon=True).start()

        errors = [results.get() for _ in runners]
        run_ctx.cancel()

        joined = join_errors(errors)
        if joined is not None:
            raise joined