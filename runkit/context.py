"""Cancellable contexts and a pool that is done once all its members are done."""

from __future__ import annotations

import threading
from collections.abc import Callable

__all__ = ["Context", "Pool", "background", "with_cancel"]


class Context:
    """A cancellation signal that can be waited on and propagates to children."""

    def __init__(self, parent: Context | None = None) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []
        if parent is not None:
            parent._on_done(self.cancel)

    def cancel(self) -> None:
        """Mark the context as done and notify everything that depends on it."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def done(self) -> bool:
        """Return True once the context has been cancelled."""
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the context is done or the timeout expires."""
        return self._event.wait(timeout)

    def _on_done(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def __enter__(self) -> Context:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()


class _BackgroundContext(Context):
    """A context that is never cancelled."""

    def cancel(self) -> None:
        return None

    def _on_done(self, callback: Callable[[], None]) -> None:
        return None


_BACKGROUND = _BackgroundContext()


def background() -> Context:
    """Return the root context, which is never done."""
    return _BACKGROUND


def with_cancel(parent: Context) -> Context:
    """Return a child of ``parent`` that is done when either is cancelled."""
    return Context(parent)


class Pool(Context):
    """A context that is done only once every context in the pool is done.

    Contexts added after the pool is done, or after it was cancelled, are
    ignored.
    """

    def __init__(self, *contexts: Context) -> None:
        super().__init__()
        self._pool_lock = threading.RLock()
        self._members: list[Context] | None = [c for c in contexts if not c.done()]
        self._pending = len(self._members)
        with self._pool_lock:
            members = list(self._members)
            for member in members:
                member._on_done(self._member_done)
        if not members:
            Context.cancel(self)

    def _member_done(self) -> None:
        with self._pool_lock:
            if self._members is None:
                return
            self._pending -= 1
            finished = self._pending == 0
        if finished:
            Context.cancel(self)

    def add(self, ctx: Context) -> Pool:
        """Track ``ctx`` unless the pool is already done or cancelled."""
        with self._pool_lock:
            if self.done() or self._members is None:
                return self
            self._members.append(ctx)
            self._pending += 1
            ctx._on_done(self._member_done)
        return self

    def cancel(self) -> None:
        """Cancel the pool and drop every tracked context."""
        with self._pool_lock:
            if self._members is None:
                return
            self._members = None
        Context.cancel(self)

    def size(self) -> int:
        """Return the number of contexts tracked by the pool."""
        with self._pool_lock:
            return 0 if self._members is None else len(self._members)