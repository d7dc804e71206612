# -*- coding: utf-8 -*-
"""
Execution contexts

Design intent:
- SerialDispatcher: one background thread consuming a FIFO queue, so work
  submitted to it never overlaps and runs in submission order
- InlineDispatcher: runs the work immediately on the caller (tests, or a sink
  that is safe to call from any thread)
"""
import logging
import queue
import threading
from typing import Callable, Optional

_STOP = object()


class DispatcherStopped(RuntimeError):
    """Work was submitted to a dispatcher that is not running."""


class InlineDispatcher:
    def submit(self, fn: Callable, *args):
        fn(*args)

    def start(self):
        pass

    def stop(self):
        pass


class SerialDispatcher:
    """
    Single-threaded FIFO executor.
    """

    def __init__(self, name: str = "serial-dispatcher"):
        self.name = name
        self.logger = logging.getLogger(__name__)
        self._queue: "queue.Queue" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self):
        with self._lock:
            if self._running:
                return
            self._running = True
            self._thread = threading.Thread(target=self._run_loop, name=self.name, daemon=True)
            self._thread.start()

    def stop(self, timeout: float = 1.0):
        """Finish queued work, then stop the thread."""
        with self._lock:
            if not self._running:
                return
            self._running = False
            thread = self._thread
            self._thread = None
            self._queue.put(_STOP)
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def submit(self, fn: Callable, *args):
        # Nothing may be queued behind _STOP
        with self._lock:
            if not self._running:
                raise DispatcherStopped(f"{self.name} is not running")
            self._queue.put((fn, args))

    def _run_loop(self):
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            fn, args = item
            try:
                fn(*args)
            except Exception as e:
                # Keep the worker alive; the submitter owns its own cleanup.
                self.logger.exception(f"[{self.name}] task failed: {e}")
