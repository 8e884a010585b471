"""
Cooperative cancellation driven by process-termination signals.

The filter loop checks the token once per frame boundary. Nothing here
interrupts a blocking read or write: Python retries an interrupted system
call after running the handler (PEP 475), so a frame read that is in
progress when SIGINT/SIGTERM arrives runs to completion first.
"""

from __future__ import annotations

import logging
import signal
import threading
from typing import Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class CancellationToken:
    """
    Single-writer, many-reader cancellation flag.
    
    cancel() is idempotent; each callback registered with add_callback()
    runs exactly once, after the first cancel().
    """

    def __init__(self):
        self._event = threading.Event()
        # reentrant: cancel() may run from a signal handler on the main thread
        self._lock = threading.RLock()
        self._callbacks: List[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on cancellation, or now if already cancelled."""
        with self._lock:
            self._callbacks.append(callback)
        if self._event.is_set():
            self._run_callbacks()

    def remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def cancel(self) -> bool:
        """
        Request cancellation.
        
        Returns:
            True on the first call, False if already cancelled.
        """
        with self._lock:
            first = not self._event.is_set()
            self._event.set()
        self._run_callbacks()
        return first

    def _run_callbacks(self) -> None:
        while True:
            with self._lock:
                if not self._callbacks:
                    return
                callback = self._callbacks.pop(0)
            try:
                callback()
            except Exception as e:
                logger.warning(f"Cancellation callback failed: {e}")


class CancellationController:
    """
    Turns SIGINT/SIGTERM into a single cancel() on a token.
    
    Handlers are installed at most once; the first signal cancels the token
    and later signals are ignored.
    
    Example:
        token = CancellationToken()
        with CancellationController(token):
            loop.run()
    """

    def __init__(self, token: CancellationToken, signals: Sequence[int] = DEFAULT_SIGNALS):
        self.token = token
        self._signals = tuple(signals)
        self._previous: Dict[int, object] = {}
        self._installed = False
        self._received: Optional[int] = None

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def received_signal(self) -> Optional[int]:
        """The signal that triggered cancellation, if any."""
        return self._received

    def install(self) -> None:
        """Register signal handlers. Must run on the main thread."""
        if self._installed:
            return
        for signum in self._signals:
            self._previous[signum] = signal.signal(signum, self._handle)
        self._installed = True

    def restore(self) -> None:
        """Reinstate the handlers that were active before install()."""
        if not self._installed:
            return
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()
        self._installed = False

    def _handle(self, signum, frame) -> None:
        if self.token.is_cancelled:
            return
        self._received = signum
        logger.info(f"Received signal {signal.Signals(signum).name}, shutting down...")
        self.token.cancel()

    def __enter__(self) -> "CancellationController":
        self.install()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.restore()
