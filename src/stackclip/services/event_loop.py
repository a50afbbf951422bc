import logging
import queue
import threading
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

_Job = Tuple[Callable[..., Any], Tuple[Any, ...]]


class PendingAction:
    """Handle for a deferred call.

    Nothing cancels a pending action implicitly; ``cancel`` is there for
    callers that want to.
    """

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._cancelled = threading.Event()
        self._fired = threading.Event()
        self._timer: Optional[threading.Timer] = None

    def cancel(self) -> bool:
        if self._fired.is_set():
            return False
        self._cancelled.set()
        if self._timer is not None:
            self._timer.cancel()
        return True

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def fired(self) -> bool:
        return self._fired.is_set()

    def run(self, fn: Callable[..., Any], *args: Any) -> Any:
        if self._cancelled.is_set():
            return None
        self._fired.set()
        return fn(*args)


class EventLoop:
    """One thread draining one inbox.

    Tickers, timers and other threads only ``post``; every job runs on the
    loop thread, one at a time. A failing job is logged and the loop goes on.
    """

    def __init__(self, name: str = "stackclip-loop") -> None:
        self.name = name
        self._inbox: "queue.Queue[Optional[_Job]]" = queue.Queue()
        self._stop_event = threading.Event()
        self._lock = threading.RLock()
        self._thread: Optional[threading.Thread] = None
        self._periodic: List[Tuple[float, Callable[..., Any]]] = []
        self._tickers: List[threading.Thread] = []
        self._is_running = False

    def post(self, fn: Callable[..., Any], *args: Any) -> None:
        self._inbox.put((fn, args))

    def call_later(self, delay: float, fn: Callable[..., Any], *args: Any) -> PendingAction:
        action = PendingAction(delay)
        timer = threading.Timer(delay, self.post, args=(action.run, fn, *args))
        timer.daemon = True
        action._timer = timer
        timer.start()
        return action

    def call_every(self, interval: float, fn: Callable[..., Any]) -> None:
        with self._lock:
            self._periodic.append((interval, fn))
            if self._is_running:
                self._start_ticker(interval, fn)

    def start(self) -> None:
        with self._lock:
            if self._is_running:
                return

            self._stop_event.clear()
            self._is_running = True
            self._thread = threading.Thread(
                target=self._run, daemon=True, name=self.name)
            self._thread.start()
            for interval, fn in self._periodic:
                self._start_ticker(interval, fn)

    def _start_ticker(self, interval: float, fn: Callable[..., Any]) -> None:
        def tick() -> None:
            while not self._stop_event.wait(interval):
                self.post(fn)

        ticker = threading.Thread(
            target=tick, daemon=True, name=f"{self.name}-ticker")
        self._tickers.append(ticker)
        ticker.start()

    def stop(self) -> None:
        with self._lock:
            if not self._is_running:
                return

            self._is_running = False
            self._stop_event.set()
            self._inbox.put(None)

        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=1.0)
        self._thread = None
        for ticker in self._tickers:
            if ticker.is_alive():
                ticker.join(timeout=1.0)
        self._tickers = []

    @property
    def is_running(self) -> bool:
        return self._is_running

    def run_pending(self) -> int:
        """Run every job already in the inbox on the calling thread."""
        count = 0
        while True:
            try:
                job = self._inbox.get_nowait()
            except queue.Empty:
                return count
            if job is not None:
                self._execute(job)
                count += 1

    def _run(self) -> None:
        while not self._stop_event.is_set():
            job = self._inbox.get()
            if job is None:
                continue
            self._execute(job)

    def _execute(self, job: _Job) -> None:
        fn, args = job
        try:
            fn(*args)
        except Exception:
            logger.exception(f"Error in {getattr(fn, '__name__', fn)!r}")
