"""
Timed, cancellable playback of a Trace.

The scheduler never runs on a thread of its own. It asks a *clock* for
deferred callbacks and delivers one Step per callback, so a step is always
applied in one piece between two frames of whatever drives the clock.

A clock is anything with ``call_later(delay_ms, callback)`` returning a
handle that has ``cancel()``. Three are provided:

  ManualClock   simulated time, advanced explicitly (tests, headless runs)
  AsyncioClock  wraps ``loop.call_later`` of a running asyncio loop
  FrameClock    pygame ticks, pumped once per frame (see ``viewer``)
"""
import asyncio
import heapq
import itertools
import logging
from typing import Callable, Optional, Sequence

from .settings import MIN_SPEED_MS, MAX_SPEED_MS
from .steps import Step, StepKind, Trace

logger = logging.getLogger(__name__)

StepCallback = Callable[[Step], None]
IndicesCallback = Callable[[Sequence[int]], None]


def clamp_speed(speed_ms: float, lo: float = MIN_SPEED_MS, hi: float = MAX_SPEED_MS) -> float:
    """Clamp a requested step delay into ``[lo, hi]`` milliseconds."""
    return max(lo, min(hi, speed_ms))


# ============================================================
# ========================= CLOCKS ===========================
# ============================================================

class _Timer:
    __slots__ = ('when', 'callback', 'cancelled')

    def __init__(self, when, callback):
        self.when      = when
        self.callback  = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualClock:
    """
    Simulated time in milliseconds.

    Nothing fires until ``advance()`` or ``run()`` is called. Callbacks due at
    the same instant fire in the order they were scheduled, and callbacks
    scheduled while advancing fire in the same call if they fall due.
    """

    def __init__(self, start: float = 0.0):
        self.now    = start
        self._queue = []
        self._seq   = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> _Timer:
        if delay_ms < 0:
            raise ValueError(f"delay must be >= 0, got {delay_ms}")
        timer = _Timer(self.now + delay_ms, callback)
        heapq.heappush(self._queue, (timer.when, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that have not fired or been cancelled."""
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def advance(self, ms: float) -> int:
        """Move time forward by ``ms``, firing everything that falls due.

        Returns how many callbacks fired.
        """
        if ms < 0:
            raise ValueError(f"cannot advance by a negative amount, got {ms}")
        target = self.now + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = when
            timer.callback()
            fired += 1
        self.now = target
        return fired

    def run(self, limit: int = 1_000_000) -> int:
        """Fire callbacks until none are left. ``limit`` guards against loops."""
        fired = 0
        while self._queue:
            when, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = max(self.now, when)
            timer.callback()
            fired += 1
            if fired >= limit:
                raise RuntimeError(f"ManualClock.run() fired {limit} callbacks without draining")
        return fired


class AsyncioClock:
    """Schedules callbacks on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000.0, callback)


# ============================================================
# ======================== SESSIONS ==========================
# ============================================================

class Session:
    """
    One playback of one Trace.

    A session owns every callback it has handed to the clock: step deliveries
    and highlight reverts. ``cancel()`` voids all of them at once; after that
    none of the session's callbacks run again.
    """

    def __init__(self, trace: Trace, speed_ms: float, clock,
                 on_step: StepCallback,
                 on_highlight_start: Optional[IndicesCallback] = None,
                 on_highlight_end: Optional[IndicesCallback] = None,
                 on_complete: Optional[Callable[[], None]] = None):
        self.trace     = trace
        self.speed_ms  = speed_ms
        self.cursor    = 0
        self._clock    = clock
        self._on_step  = on_step
        self._on_hl_start = on_highlight_start
        self._on_hl_end   = on_highlight_end
        self._on_complete = on_complete
        self._pending   = set()
        self._revert    = None      # (handle, indices) of the outstanding highlight revert
        self._cancelled = False
        self._finished  = False

    @property
    def is_active(self) -> bool:
        return not (self._cancelled or self._finished)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def progress(self) -> float:
        """Fraction of steps delivered so far."""
        if not self.trace.steps:
            return 1.0 if self._finished else 0.0
        return self.cursor / len(self.trace.steps)

    def cancel(self) -> None:
        if not self.is_active:
            return
        self._cancelled = True
        for handle in self._pending:
            handle.cancel()
        self._pending.clear()
        self._revert = None
        logger.debug("Cancelled %s playback at step %d/%d",
                     self.trace.algorithm, self.cursor, len(self.trace))

    def _begin(self) -> None:
        if not self.trace.steps:
            self._finish()
            return
        self._later(0, self._deliver)

    def _later(self, delay_ms, fn):
        def fire():
            self._pending.discard(handle)
            if self._cancelled:
                return
            try:
                fn()
            except BaseException:
                # A failing callback ends the session; the error still propagates.
                logger.warning("Aborting %s playback at step %d: callback raised",
                               self.trace.algorithm, self.cursor)
                self.cancel()
                raise
        handle = self._clock.call_later(delay_ms, fire)
        self._pending.add(handle)
        return handle

    def _deliver(self) -> None:
        step = self.trace.steps[self.cursor]
        self.cursor += 1
        self._on_step(step)
        # Callbacks may cancel this session (e.g. a Stop pressed in on_step).
        if self._cancelled:
            return
        if step.kind is StepKind.COMPARISON:
            if self._on_hl_start is not None:
                self._on_hl_start(step.indices)
                if self._cancelled:
                    return
            if self._on_hl_end is not None:
                handle = self._later(self.speed_ms / 2, lambda: self._end_highlight(step.indices))
                self._revert = (handle, step.indices)
        if self.cursor == len(self.trace.steps):
            self._finish()
        else:
            self._later(self.speed_ms, self._deliver)

    def _end_highlight(self, indices) -> None:
        self._revert = None
        self._on_hl_end(indices)

    def _finish(self) -> None:
        # The last comparison's highlight is reverted now rather than after completion.
        if self._revert is not None:
            handle, indices = self._revert
            handle.cancel()
            self._pending.discard(handle)
            self._end_highlight(indices)
            if self._cancelled:
                return
        self._finished = True
        logger.info("Finished %s playback: %d steps", self.trace.algorithm, len(self.trace))
        if self._on_complete is not None:
            self._on_complete()


class PlaybackScheduler:
    """
    Replays traces against one array, one session at a time.

    Starting a new session cancels the active one first, so callbacks from
    an older session can never reach the array after a newer one began.
    """

    def __init__(self, clock):
        self.clock = clock
        self._session: Optional[Session] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def is_active(self) -> bool:
        return self._session is not None and self._session.is_active

    def start(self, trace: Trace, speed_ms: float,
              on_step: StepCallback,
              on_highlight_start: Optional[IndicesCallback] = None,
              on_highlight_end: Optional[IndicesCallback] = None,
              on_complete: Optional[Callable[[], None]] = None) -> Session:
        if speed_ms <= 0:
            raise ValueError(f"speed_ms must be positive, got {speed_ms}")
        if self.is_active():
            logger.debug("Replacing active %s session", self._session.trace.algorithm)
            self._session.cancel()
        session = Session(trace, speed_ms, self.clock, on_step,
                          on_highlight_start, on_highlight_end, on_complete)
        self._session = session
        logger.info("Playing %s: %d steps at %sms per step",
                    trace.algorithm, len(trace), speed_ms)
        session._begin()
        return session

    def cancel(self, session: Optional[Session] = None) -> None:
        """Cancel ``session`` (default: the active one). Safe to call repeatedly."""
        target = session if session is not None else self._session
        if target is not None:
            target.cancel()
