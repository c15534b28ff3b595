"""
Presentation-independent state of the sorting visualizer.

``SortingVisualizer`` owns the visible array, the counters and highlight set
shown next to it, the chosen algorithm and speed. A renderer only reads those
attributes and forwards user actions (new array, sort/stop, speed) to it.

States:

  IDLE --start--> GENERATING --trace ready--> PLAYING --last step--> IDLE
                                               PLAYING --stop-------> IDLE

There is no paused state: toggling while playing stops, and the next start
traces the current array again from the beginning.
"""
import logging
from enum import Enum
from typing import List, Optional, Set

import numpy as np

from .algorithms import AlgorithmInfo, describe, trace
from .arrays import generate
from .playback import PlaybackScheduler, Session, clamp_speed
from .settings import ARRAY_SIZE, DEFAULT_ALGORITHM, DEFAULT_SPEED_MS, MAX_VALUE, MIN_VALUE
from .steps import Counters, Step, Trace

logger = logging.getLogger(__name__)


class Phase(Enum):
    IDLE = "idle"
    GENERATING = "generating"
    PLAYING = "playing"


class SortingVisualizer:
    def __init__(self, clock,
                 algorithm: str = DEFAULT_ALGORITHM,
                 size: int = ARRAY_SIZE,
                 min_value: int = MIN_VALUE,
                 max_value: int = MAX_VALUE,
                 speed_ms: float = DEFAULT_SPEED_MS,
                 seed: Optional[int] = None,
                 array: Optional[List[int]] = None):
        describe(algorithm)
        self.algorithm = algorithm
        self.size      = size
        self.min_value = min_value
        self.max_value = max_value
        self.speed_ms  = clamp_speed(speed_ms)
        self.scheduler = PlaybackScheduler(clock)
        self._phase    = Phase.IDLE
        self.counters  = Counters()
        self.highlighted: Set[int] = set()
        self.last_trace: Optional[Trace] = None
        self._rng = np.random.default_rng(seed)
        if array is not None:
            self.array = list(array)
        else:
            self.array = generate(size, min_value, max_value, rng=self._rng)

    @property
    def info(self) -> AlgorithmInfo:
        return describe(self.algorithm)

    @property
    def phase(self) -> Phase:
        # A session that ended without completing (cancelled by a failing
        # callback) leaves nothing playing.
        if self._phase is Phase.PLAYING and not self.scheduler.is_active():
            return Phase.IDLE
        return self._phase

    @phase.setter
    def phase(self, phase: Phase) -> None:
        self._phase = phase

    @property
    def is_sorting(self) -> bool:
        return self.phase is not Phase.IDLE

    @property
    def session(self) -> Optional[Session]:
        return self.scheduler.session

    # ---- user actions ----

    def new_array(self) -> List[int]:
        """Discard any playback and replace the array with fresh random values."""
        self.stop()
        self.array = generate(self.size, self.min_value, self.max_value, rng=self._rng)
        self.counters = Counters()
        self.last_trace = None
        logger.info("New array of %d values", len(self.array))
        return self.array

    def set_algorithm(self, algorithm: str) -> bool:
        """Select the algorithm for the next run. Ignored while sorting."""
        describe(algorithm)
        if self.is_sorting:
            logger.info("Ignoring algorithm change to %s while sorting", algorithm)
            return False
        self.algorithm = algorithm
        return True

    def set_speed(self, speed_ms: float) -> float:
        """Set the step delay for the next run; clamped to the allowed range."""
        self.speed_ms = clamp_speed(speed_ms)
        return self.speed_ms

    def toggle(self) -> None:
        """The Sort/Stop button."""
        if self.is_sorting:
            self.stop()
        else:
            self.start()

    def start(self) -> Session:
        """Trace the current array and start playing it, replacing any active run."""
        self.stop()
        self.phase = Phase.GENERATING
        self.counters = Counters()
        self.last_trace = trace(self.algorithm, self.array)
        self.phase = Phase.PLAYING
        return self.scheduler.start(
            self.last_trace, self.speed_ms,
            on_step=self._apply,
            on_highlight_start=self.highlighted.update,
            on_highlight_end=self.highlighted.difference_update,
            on_complete=self._complete,
        )

    def stop(self) -> None:
        self.scheduler.cancel()
        self.highlighted.clear()
        self.phase = Phase.IDLE

    # ---- playback callbacks ----

    def _apply(self, step: Step) -> None:
        step.apply(self.array)
        self.counters = step.counters

    def _complete(self) -> None:
        self.highlighted.clear()
        self.phase = Phase.IDLE
        logger.info("%s done: %d comparisons, %d swaps",
                    self.info.name, self.counters.comparisons, self.counters.swaps)


