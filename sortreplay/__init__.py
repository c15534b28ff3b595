"""Sorting-algorithm traces and their timed, cancellable playback."""

from .algorithms import (
    ALGORITHM_INFO,
    ALGORITHMS,
    AlgorithmInfo,
    UnknownAlgorithmError,
    describe,
    trace,
)
from .arrays import generate
from .playback import AsyncioClock, ManualClock, PlaybackScheduler, Session, clamp_speed
from .steps import Counters, Step, StepKind, Trace, replay
from .visualizer import Phase, SortingVisualizer

__all__ = [
    "ALGORITHM_INFO",
    "ALGORITHMS",
    "AlgorithmInfo",
    "AsyncioClock",
    "Counters",
    "ManualClock",
    "Phase",
    "PlaybackScheduler",
    "Session",
    "SortingVisualizer",
    "Step",
    "StepKind",
    "Trace",
    "UnknownAlgorithmError",
    "clamp_speed",
    "describe",
    "generate",
    "replay",
    "trace",
]
