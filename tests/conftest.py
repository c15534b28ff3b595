"""Shared fixtures: a simulated clock and a callback recorder."""

import numpy as np
import pytest

from sortreplay.playback import ManualClock, PlaybackScheduler


class Recorder:
    """Collects every playback callback as (time, event, payload) tuples."""

    def __init__(self, clock):
        self.clock = clock
        self.events = []

    @property
    def steps(self):
        return [payload for _, event, payload in self.events if event == "step"]

    @property
    def completed(self):
        return any(event == "complete" for _, event, _ in self.events)

    def on_step(self, step):
        self.events.append((self.clock.now, "step", step))

    def on_highlight_start(self, indices):
        self.events.append((self.clock.now, "hl_start", tuple(indices)))

    def on_highlight_end(self, indices):
        self.events.append((self.clock.now, "hl_end", tuple(indices)))

    def on_complete(self):
        self.events.append((self.clock.now, "complete", None))

    def callbacks(self):
        return dict(
            on_step=self.on_step,
            on_highlight_start=self.on_highlight_start,
            on_highlight_end=self.on_highlight_end,
            on_complete=self.on_complete,
        )


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return PlaybackScheduler(clock)


@pytest.fixture
def recorder(clock):
    return Recorder(clock)


def random_arrays(count, size, seed=1234):
    rng = np.random.default_rng(seed)
    return [[int(v) for v in rng.integers(0, 20, size=size)] for _ in range(count)]
