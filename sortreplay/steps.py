"""Trace data types: the steps a sorting algorithm records for later playback."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Iterator, List, MutableSequence, Optional, Sequence, Tuple


class StepKind(Enum):
    COMPARISON = "comparison"
    SWAP = "swap"
    REPLACE = "replace"


@dataclass(frozen=True)
class Counters:
    """Comparison and write totals valid right after a step."""

    comparisons: int = 0
    swaps: int = 0


@dataclass(frozen=True)
class Step:
    """A single event in a trace.

    ``values[n]`` is the value written at ``indices[n]``. Comparisons carry no
    values.
    """

    kind: StepKind
    indices: Tuple[int, ...]
    values: Tuple[int, ...] = ()
    counters: Counters = field(default_factory=Counters)

    def __post_init__(self):
        assert 1 <= len(self.indices) <= 2, self.indices
        if self.kind is StepKind.COMPARISON:
            assert not self.values, self.values
        else:
            assert len(self.values) == len(self.indices), (self.indices, self.values)

    @property
    def is_write(self) -> bool:
        return self.kind is not StepKind.COMPARISON

    def apply(self, array: MutableSequence[int]) -> None:
        """Write this step's values into ``array``. Comparisons leave it untouched."""
        for index, value in zip(self.indices, self.values):
            array[index] = value


@dataclass(frozen=True)
class Trace:
    """Complete record of one sorting run.

    ``initial`` is the input as given, ``result`` the fully sorted output.
    Replaying every step's writes against ``initial`` yields ``result``.
    """

    algorithm: str
    initial: Tuple[int, ...]
    steps: Tuple[Step, ...]
    result: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    @property
    def counters(self) -> Counters:
        """Final totals; zero for an empty trace."""
        return self.steps[-1].counters if self.steps else Counters()

    def comparisons(self) -> List[Step]:
        return [s for s in self.steps if s.kind is StepKind.COMPARISON]

    def writes(self) -> List[Step]:
        return [s for s in self.steps if s.is_write]


def replay(steps: Iterable[Step], array: Optional[Sequence[int]] = None) -> List[int]:
    """
    Apply every write in ``steps`` to a copy of ``array`` and return it.

    When ``steps`` is a Trace, ``array`` defaults to the trace's input.
    """
    if array is None:
        if not isinstance(steps, Trace):
            raise TypeError("array is required unless replaying a Trace")
        array = steps.initial
    out = list(array)
    for step in steps:
        step.apply(out)
    return out


class Tally:
    """
    Running counters for one trace generation.

    Each algorithm creates one Tally and passes it explicitly to its helpers.
    The write helpers mutate the working array and return the Step describing
    the write, stamped with the counters after it.
    """

    def __init__(self):
        self.counters = Counters()

    def compare(self, i: int, j: int) -> Step:
        self.counters = replace(self.counters, comparisons=self.counters.comparisons + 1)
        return Step(StepKind.COMPARISON, (i, j), counters=self.counters)

    def swap(self, arr: MutableSequence[int], i: int, j: int) -> Step:
        assert 0 <= i < len(arr) and 0 <= j < len(arr), (i, j, len(arr))
        arr[i], arr[j] = arr[j], arr[i]
        self.counters = replace(self.counters, swaps=self.counters.swaps + 1)
        return Step(StepKind.SWAP, (i, j), (arr[i], arr[j]), self.counters)

    def write(self, arr: MutableSequence[int], k: int, value: int, counted: bool = True) -> Step:
        assert 0 <= k < len(arr), (k, len(arr))
        arr[k] = value
        if counted:
            self.counters = replace(self.counters, swaps=self.counters.swaps + 1)
        return Step(StepKind.REPLACE, (k,), (value,), self.counters)
