"""Tests for trace generation: scenarios, per-algorithm policy and trace invariants."""

import pytest

from sortreplay.algorithms import (
    ALGORITHM_INFO,
    ALGORITHMS,
    UnknownAlgorithmError,
    describe,
    trace,
)
from sortreplay.steps import Counters, Step, StepKind, Trace, replay

from tests.conftest import random_arrays

EDGE_INPUTS = [
    [],
    [7],
    [2, 1],
    [1, 2],
    [2, 2, 2],
    [5, 3, 8, 1],
    [1, 2, 3, 4, 5, 6],
    [6, 5, 4, 3, 2, 1],
    [3, 1, 3, 1, 3, 1, 2],
]
INPUTS = EDGE_INPUTS + random_arrays(6, 17) + random_arrays(2, 40, seed=99)


def _state_before_each_step(t):
    """Yield (array state before the step, step) pairs."""
    state = list(t.initial)
    for step in t.steps:
        yield list(state), step
        step.apply(state)


class TestScenarios:
    def test_bubble_on_four_values(self):
        t = trace("bubble", [5, 3, 8, 1])

        assert t.result == (1, 3, 5, 8)
        assert t.steps[0] == Step(StepKind.COMPARISON, (0, 1), (), Counters(1, 0))
        assert t.steps[1] == Step(StepKind.SWAP, (0, 1), (3, 5), Counters(1, 1))

    @pytest.mark.parametrize("algorithm", sorted(ALGORITHMS))
    def test_empty_input_has_no_steps(self, algorithm):
        t = trace(algorithm, [])

        assert len(t) == 0
        assert t.result == ()
        assert t.counters == Counters(0, 0)

    @pytest.mark.parametrize("algorithm", sorted(ALGORITHMS))
    def test_single_element_has_no_steps(self, algorithm):
        t = trace(algorithm, [42])

        assert t.steps == ()
        assert t.result == (42,)

    def test_selection_on_equal_values_never_swaps(self):
        t = trace("selection", [2, 2, 2])

        assert [s.kind for s in t.steps] == [StepKind.COMPARISON] * 3
        assert [s.indices for s in t.steps] == [(0, 1), (0, 2), (1, 2)]
        assert t.counters == Counters(comparisons=3, swaps=0)


class TestBubble:
    def test_comparisons_are_adjacent_and_passes_shrink(self):
        t = trace("bubble", [4, 3, 2, 1])

        pairs = [s.indices for s in t.comparisons()]
        assert pairs == [(0, 1), (1, 2), (2, 3), (0, 1), (1, 2), (0, 1)]

    def test_swaps_only_when_left_is_greater(self):
        t = trace("bubble", [3, 1, 3, 1, 3, 1, 2])

        for before, step in _state_before_each_step(t):
            if step.kind is StepKind.SWAP:
                i, j = step.indices
                assert j == i + 1
                assert before[i] > before[j]

    def test_sorted_input_only_compares(self):
        t = trace("bubble", [1, 2, 3, 4])

        assert t.writes() == []
        assert t.counters == Counters(6, 0)


class TestSelection:
    def test_comparison_count_is_quadratic(self):
        n = 9
        t = trace("selection", list(range(n, 0, -1)))

        assert t.counters.comparisons == n * (n - 1) // 2

    def test_at_most_one_real_swap_per_position(self):
        t = trace("selection", [3, 1, 3, 1, 3, 1, 2])

        swaps = [s for s in t.steps if s.kind is StepKind.SWAP]
        assert len(swaps) <= len(t.initial) - 1
        assert all(i != j for i, j in (s.indices for s in swaps))
        firsts = [s.indices[0] for s in swaps]
        assert firsts == sorted(set(firsts))

    def test_tracks_the_running_minimum(self):
        t = trace("selection", [3, 1, 2])

        assert [s.indices for s in t.steps[:3]] == [(0, 1), (1, 2), (0, 1)]
        assert t.steps[2].kind is StepKind.SWAP
        assert t.steps[2].values == (1, 3)


class TestInsertion:
    def test_reverse_input(self):
        t = trace("insertion", [4, 3, 2, 1])

        assert t.result == (1, 2, 3, 4)
        assert t.counters == Counters(comparisons=6, swaps=6)
        assert all(s.kind in (StepKind.COMPARISON, StepKind.REPLACE) for s in t.steps)

    def test_first_key_shift_then_place(self):
        t = trace("insertion", [4, 3])

        assert t.steps == (
            Step(StepKind.COMPARISON, (0, 1), (), Counters(1, 0)),
            Step(StepKind.REPLACE, (1,), (4,), Counters(1, 1)),
            Step(StepKind.REPLACE, (0,), (3,), Counters(1, 1)),
        )

    def test_key_placement_does_not_count(self):
        t = trace("insertion", [5, 1, 4, 2, 3])

        shifts = 0
        placements = 0
        previous = Counters()
        for step in t.steps:
            if step.kind is StepKind.REPLACE:
                if step.counters.swaps == previous.swaps + 1:
                    shifts += 1
                else:
                    assert step.counters.swaps == previous.swaps
                    placements += 1
            previous = step.counters
        assert shifts == t.counters.swaps
        # 1, 4, 2 and 3 all move left; 5 stays put
        assert placements == 4

    def test_comparisons_point_at_the_key_slot(self):
        t = trace("insertion", [3, 5, 1])

        assert [s.indices for s in t.comparisons()] == [(0, 1), (1, 2), (0, 2)]
        assert t.result == (1, 3, 5)

    def test_key_that_stays_put_emits_no_write(self):
        t = trace("insertion", [1, 2, 3])

        assert t.writes() == []
        assert [s.indices for s in t.steps] == [(0, 1), (1, 2)]


class TestMerge:
    def test_reverse_input_counts_drain_writes(self):
        t = trace("merge", [4, 3, 2, 1])

        assert t.counters == Counters(comparisons=4, swaps=8)
        assert [s.indices for s in t.comparisons()] == [(0, 1), (2, 3), (0, 2), (0, 3)]
        assert [s.indices[0] for s in t.writes()] == [0, 1, 2, 3, 0, 1, 2, 3]

    def test_every_merge_level_rewrites_its_range(self):
        # n = 8 splits into three full levels of 8 writes each
        t = trace("merge", [8, 7, 6, 5, 4, 3, 2, 1])

        assert len(t.writes()) == 24
        assert all(s.kind is StepKind.REPLACE for s in t.writes())

    def test_lower_half_includes_middle(self):
        t = trace("merge", [3, 2, 1])

        # [3, 2] is merged before 1 joins
        assert t.comparisons()[0].indices == (0, 1)
        assert t.result == (1, 2, 3)


class TestQuick:
    def test_lomuto_partition_steps(self):
        t = trace("quick", [3, 1, 2])

        assert t.steps == (
            Step(StepKind.COMPARISON, (0, 2), (), Counters(1, 0)),
            Step(StepKind.COMPARISON, (1, 2), (), Counters(2, 0)),
            Step(StepKind.SWAP, (0, 1), (1, 3), Counters(2, 1)),
            Step(StepKind.SWAP, (1, 2), (2, 3), Counters(2, 2)),
        )

    def test_swaps_with_itself_are_counted(self):
        t = trace("quick", [1, 2, 3])

        assert t.counters == Counters(comparisons=3, swaps=5)
        assert [s.indices for s in t.steps if s.kind is StepKind.SWAP] == [
            (0, 0), (1, 1), (2, 2), (0, 0), (1, 1)]

    def test_pivot_is_compared_against_every_element(self):
        t = trace("quick", [5, 9, 1, 7, 3])

        first_partition = t.comparisons()[:4]
        assert [s.indices for s in first_partition] == [(0, 4), (1, 4), (2, 4), (3, 4)]
        assert t.steps[5] == Step(StepKind.SWAP, (1, 4), (3, 9), Counters(4, 2))


class TestTraceInvariants:
    @pytest.mark.parametrize("algorithm", sorted(ALGORITHMS))
    @pytest.mark.parametrize("values", INPUTS)
    def test_replay_sorts_the_input(self, algorithm, values):
        t = trace(algorithm, values)

        assert replay(t) == sorted(values)
        assert replay(t.steps, values) == list(t.result)
        assert list(t.result) == sorted(values)

    @pytest.mark.parametrize("algorithm", sorted(ALGORITHMS))
    @pytest.mark.parametrize("values", INPUTS)
    def test_counters_step_by_one(self, algorithm, values):
        t = trace(algorithm, values)

        previous = Counters()
        for step in t.steps:
            dc = step.counters.comparisons - previous.comparisons
            ds = step.counters.swaps - previous.swaps
            if step.kind is StepKind.COMPARISON:
                assert (dc, ds) == (1, 0)
            else:
                assert dc == 0
                assert ds in (0, 1)
            previous = step.counters
        assert t.counters.comparisons == len(t.comparisons())

    @pytest.mark.parametrize("algorithm", ["bubble", "selection", "merge", "quick"])
    @pytest.mark.parametrize("values", INPUTS)
    def test_every_write_counts_outside_insertion(self, algorithm, values):
        t = trace(algorithm, values)

        assert t.counters.swaps == len(t.writes())

    @pytest.mark.parametrize("algorithm", sorted(ALGORITHMS))
    def test_deterministic(self, algorithm):
        values = random_arrays(1, 30, seed=7)[0]

        assert trace(algorithm, values) == trace(algorithm, values)

    @pytest.mark.parametrize("algorithm", sorted(ALGORITHMS))
    def test_input_is_not_modified(self, algorithm):
        values = [9, 4, 7, 1, 8]
        trace(algorithm, values)

        assert values == [9, 4, 7, 1, 8]

    @pytest.mark.parametrize("algorithm", sorted(ALGORITHMS))
    def test_counters_restart_on_every_call(self, algorithm):
        first = trace(algorithm, [4, 3, 2, 1])
        second = trace(algorithm, [4, 3, 2, 1])

        assert first.steps[0].counters == second.steps[0].counters
        assert first.steps[0].counters.comparisons == 1

    @pytest.mark.parametrize("values", INPUTS)
    def test_all_algorithms_agree(self, values):
        results = {trace(a, values).result for a in ALGORITHMS}

        assert len(results) == 1

    @pytest.mark.parametrize("algorithm", sorted(ALGORITHMS))
    def test_indices_stay_in_range(self, algorithm):
        values = random_arrays(1, 25, seed=3)[0]
        t = trace(algorithm, values)

        assert all(0 <= i < len(values) for s in t.steps for i in s.indices)


class TestRegistry:
    def test_unknown_algorithm_fails_fast(self):
        with pytest.raises(UnknownAlgorithmError):
            trace("bogo", [3, 2, 1])

    def test_unknown_algorithm_is_a_key_error(self):
        with pytest.raises(KeyError):
            trace("Bubble", [])

    def test_every_algorithm_is_described(self):
        assert set(ALGORITHM_INFO) == set(ALGORITHMS)
        assert describe("merge").time_complexity == "O(n log n)"
        assert describe("quick").name == "Quick Sort"

    def test_describe_unknown(self):
        with pytest.raises(UnknownAlgorithmError):
            describe("heap")

    def test_trace_records_algorithm_and_input(self):
        t = trace("insertion", [2, 1])

        assert isinstance(t, Trace)
        assert t.algorithm == "insertion"
        assert t.initial == (2, 1)
