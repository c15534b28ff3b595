"""
Sorting algorithms that record what they do.

Each algorithm is a generator that sorts ``arr`` in place and yields one Step
per comparison and per write, in the order performed. ``trace()`` runs one of
them on a private copy of the input and freezes the steps into a Trace.
"""
import logging
from typing import Callable, Dict, Iterator, List, NamedTuple, Sequence

from .steps import Step, Tally, Trace

logger = logging.getLogger(__name__)

SortGenerator = Callable[[List[int], Tally], Iterator[Step]]


class UnknownAlgorithmError(KeyError):
    """Raised for an algorithm identifier that is not in ALGORITHMS."""


# ============================================================
# ===================== SORTING ALGORITHMS ===================
# ============================================================

def bubble_sort(arr, tally):
    n = len(arr)
    for i in range(n - 1):
        for j in range(n - i - 1):
            yield tally.compare(j, j + 1)
            if arr[j] > arr[j + 1]:
                yield tally.swap(arr, j, j + 1)


def selection_sort(arr, tally):
    n = len(arr)
    for i in range(n - 1):
        mi = i
        for j in range(i + 1, n):
            yield tally.compare(mi, j)
            if arr[j] < arr[mi]:
                mi = j
        if mi != i:
            yield tally.swap(arr, i, mi)


def insertion_sort(arr, tally):
    for i in range(1, len(arr)):
        key = arr[i]
        j = i - 1
        while j >= 0:
            yield tally.compare(j, i)
            if arr[j] <= key:
                break
            yield tally.write(arr, j + 1, arr[j])
            j -= 1
        # Placing the key finishes the shifts above; it is not counted again.
        if j + 1 != i:
            yield tally.write(arr, j + 1, key, counted=False)


def merge_sort(arr, tally):
    def _merge(lo, mid, hi):
        left, right = arr[lo:mid + 1], arr[mid + 1:hi + 1]
        i = j = 0
        k = lo
        while i < len(left) and j < len(right):
            yield tally.compare(lo + i, mid + 1 + j)
            if left[i] <= right[j]:
                yield tally.write(arr, k, left[i])
                i += 1
            else:
                yield tally.write(arr, k, right[j])
                j += 1
            k += 1
        while i < len(left):
            yield tally.write(arr, k, left[i])
            i += 1
            k += 1
        while j < len(right):
            yield tally.write(arr, k, right[j])
            j += 1
            k += 1

    def _sort(lo, hi):
        if lo < hi:
            mid = (lo + hi) // 2
            yield from _sort(lo, mid)
            yield from _sort(mid + 1, hi)
            yield from _merge(lo, mid, hi)

    yield from _sort(0, len(arr) - 1)


def _partition(arr, lo, hi, tally):
    """Lomuto partition of ``arr[lo:hi+1]`` around ``arr[hi]``.

    Yields the steps taken; the generator's return value is the pivot's
    final index.
    """
    pivot = arr[hi]
    i = lo - 1
    for j in range(lo, hi):
        yield tally.compare(j, hi)
        if arr[j] < pivot:
            i += 1
            yield tally.swap(arr, i, j)
    yield tally.swap(arr, i + 1, hi)
    return i + 1


def quick_sort(arr, tally):
    def _q(lo, hi):
        if lo >= hi:
            return
        p = yield from _partition(arr, lo, hi, tally)
        yield from _q(lo, p - 1)
        yield from _q(p + 1, hi)

    yield from _q(0, len(arr) - 1)


ALGORITHMS: Dict[str, SortGenerator] = {
    "bubble":    bubble_sort,
    "selection": selection_sort,
    "insertion": insertion_sort,
    "merge":     merge_sort,
    "quick":     quick_sort,
}


class AlgorithmInfo(NamedTuple):
    name: str
    description: str
    time_complexity: str
    space_complexity: str


ALGORITHM_INFO: Dict[str, AlgorithmInfo] = {
    "bubble": AlgorithmInfo(
        "Bubble Sort",
        "Repeatedly steps through the list, compares adjacent elements, "
        "and swaps them if they are in the wrong order.",
        "O(n²)", "O(1)"),
    "selection": AlgorithmInfo(
        "Selection Sort",
        "Repeatedly finds the minimum element from the unsorted part "
        "and puts it at the beginning.",
        "O(n²)", "O(1)"),
    "insertion": AlgorithmInfo(
        "Insertion Sort",
        "Builds the sorted array one item at a time by shifting elements as necessary.",
        "O(n²)", "O(1)"),
    "merge": AlgorithmInfo(
        "Merge Sort",
        "Divides the array into halves, sorts them, and then merges them back together.",
        "O(n log n)", "O(n)"),
    "quick": AlgorithmInfo(
        "Quick Sort",
        "Picks a pivot element and partitions the array around it, "
        "recursively sorting the sub-arrays.",
        "O(n log n) average, O(n²) worst case", "O(log n)"),
}


def _lookup(table, algorithm):
    try:
        return table[algorithm]
    except KeyError:
        raise UnknownAlgorithmError(
            f"Unknown algorithm {algorithm!r}; expected one of {', '.join(ALGORITHMS)}"
        ) from None


def describe(algorithm: str) -> AlgorithmInfo:
    return _lookup(ALGORITHM_INFO, algorithm)


def trace(algorithm: str, array: Sequence[int]) -> Trace:
    """
    Run ``algorithm`` on a copy of ``array`` and return the recorded Trace.

    The caller's array is never modified. Counters start from zero on every
    call. Raises UnknownAlgorithmError for an unsupported identifier.
    """
    sort = _lookup(ALGORITHMS, algorithm)
    initial = tuple(array)
    work = list(initial)
    tally = Tally()
    steps = tuple(sort(work, tally))
    result = tuple(work)
    logger.info("Traced %s on %d values: %d steps, %d comparisons, %d swaps",
                algorithm, len(initial), len(steps),
                tally.counters.comparisons, tally.counters.swaps)
    return Trace(algorithm=algorithm, initial=initial, steps=steps, result=result)
