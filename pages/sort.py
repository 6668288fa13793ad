"""
sort.py — Sorting Pages
========================
One SortPage implementation, composed with a SortAlgorithm:

    SortPage(SELECTION_SORT)      # markers: inner / outer / min
    SortPage(INSERTION_SORT)      # markers: inner / outer / temp
    SortPage(QUICK_SORT)          # markers: left / leftScan / right / rightScan / pivot

A SortAlgorithm is a generator function taking the page; every yield is
one comparison / swap / copy.  Quick sort recurses with nested
``yield from``, so a step may come from any depth of the call tree.
The page supplies the policy around it:

  - New   : toggle between an unordered and a reverse-ordered array
  - Size  : toggle between 10 and 100 bars
  - Step  : run the sort one checkpoint per click
  - Run   : timed run (200 ms per step for 10 bars, 40 ms for 100);
            toggling again pauses, Abort stops it

Markers are reset in a ``finally`` so an aborted sort (the controller
closes its generator) cleans up exactly like a finished one.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from engine import ControllerState, RUN_INTERVALS, StepProducer
from engine.producer import StepGenerator
from items import Item, Marker, color_for
from pages.base import Page

logger = logging.getLogger(__name__)


BASE_SIZE  = 10
LARGE_SIZE = 100
MAX_VALUE  = 100

SORT_ACTIONS = ("Step", "Run")


# ---------------------------------------------------------------------------
# SortAlgorithm — metadata card + generator for one sort
# ---------------------------------------------------------------------------
@dataclass
class SortAlgorithm:
    key:         str
    label:       str
    fn:          Callable[["SortPage"], StepGenerator]
    markers:     Callable[[int], List[Marker]]
    moves_label: str       = "Swaps"           # what the stats line counts
    uses_temp:   bool      = False
    description: str       = ""
    tags:        List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Algorithms
# ---------------------------------------------------------------------------
def bubble_sort(page: "SortPage") -> StepGenerator:
    items = page.items
    inner, inner_next, outer = page.markers
    swaps = comparisons = 0
    for last in range(len(items) - 1, 0, -1):
        outer.position = last
        for i in range(last):
            inner.position = i
            inner_next.position = i + 1
            comparisons += 1
            page.update_stats(swaps, comparisons)
            if items[i].data > items[i + 1].data:
                yield "Will be swapped"
                items[i].switch_data_with(items[i + 1])
                swaps += 1
                page.update_stats(swaps, comparisons)
            else:
                yield "Will not be swapped"
    return "Sort is complete"


def _bubble_markers(size: int) -> List[Marker]:
    return [
        Marker(position=0, size=1, color="blue", text="inner"),
        Marker(position=1, size=1, color="blue", text="inner+1"),
        Marker(position=size - 1, size=2, color="red", text="outer"),
    ]


def selection_sort(page: "SortPage") -> StepGenerator:
    items = page.items
    inner, outer, minimum = page.markers
    swaps = comparisons = 0
    for i in range(len(items) - 1):
        lowest = i
        outer.position = i
        minimum.position = i
        for j in range(i + 1, len(items)):
            inner.position = j
            yield "Searching for minimum"
            if items[j].data < items[lowest].data:
                lowest = j
                minimum.position = j
            comparisons += 1
            page.update_stats(swaps, comparisons)
        if lowest != i:
            yield "Will swap outer & min"
            items[i].switch_data_with(items[lowest])
            swaps += 1
            page.update_stats(swaps, comparisons)
        else:
            yield "Will not be swapped"
    return "Sort is complete"


def _selection_markers(size: int) -> List[Marker]:
    return [
        Marker(position=1, size=1, color="blue", text="inner"),
        Marker(position=0, size=2, color="red", text="outer"),
        Marker(position=0, size=3, color="purple", text="min"),
    ]


def insertion_sort(page: "SortPage") -> StepGenerator:
    items = page.items
    temp = page.temp
    inner, outer, _temp_marker = page.markers
    copies = comparisons = 0
    for i in range(1, len(items)):
        outer.position = i
        inner.position = i
        yield "Will copy outer to temp"
        items[i].switch_data_with(temp)
        copies += 1
        j = i
        while j > 0:
            comparisons += 1
            page.update_stats(copies, comparisons)
            if temp.data >= items[j - 1].data:
                yield "Have compared inner-1 and temp: no copy necessary"
                break
            yield "Have compared inner-1 and temp: will copy inner to inner-1"
            items[j].switch_data_with(items[j - 1])
            copies += 1
            page.update_stats(copies, comparisons)
            j -= 1
            inner.position = j
        yield "Will copy temp to inner"
        temp.switch_data_with(items[j])
    return "Sort is complete"


def _insertion_markers(size: int) -> List[Marker]:
    return [
        Marker(position=1, size=1, color="blue", text="inner"),
        Marker(position=1, size=2, color="red", text="outer"),
        Marker(position="temp", size=1, color="purple", text="temp"),
    ]


def quick_sort(page: "SortPage") -> StepGenerator:
    """Recursive quick sort, rightmost bar as pivot; every level is a nested ``yield from``."""
    items = page.items
    left_marker, left_scan, right_marker, right_scan, pivot_marker = page.markers
    swaps = comparisons = 0

    def partition(left: int, right: int) -> StepGenerator:
        nonlocal swaps, comparisons
        pivot = items[right].data
        left_ptr, right_ptr = left - 1, right
        while True:
            left_scan.position = max(left_ptr, left)
            right_scan.position = min(right_ptr, right - 1)
            if left_ptr >= left:
                yield "Will scan again"
            else:
                yield f"leftScan = {left}, rightScan = {right - 1}; will scan"
            left_ptr += 1
            comparisons += 1
            # the pivot itself stops the left scan
            while items[left_ptr].data < pivot:
                left_ptr += 1
                comparisons += 1
            right_ptr -= 1
            comparisons += 1
            while right_ptr > left and items[right_ptr].data > pivot:
                right_ptr -= 1
                comparisons += 1
            page.update_stats(swaps, comparisons)
            left_scan.position = left_ptr
            right_scan.position = right_ptr
            if left_ptr >= right_ptr:
                yield "Scans have met. Will swap pivot and leftScan"
                items[left_ptr].switch_data_with(items[right])
                swaps += 1
                page.update_stats(swaps, comparisons)
                yield f"Array partitioned: left ({left}-{left_ptr - 1}), right ({left_ptr + 1}-{right})"
                return left_ptr
            yield "Will swap leftScan and rightScan"
            items[left_ptr].switch_data_with(items[right_ptr])
            swaps += 1
            page.update_stats(swaps, comparisons)

    def sort(left: int, right: int, side: Optional[str] = None) -> StepGenerator:
        if side is not None:
            left_marker.position = left_scan.position = left
            right_marker.position = pivot_marker.position = right
            right_scan.position = right - 1
            yield f"Will sort {side} partition ({left}-{right})"
        if right - left < 1:
            yield f"Entering quick sort; partition ({left}-{right}) is too small to sort"
            return None
        yield f"Entering quick sort; will partition ({left}-{right})"
        pivot = yield from partition(left, right)
        yield from sort(left, pivot - 1, "left")
        yield from sort(pivot + 1, right, "right")

    page.update_stats(swaps, comparisons)
    yield from sort(0, len(items) - 1)
    return "Sort is complete"


def _quick_markers(size: int) -> List[Marker]:
    return [
        Marker(position=0, size=1, color="red", text="left"),
        Marker(position=0, size=2, color="blue", text="leftScan"),
        Marker(position=size - 1, size=1, color="red", text="right"),
        Marker(position=size - 2, size=2, color="blue", text="rightScan"),
        Marker(position=size - 1, size=3, color="purple", text="pivot"),
    ]


BUBBLE_SORT = SortAlgorithm(
    key="bubble_sort", label="Bubble Sort", fn=bubble_sort, markers=_bubble_markers,
    description="Compares neighbours and bubbles the largest bar to the right.",
    tags=["sort", "quadratic"],
)

SELECTION_SORT = SortAlgorithm(
    key="select_sort", label="Select Sort", fn=selection_sort, markers=_selection_markers,
    description="Finds the minimum of the unsorted part and swaps it into place.",
    tags=["sort", "quadratic"],
)

INSERTION_SORT = SortAlgorithm(
    key="insertion_sort", label="Insertion Sort", fn=insertion_sort, markers=_insertion_markers,
    moves_label="Copies", uses_temp=True,
    description="Takes bars out one at a time and shifts larger ones right to make room.",
    tags=["sort", "quadratic"],
)

QUICK_SORT = SortAlgorithm(
    key="quick_sort", label="Quick Sort", fn=quick_sort, markers=_quick_markers,
    description="Partitions around the rightmost bar, then sorts each side recursively.",
    tags=["sort", "recursive"],
)


# ---------------------------------------------------------------------------
# SortPage
# ---------------------------------------------------------------------------
class SortPage(Page):
    """
    Attributes:
        algorithm     : The SortAlgorithm this page animates.
        size          : Number of bars (BASE_SIZE or LARGE_SIZE).
        reverse_order : New creates a descending array when True.
        markers       : Current markers (reset after every sort).
        temp          : Spare cell for algorithms with a temp variable.
        stats         : "Swaps: n, Comparisons: m" line.
    """

    def __init__(self, algorithm: SortAlgorithm, **kwargs):
        super().__init__(**kwargs)
        self.algorithm:     SortAlgorithm  = algorithm
        self.key:           str            = algorithm.key
        self.title:         str            = algorithm.label
        self.size:          int            = BASE_SIZE
        self.reverse_order: bool           = False
        self.markers:       List[Marker]   = []
        self.temp:          Optional[Item] = None
        self.stats:         str            = ""
        self.init_items()
        self.init_markers()

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------
    def init_items(self, size: Optional[int] = None) -> None:
        if size is not None:
            self.size = size
        items = []
        for i in range(self.size):
            if self.reverse_order:
                value = (self.size - i) * MAX_VALUE // self.size
            else:
                value = self.rng.randrange(MAX_VALUE)
            items.append(Item(index=i).set_data(value, color_for(value)))
        self.items = items
        self.temp = Item(index=-1) if self.algorithm.uses_temp else None

    def init_markers(self) -> None:
        self.markers = self.algorithm.markers(self.size)

    def update_stats(self, moves: int = 0, comparisons: int = 0) -> None:
        self.stats = f"{self.algorithm.moves_label}: {moves}, Comparisons: {comparisons}"

    # ------------------------------------------------------------------
    # Page hooks
    # ------------------------------------------------------------------
    def actions(self):
        return {
            "New":  self.iterate_new,
            "Size": self.iterate_size,
            "Step": self.iterate_sort,
        }

    @property
    def supports_run(self) -> bool:
        return True

    def run_interval_ms(self) -> int:
        return RUN_INTERVALS["normal"] if self.size == BASE_SIZE else RUN_INTERVALS["fast"]

    def snapshot(self) -> Dict[str, Any]:
        return {
            "layout":  "vertical",
            "items":   [item.to_dict() for item in self.items],
            "markers": [marker.to_dict() for marker in self.markers],
            "temp":    self.temp.to_dict() if self.temp is not None else None,
            "stats":   self.stats or "—",
        }

    def on_run_toggled(self) -> bool:
        controller = self.controller
        if controller.is_running:
            return controller.pause()
        if not controller.is_active:
            controller.start(StepProducer(self.iterate_sort(), name="Run"))
            self.active_action = "Run"
            controller.run(self.run_interval_ms())
            return True
        if controller.state == ControllerState.STEP_PENDING and self.active_action in SORT_ACTIONS:
            controller.run(self.run_interval_ms())
            return True
        logger.warning("%s: run toggled while %r is %s, ignoring",
                       self.key, self.active_action, controller.state.value)
        return False

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def iterate_new(self) -> StepGenerator:
        self.reverse_order = not self.reverse_order
        self.init_items()
        self.init_markers()
        return f"Created {'reverse' if self.reverse_order else 'unordered'} array"
        yield

    def iterate_size(self) -> StepGenerator:
        size = LARGE_SIZE if self.size == BASE_SIZE else BASE_SIZE
        self.init_items(size)
        self.init_markers()
        return f"Created {size} elements array"
        yield

    def iterate_sort(self) -> StepGenerator:
        self.update_stats()
        self.init_markers()
        try:
            message = yield from self.algorithm.fn(self)
        finally:
            self.init_markers()
        return message
