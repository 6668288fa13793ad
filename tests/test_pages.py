"""Pages: producers driven through the UI trigger events."""
import random

import pytest

from engine import ControllerState
from pages import REGISTRY, create_page, list_pages
from pages.ordered_array import OrderedArrayPage
from pages.queue import QueuePage
from pages.base import Page
from pages.sort import BUBBLE_SORT, INSERTION_SORT, LARGE_SIZE, QUICK_SORT, SELECTION_SORT, SortPage
from pages.stack import StackPage


def finish(page, limit=5000):
    """Click Next until the run ends."""
    for _ in range(limit):
        if not page.controller.is_active:
            return
        assert page.on_next_clicked()
    raise AssertionError("run did not finish")


def enter(page, action, value):
    """Click `action` until its dialog opens, then confirm `value`."""
    page.on_action_clicked(action)
    while not page.gate.is_open:
        assert page.controller.is_active, page.surface.message
        page.on_next_clicked()
    assert page.controller.state == ControllerState.WAITING_FOR_INPUT
    page.on_dialog_closed(True, str(value))


def stored(page):
    return [item.data for item in page.items[: page.length]]


def missing_key(page):
    present = set(stored(page))
    return next(k for k in range(500, 1000) if k not in present)


@pytest.fixture
def array_page():
    return OrderedArrayPage(rng=random.Random(7))


# ---------------------------------------------------------------------------
# Ordered array
# ---------------------------------------------------------------------------
def test_initial_array_is_sorted(array_page):
    data = stored(array_page)
    assert len(data) == 10
    assert data == sorted(data)
    assert len(array_page.items) == 20


@pytest.mark.parametrize("mode", ["linear", "binary"])
def test_insert_keeps_order(array_page, mode):
    array_page.set_option("search", mode)
    before = stored(array_page)
    key = missing_key(array_page)

    enter(array_page, "Ins", key)
    assert array_page.surface.message == f"Will insert item with key {key}"
    finish(array_page)

    assert stored(array_page) == sorted(before + [key])
    assert array_page.surface.message == "Insertion completed; total items 11"
    assert array_page.controller.state == ControllerState.IDLE
    assert array_page.active_action is None


def test_insert_message_sequence_starts_with_prompt(array_page):
    key = missing_key(array_page)
    enter(array_page, "Ins", key)
    assert array_page.surface.messages[:3] == [
        "Enter key of item to insert",
        "Dialog opened",
        f"Will insert item with key {key}",
    ]


@pytest.mark.parametrize("mode", ["linear", "binary"])
def test_find_existing_key(array_page, mode):
    array_page.set_option("search", mode)
    data = stored(array_page)
    enter(array_page, "Find", data[6])
    finish(array_page)
    assert "Have found item at index = 6" in array_page.surface.messages
    assert array_page.surface.message == "Have found item at index = 6"


@pytest.mark.parametrize("mode", ["linear", "binary"])
def test_find_missing_key(array_page, mode):
    array_page.set_option("search", mode)
    key = missing_key(array_page)
    enter(array_page, "Find", key)
    finish(array_page)
    assert array_page.surface.message == f"No items with key {key}"
    assert array_page.range is None


def test_binary_search_probes_fewer_cells():
    def probes(mode):
        page = OrderedArrayPage(rng=random.Random(7))
        page.set_option("search", mode)
        enter(page, "Find", stored(page)[9])
        finish(page)
        return sum(1 for m in page.surface.messages if m.startswith("Checking"))

    assert probes("binary") < probes("linear")


@pytest.mark.parametrize("mode", ["linear", "binary"])
def test_delete_shifts_items(array_page, mode):
    array_page.set_option("search", mode)
    data = stored(array_page)
    enter(array_page, "Del", data[2])
    finish(array_page)
    assert stored(array_page) == data[:2] + data[3:]
    assert array_page.items[9].data is None
    assert array_page.surface.message == "Shift completed; total items 9"


def test_delete_last_item_needs_no_shift(array_page):
    data = stored(array_page)
    enter(array_page, "Del", data[-1])
    finish(array_page)
    assert stored(array_page) == data[:-1]
    assert array_page.surface.message == "Completed; total items 9"


def test_delete_missing_key(array_page):
    key = missing_key(array_page)
    enter(array_page, "Del", key)
    finish(array_page)
    assert array_page.surface.message == f"No items with key {key}"
    assert len(stored(array_page)) == 10


def test_out_of_range_key_is_an_error(array_page):
    enter(array_page, "Ins", 1000)
    assert array_page.surface.message == "ERROR: use key between 0 and 999"
    assert array_page.controller.state == ControllerState.IDLE
    assert len(stored(array_page)) == 10


def test_duplicate_key_is_an_error(array_page):
    enter(array_page, "Ins", stored(array_page)[0])
    assert array_page.surface.message == "ERROR: can't insert, duplicate found"


def test_cancelled_dialog_ends_run_silently(array_page):
    array_page.on_action_clicked("Ins")
    array_page.on_action_clicked("Ins")
    assert array_page.gate.is_open
    array_page.on_dialog_closed(False)
    assert array_page.controller.state == ControllerState.IDLE
    assert array_page.surface.messages == ["Enter key of item to insert", "Dialog opened"]
    assert len(stored(array_page)) == 10


def test_malformed_dialog_value_keeps_waiting(array_page):
    array_page.on_action_clicked("Find")
    array_page.on_next_clicked()
    with pytest.raises(ValueError):
        array_page.on_dialog_closed(True, "twelve")
    assert array_page.controller.state == ControllerState.WAITING_FOR_INPUT
    array_page.on_dialog_closed(True, "12")
    assert array_page.surface.message == "Looking for item with key 12"


def test_clicks_are_filtered_by_state(array_page):
    array_page.on_action_clicked("Ins")
    # other buttons are disabled while a run is active
    assert array_page.on_action_clicked("Find") is False
    array_page.on_next_clicked()
    # the modal is open: Next does nothing
    assert array_page.on_next_clicked() is False
    assert array_page.set_option("search", "binary") is False
    assert array_page.search_mode == "linear"
    assert array_page.on_run_toggled() is False


def test_unknown_action_and_option(array_page):
    with pytest.raises(KeyError):
        array_page.on_action_clicked("Sort")
    with pytest.raises(ValueError):
        array_page.set_option("search", "hashed")


def test_new_and_fill(array_page):
    enter(array_page, "New", 5)
    finish(array_page)
    assert len(array_page.items) == 5
    assert array_page.length == 0
    assert array_page.surface.message == "New array created; total items = 0"

    enter(array_page, "Fill", 3)
    finish(array_page)
    data = stored(array_page)
    assert len(data) == 3
    assert data == sorted(data)
    assert array_page.items[3].data is None


def test_new_size_out_of_range(array_page):
    enter(array_page, "New", 61)
    assert array_page.surface.message == "ERROR: use size between 0 and 60"
    assert len(array_page.items) == 20


def test_full_array_rejects_insert_without_dialog(array_page):
    enter(array_page, "New", 0)
    finish(array_page)
    array_page.on_action_clicked("Ins")
    assert array_page.surface.message == "ERROR: can't insert, array is full"
    assert not array_page.gate.is_open
    assert array_page.controller.state == ControllerState.IDLE


def test_abort_while_dialog_open(array_page):
    array_page.on_action_clicked("Ins")
    array_page.on_next_clicked()
    assert array_page.on_abort_clicked() is True
    assert array_page.surface.message == "Aborted"
    assert array_page.active_action is None
    assert array_page.on_dialog_closed(True, "5") is False
    assert len(stored(array_page)) == 10


def test_page_state_dict(array_page):
    array_page.on_action_clicked("Ins")
    array_page.on_next_clicked()
    state = array_page.to_dict()
    assert state["state"] == "waiting_for_input"
    assert state["active"] == "Ins"
    assert state["dialog"]["max"] == 999
    assert state["message"] == "Dialog opened"
    assert state["snapshot"]["layout"] == "horizontal"
    assert state["options"] == {"search": "linear"}


# ---------------------------------------------------------------------------
# Stack & queue
# ---------------------------------------------------------------------------
def test_stack_push_pop_peek():
    page = StackPage(rng=random.Random(3))
    enter(page, "Push", 42)
    finish(page)
    assert page.length == 5
    assert page.top.position == 4

    page.on_action_clicked("Peek")
    finish(page)
    assert page.surface.message == "Returned value is 42"

    page.on_action_clicked("Pop")
    finish(page)
    assert "Item removed; returned value is 42" in page.surface.messages
    assert page.length == 4
    assert page.top.position == 3


def test_stack_empty_errors():
    page = StackPage(rng=random.Random(3))
    page.on_action_clicked("New")
    finish(page)
    assert page.top.position == -1
    page.on_action_clicked("Pop")
    assert page.surface.message == "ERROR: can't pop, stack is empty"
    page.on_action_clicked("Peek")
    assert page.surface.message == "ERROR: can't peek, stack is empty"


def test_queue_is_first_in_first_out():
    page = QueuePage(rng=random.Random(5))
    front_value = page.items[0].data
    page.on_action_clicked("Rem")
    finish(page)
    assert page.surface.message == f"Item removed; Returned value is {front_value}"
    assert page.front.position == 1
    assert page.length == 3


def test_queue_wraps_around_and_fills_up():
    page = QueuePage(rng=random.Random(5))
    for key in range(6):
        enter(page, "Ins", key)
        finish(page)
    assert page.length == 10
    assert page.rear.position == 9
    page.on_action_clicked("Rem")
    finish(page)
    enter(page, "Ins", 77)
    finish(page)
    assert page.rear.position == 0
    assert page.items[0].data == 77
    page.on_action_clicked("Ins")
    assert page.surface.message == "ERROR: can't push. Queue is full"


def test_queue_peek_empty():
    page = QueuePage(rng=random.Random(5))
    page.on_action_clicked("New")
    finish(page)
    page.on_action_clicked("Peek")
    assert page.surface.message == "ERROR: can't peek. Queue is empty"


# ---------------------------------------------------------------------------
# Sorts
# ---------------------------------------------------------------------------
ALGORITHMS = [BUBBLE_SORT, SELECTION_SORT, INSERTION_SORT, QUICK_SORT]


def bar_values(page):
    return [item.data for item in page.items]


def marker_positions(markers):
    return [marker.position for marker in markers]


@pytest.mark.parametrize("algorithm", ALGORITHMS, ids=lambda a: a.key)
def test_step_sort_sorts(algorithm):
    page = SortPage(algorithm, rng=random.Random(11))
    before = bar_values(page)
    page.on_action_clicked("Step")
    finish(page)
    assert bar_values(page) == sorted(before)
    assert page.surface.message == "Sort is complete"
    assert "Comparisons" in page.stats
    assert marker_positions(page.markers) == marker_positions(algorithm.markers(page.size))


@pytest.mark.parametrize("algorithm", ALGORITHMS, ids=lambda a: a.key)
def test_run_sort_with_timer(algorithm, clock):
    page = SortPage(algorithm, rng=random.Random(11), clock=clock)
    before = bar_values(page)
    assert page.on_run_toggled() is True
    assert page.controller.is_running
    assert page.active_action == "Run"
    ticks = 0
    while page.controller.is_active:
        clock.advance(0.2)
        ticks += page.on_tick()
    assert bar_values(page) == sorted(before)
    assert ticks == len(page.surface.messages)


def test_run_toggle_pauses_and_resumes(clock):
    page = SortPage(SELECTION_SORT, rng=random.Random(11), clock=clock)
    page.on_run_toggled()
    clock.advance(0.2)
    assert page.on_tick()
    assert page.on_run_toggled() is True
    assert page.controller.state == ControllerState.STEP_PENDING
    clock.advance(1.0)
    assert page.on_tick() is False
    assert page.on_next_clicked() is True
    assert page.on_run_toggled() is True
    assert page.controller.is_running


def test_abort_sort_resets_markers(clock):
    page = SortPage(INSERTION_SORT, rng=random.Random(11), clock=clock)
    page.on_run_toggled()
    for _ in range(5):
        clock.advance(0.2)
        page.on_tick()
    assert page.on_abort_clicked() is True
    assert page.surface.message == "Aborted"
    assert marker_positions(page.markers) == marker_positions(INSERTION_SORT.markers(page.size))
    clock.advance(1.0)
    assert page.on_tick() is False


def test_new_and_size_toggle_arrays():
    page = SortPage(BUBBLE_SORT, rng=random.Random(11))
    page.on_action_clicked("New")
    assert page.surface.message == "Created reverse array"
    assert page.controller.state == ControllerState.IDLE
    values = bar_values(page)
    assert values == sorted(values, reverse=True)

    page.on_action_clicked("Size")
    assert page.surface.message == f"Created {LARGE_SIZE} elements array"
    assert len(page.items) == LARGE_SIZE
    assert page.run_interval_ms() == 40


def test_other_actions_locked_while_sorting():
    page = SortPage(BUBBLE_SORT, rng=random.Random(11))
    page.on_action_clicked("Step")
    assert page.on_action_clicked("New") is False
    assert page.on_run_toggled() is True


def test_quick_sort_walks_partitions():
    page = SortPage(QUICK_SORT, rng=random.Random(3))
    page.on_action_clicked("Step")
    finish(page)
    messages = page.surface.messages
    assert messages[0] == "Entering quick sort; will partition (0-9)"
    assert any(m.startswith("Array partitioned: left (") for m in messages)
    assert any(m.startswith("Will sort left partition (") for m in messages)
    assert any(m.startswith("Will sort right partition (") for m in messages)
    assert messages[-1] == "Sort is complete"


def test_quick_sort_deep_recursion_on_reverse_array():
    page = SortPage(QUICK_SORT, rng=random.Random(3))
    page.on_action_clicked("New")
    page.on_action_clicked("Size")
    assert len(page.items) == LARGE_SIZE
    page.on_action_clicked("Step")
    finish(page, limit=50000)
    values = bar_values(page)
    assert values == sorted(values)
    assert page.surface.message == "Sort is complete"


def test_abort_inside_nested_partition_resets_markers():
    page = SortPage(QUICK_SORT, rng=random.Random(3))
    page.on_action_clicked("Step")
    while "right partition" not in page.surface.message:
        assert page.on_next_clicked()
    page.on_next_clicked()
    assert page.on_abort_clicked() is True
    assert page.surface.message == "Aborted"
    assert page.controller.state == ControllerState.IDLE
    assert marker_positions(page.markers) == marker_positions(QUICK_SORT.markers(page.size))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
def test_registry_builds_independent_pages():
    assert [info.key for info in list_pages()] == list(REGISTRY)
    first = create_page("ordered_array")
    second = create_page("ordered_array")
    assert first.controller is not second.controller
    assert first.gate is not second.gate
    for key in REGISTRY:
        page = create_page(key)
        assert page.key == key
    with pytest.raises(KeyError):
        create_page("red_black_tree")


def test_seeded_pages_are_reproducible():
    pages = [create_page(key, rng=random.Random(21)) for key in ("ordered_array", "ordered_array")]
    for page in pages:
        enter(page, "Ins", missing_key(page))
        finish(page)
    assert pages[0].snapshot() == pages[1].snapshot()

    stacks = [StackPage(rng=random.Random(4)), StackPage(rng=random.Random(4))]
    assert stacks[0].snapshot() == stacks[1].snapshot()


def test_page_requires_actions():
    with pytest.raises(TypeError):
        Page()

    class Blank(Page):
        def actions(self):
            return {}

    page = Blank()
    assert page.run_interval_ms() == 200
    assert page.supports_run is False
