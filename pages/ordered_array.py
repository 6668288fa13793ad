"""
ordered_array.py — Ordered Array
=================================
Sorted array of unique keys with New / Fill / Ins / Find / Del.
Ins, Find and Del locate keys with either a linear scan or a binary
search (the "search" option), each probe being one checkpoint.

Every action that needs a number follows the same shape:

    yield "Enter key of item to insert"
    answer = self.ask_number()
    yield "Dialog opened"            # controller waits for the modal here
    if answer.cancelled:
        return None                  # end silently
"""

import logging
from typing import Any, Dict, Optional, Tuple

from engine import NumberField
from engine.producer import StepGenerator
from items import Item, random_color, unique_random_values
from pages.base import Page, valid_key

logger = logging.getLogger(__name__)


MAX_SIZE      = 60
INITIAL_SIZE  = 20
INITIAL_FILL  = 10
KEY_LIMIT     = 1000
SEARCH_MODES  = ("linear", "binary")

SIZE_FIELD = NumberField(name="number", label="Number", min=0, max=MAX_SIZE, step=1)


class OrderedArrayPage(Page):
    key   = "ordered_array"
    title = "Ordered Array"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.length: int = 0
        self.search_mode: str = "linear"
        self.range: Optional[Tuple[int, int]] = None
        self.init_items()

    def init_items(self, size: int = INITIAL_SIZE, fill: int = INITIAL_FILL) -> None:
        values = sorted(unique_random_values(fill, KEY_LIMIT, self.rng))
        self.items = [
            Item(index=i, data=values[i] if i < fill else None,
                 color=random_color(self.rng) if i < fill else None, mark=i == 0)
            for i in range(size)
        ]
        self.length = fill

    # ------------------------------------------------------------------
    # Page hooks
    # ------------------------------------------------------------------
    def actions(self):
        return {
            "New":  self.iterate_new,
            "Fill": self.iterate_fill,
            "Ins":  self.iterate_insert,
            "Find": self.iterate_find,
            "Del":  self.iterate_delete,
        }

    def options(self) -> Dict[str, Any]:
        return {"search": self.search_mode}

    def set_option(self, name: str, value: Any) -> bool:
        if name != "search" or value not in SEARCH_MODES:
            raise ValueError(f"unknown option {name}={value!r}")
        if self.controller.is_active:
            logger.warning("%s: search mode locked while a run is active", self.key)
            return False
        self.search_mode = value
        return True

    def snapshot(self) -> Dict[str, Any]:
        return {
            "layout": "horizontal",
            "items":  [item.to_dict() for item in self.items],
            "length": self.length,
            "range":  list(self.range) if self.range else None,
        }

    # ------------------------------------------------------------------
    # Searches — sub-generators, value = index (or None)
    # ------------------------------------------------------------------
    def search(self, key: int, insertion: bool = False):
        if self.search_mode == "binary":
            return self.binary_search(key, insertion)
        return self.linear_search(key, insertion)

    def linear_search(self, key: int, insertion: bool = False):
        for i in range(self.length):
            self.reset_items_state(self.items[i])
            data = self.items[i].data
            if data == key or (insertion and data > key):
                return i
            if i != self.length - 1:
                yield f"Checking at index = {i + 1}"
        return None

    def binary_search(self, key: int, insertion: bool = False):
        lower, upper = 0, self.length - 1
        try:
            while lower <= upper:
                i = (lower + upper) // 2
                self.reset_items_state(self.items[i])
                self.range = (lower, upper)
                if self.items[i].data == key:
                    return i
                yield f"Checking index {i}; range = {lower} to {upper}"
                if self.items[i].data > key:
                    upper = i - 1
                else:
                    lower = i + 1
            return lower if insertion else None
        finally:
            self.range = None

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def iterate_new(self) -> StepGenerator:
        yield "Enter size of array to create"
        answer = self.ask_number(SIZE_FIELD)
        yield "Dialog opened"
        if answer.cancelled:
            return None
        size = answer.value
        if not valid_key(size, 0, MAX_SIZE):
            return f"ERROR: use size between 0 and {MAX_SIZE}"
        yield f"Will create empty array with {size} cells"
        self.items = [Item(index=i, mark=i == 0) for i in range(size)]
        self.length = 0
        return "New array created; total items = 0"

    def iterate_fill(self) -> StepGenerator:
        yield "Enter number of items to fill in"
        answer = self.ask_number(NumberField(min=0, max=len(self.items), step=1))
        yield "Dialog opened"
        if answer.cancelled:
            return None
        count = answer.value
        if not valid_key(count, 0, len(self.items)):
            return f"ERROR: can't fill more than {len(self.items)} items"
        yield f"Will fill in {count} items"
        values = sorted(unique_random_values(count, KEY_LIMIT, self.rng))
        for item in self.items:
            if item.index < count:
                item.set_data(values[item.index], random_color(self.rng))
            else:
                item.clear()
        self.length = count
        self.reset_items_state(self.items[0] if self.items else None)
        return f"Fill completed; total items = {count}"

    def iterate_insert(self) -> StepGenerator:
        if self.length == len(self.items):
            return "ERROR: can't insert, array is full"
        yield "Enter key of item to insert"
        answer = self.ask_number()
        yield "Dialog opened"
        if answer.cancelled:
            return None
        key = answer.value
        if not valid_key(key):
            return "ERROR: use key between 0 and 999"
        if any(item.data == key for item in self.items[: self.length]):
            return "ERROR: can't insert, duplicate found"
        yield f"Will insert item with key {key}"

        insert_at = yield from self.search(key, insertion=True)
        if insert_at is None:
            insert_at = self.length
        shifting = insert_at != self.length
        yield f"Will insert at index {insert_at}{', following shift' if shifting else ''}"
        self.reset_items_state(self.items[self.length])
        if shifting:
            yield "Will shift cells to make room"
        for i in range(self.length, insert_at, -1):
            self.items[i].move_data_from(self.items[i - 1])
            self.reset_items_state(self.items[i - 1])
            yield f"Shifted item from index {i - 1}"
        self.items[insert_at].set_data(key, random_color(self.rng))
        yield f"Have inserted item {key} at index {insert_at}"
        self.length += 1
        self.reset_items_state(self.items[0])
        return f"Insertion completed; total items {self.length}"

    def iterate_find(self) -> StepGenerator:
        yield "Enter key of item to find"
        answer = self.ask_number()
        yield "Dialog opened"
        if answer.cancelled:
            return None
        key = answer.value
        if not valid_key(key):
            return "ERROR: use key between 0 and 999"
        yield f"Looking for item with key {key}"
        found_at = yield from self.search(key)
        if found_at is None:
            yield f"No items with key {key}"
        else:
            yield f"Have found item at index = {found_at}"
        self.reset_items_state(self.items[0] if self.items else None)
        return None

    def iterate_delete(self) -> StepGenerator:
        yield "Enter key of item to delete"
        answer = self.ask_number()
        yield "Dialog opened"
        if answer.cancelled:
            return None
        key = answer.value
        if not valid_key(key):
            return "ERROR: use key between 0 and 999"
        yield f"Looking for item with key {key}"
        found_at = yield from self.search(key)
        if found_at is None:
            self.reset_items_state(self.items[0] if self.items else None)
            return f"No items with key {key}"
        self.items[found_at].clear()
        yield f"Have found and deleted item at index = {found_at}"
        last = self.length - 1
        if found_at != last:
            self.reset_items_state(self.items[found_at])
            yield "Will shift items"
        for i in range(found_at + 1, self.length):
            self.reset_items_state(self.items[i])
            self.items[i - 1].move_data_from(self.items[i])
            yield f"Shifted item from index {i}"
        self.length -= 1
        self.reset_items_state(self.items[0])
        return f"{'Shift completed' if found_at != last else 'Completed'}; total items {self.length}"

