"""
stack.py — Stack
=================
Fixed-capacity stack drawn as a column of cells with a "top" marker.
"""

from typing import Any, Dict

from engine.producer import StepGenerator
from items import Item, Marker, random_color
from pages.base import Page, valid_key

CAPACITY     = 10
INITIAL_FILL = 4


class StackPage(Page):
    key   = "stack"
    title = "Stack"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.length = 0
        self.init_items()
        self.top = Marker(position=self.length - 1, size=1, color="red", text="top")

    def init_items(self) -> None:
        self.items = [Item(index=i) for i in range(CAPACITY)]
        for item in self.items[:INITIAL_FILL]:
            item.set_data(self.rng.randrange(1000), random_color(self.rng))
        self.length = INITIAL_FILL

    def actions(self):
        return {
            "New":  self.iterate_new,
            "Push": self.iterate_push,
            "Pop":  self.iterate_pop,
            "Peek": self.iterate_peek,
        }

    def snapshot(self) -> Dict[str, Any]:
        return {
            "layout":  "horizontal",
            "reverse": True,
            "items":   [item.to_dict() for item in self.items],
            "markers": [self.top.to_dict()],
            "length":  self.length,
        }

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def iterate_new(self) -> StepGenerator:
        yield "Will create new empty stack"
        self.items = [Item(index=i) for i in range(CAPACITY)]
        self.length = 0
        self.top.position = -1
        return "New stack created; total items = 0"

    def iterate_push(self) -> StepGenerator:
        if self.length == len(self.items):
            return "ERROR: can't push, stack is full"
        yield "Enter key of item to push"
        answer = self.ask_number()
        yield "Dialog opened"
        if answer.cancelled:
            return None
        key = answer.value
        if not valid_key(key):
            return "ERROR: can't push. Need key between 0 and 999"
        yield f"Will push item with key {key}"
        self.top.position = self.length
        yield "Incremented top"
        self.items[self.length].set_data(key, random_color(self.rng))
        self.length += 1
        return f"Inserted item with key {key}; total items {self.length}"

    def iterate_pop(self) -> StepGenerator:
        if self.length == 0:
            return "ERROR: can't pop, stack is empty"
        yield "Will pop item from top of stack"
        item = self.items[self.length - 1]
        value = item.data
        item.clear()
        yield f"Item removed; returned value is {value}"
        self.length -= 1
        self.top.position = self.length - 1
        return "Decremented top"

    def iterate_peek(self) -> StepGenerator:
        if self.length == 0:
            return "ERROR: can't peek, stack is empty"
        yield "Will peek at item at top of stack"
        return f"Returned value is {self.items[self.length - 1].data}"
