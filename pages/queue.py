"""
queue.py — Queue
=================
Circular queue over a fixed array with "front" and "rear" markers.
"""

from typing import Any, Dict

from engine.producer import StepGenerator
from items import Item, Marker, random_color
from pages.base import Page, valid_key

CAPACITY     = 10
INITIAL_FILL = 4


class QueuePage(Page):
    key   = "queue"
    title = "Queue"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.length = 0
        self.init_items()
        self.front = Marker(position=0, size=1, color="red", text="front")
        self.rear  = Marker(position=self.length - 1, size=3, color="blue", text="rear")

    def init_items(self) -> None:
        self.items = [Item(index=i) for i in range(CAPACITY)]
        for item in self.items[:INITIAL_FILL]:
            item.set_data(self.rng.randrange(1000), random_color(self.rng))
        self.length = INITIAL_FILL

    def next_index(self, index: int) -> int:
        return 0 if index + 1 == len(self.items) else index + 1

    def actions(self):
        return {
            "New":  self.iterate_new,
            "Ins":  self.iterate_insert,
            "Rem":  self.iterate_remove,
            "Peek": self.iterate_peek,
        }

    def snapshot(self) -> Dict[str, Any]:
        return {
            "layout":  "horizontal",
            "reverse": True,
            "items":   [item.to_dict() for item in self.items],
            "markers": [self.front.to_dict(), self.rear.to_dict()],
            "length":  self.length,
        }

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def iterate_new(self) -> StepGenerator:
        yield "Will create new empty queue"
        self.items = [Item(index=i) for i in range(CAPACITY)]
        self.length = 0
        self.front.position = 0
        self.rear.position = -1
        return "New queue created; total items = 0"

    def iterate_insert(self) -> StepGenerator:
        if self.length == len(self.items):
            return "ERROR: can't push. Queue is full"
        yield "Enter key of item to insert"
        answer = self.ask_number()
        yield "Dialog opened"
        if answer.cancelled:
            return None
        key = answer.value
        if not valid_key(key):
            return "ERROR: can't insert. Need key between 0 and 999"
        yield f"Will insert item with key {key}"
        index = self.next_index(self.rear.position)
        self.items[index].set_data(key, random_color(self.rng))
        self.rear.position = index
        self.length += 1
        return f"Inserted item with key {key}"

    def iterate_remove(self) -> StepGenerator:
        if self.length == 0:
            return "ERROR: can't remove. Queue is empty"
        yield "Will remove item from front of queue"
        item = self.items[self.front.position]
        value = item.data
        item.clear()
        self.front.position = self.next_index(self.front.position)
        self.length -= 1
        return f"Item removed; Returned value is {value}"

    def iterate_peek(self) -> StepGenerator:
        if self.length == 0:
            return "ERROR: can't peek. Queue is empty"
        yield "Will peek at front of queue"
        return f"Returned value is {self.items[self.front.position].data}"
