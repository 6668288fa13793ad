"""
pages/__init__.py — Page Registry
==================================
Single source of truth for every visualization page.

    from pages import REGISTRY, create_page

Adding a page: write a Page subclass (or compose a SortPage with a new
SortAlgorithm) and add one PageInfo entry here.  Each create_page() call
returns a fresh page with its own controller; pages never share engine
state.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from pages.base          import Page
from pages.ordered_array import OrderedArrayPage
from pages.stack         import StackPage
from pages.queue         import QueuePage
from pages.sort          import (
    SortPage,
    SortAlgorithm,
    BUBBLE_SORT,
    SELECTION_SORT,
    INSERTION_SORT,
    QUICK_SORT,
)


# ---------------------------------------------------------------------------
# PageInfo — metadata card for each page
# ---------------------------------------------------------------------------
@dataclass
class PageInfo:
    key:         str                      # registry key, e.g. "ordered_array"
    label:       str                      # human label for the index page
    factory:     Callable[..., Page]      # builds a fresh page
    tags:        List[str] = field(default_factory=list)
    description: str       = ""


def _sort_page(algorithm: SortAlgorithm) -> Callable[..., Page]:
    def factory(**kwargs) -> Page:
        return SortPage(algorithm, **kwargs)
    return factory


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, PageInfo] = {

    "ordered_array": PageInfo(
        key="ordered_array", label="Ordered Array", factory=OrderedArrayPage,
        tags=["array", "search", "input"],
        description="Sorted array with linear or binary search for Ins / Find / Del.",
    ),

    "stack": PageInfo(
        key="stack", label="Stack", factory=StackPage,
        tags=["stack", "input"],
        description="Push, pop and peek on a fixed-size stack.",
    ),

    "queue": PageInfo(
        key="queue", label="Queue", factory=QueuePage,
        tags=["queue", "input"],
        description="Circular queue with front and rear pointers.",
    ),

    "bubble_sort": PageInfo(
        key="bubble_sort", label=BUBBLE_SORT.label, factory=_sort_page(BUBBLE_SORT),
        tags=BUBBLE_SORT.tags + ["run"], description=BUBBLE_SORT.description,
    ),

    "select_sort": PageInfo(
        key="select_sort", label=SELECTION_SORT.label, factory=_sort_page(SELECTION_SORT),
        tags=SELECTION_SORT.tags + ["run"], description=SELECTION_SORT.description,
    ),

    "insertion_sort": PageInfo(
        key="insertion_sort", label=INSERTION_SORT.label, factory=_sort_page(INSERTION_SORT),
        tags=INSERTION_SORT.tags + ["run"], description=INSERTION_SORT.description,
    ),

    "quick_sort": PageInfo(
        key="quick_sort", label=QUICK_SORT.label, factory=_sort_page(QUICK_SORT),
        tags=QUICK_SORT.tags + ["run"], description=QUICK_SORT.description,
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_page(key: str) -> Optional[PageInfo]:
    """Return PageInfo by key, or None."""
    return REGISTRY.get(key)


def list_pages() -> List[PageInfo]:
    """Return all registered pages in insertion order."""
    return list(REGISTRY.values())


def create_page(key: str, **kwargs) -> Page:
    """Build a fresh page.  Raises KeyError for unknown keys."""
    info = REGISTRY.get(key)
    if info is None:
        raise KeyError(key)
    return info.factory(**kwargs)


__all__ = [
    "Page",
    "PageInfo",
    "REGISTRY",
    "get_page",
    "list_pages",
    "create_page",
    "OrderedArrayPage",
    "StackPage",
    "QueuePage",
    "SortPage",
    "SortAlgorithm",
]
