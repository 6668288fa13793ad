"""
items/
------
Data layer the pages animate.  Public API:

    from items import Item, Marker
"""

from items.item   import Item, COLORS_100, color_for, random_color, unique_random_values
from items.marker import Marker

__all__ = [
    "Item",
    "Marker",
    "COLORS_100",
    "color_for",
    "random_color",
    "unique_random_values",
]
