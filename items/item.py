import random
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Palette — light "100" shades for bars and cells
# ---------------------------------------------------------------------------
COLORS_100: List[str] = [
    "#FFCDD2", "#F8BBD0", "#E1BEE7", "#D1C4E9", "#C5CAE9",
    "#BBDEFB", "#B3E5FC", "#B2EBF2", "#B2DFDB", "#C8E6C9",
    "#DCEDC8", "#F0F4C3", "#FFF9C4", "#FFECB3", "#FFE0B2",
    "#FFCCBC", "#D7CCC8", "#CFD8DC", "#F5F5F5",
]


def color_for(value: int) -> str:
    return COLORS_100[int(value) % len(COLORS_100)]


def random_color(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(COLORS_100)


def unique_random_values(count: int, upper: int, rng: Optional[random.Random] = None) -> List[int]:
    """`count` distinct integers in [0, upper)."""
    rng = rng or random
    return rng.sample(range(upper), count)


# ---------------------------------------------------------------------------
# Item — one cell of an array / stack / queue, or one bar of a sort
# ---------------------------------------------------------------------------
class Item:
    """
    Mutable cell.  Producers move data between cells; the index never changes.

    Attributes:
        index : Position in its container.
        data  : Stored key, or None when the cell is empty.
        color : Fill color used by the renderer (travels with the data).
        mark  : Highlight flag for the cell the algorithm is looking at.
    """

    __slots__ = ("index", "data", "color", "mark")

    def __init__(
        self,
        index: int = 0,
        data: Optional[int] = None,
        color: Optional[str] = None,
        mark: bool = False,
    ):
        self.index: int           = index
        self.data:  Optional[int] = data
        self.color: Optional[str] = color
        self.mark:  bool          = mark

    @property
    def empty(self) -> bool:
        return self.data is None

    def clear(self) -> "Item":
        self.data = None
        self.color = None
        return self

    def set_data(self, value: int, color: Optional[str] = None) -> "Item":
        self.data = value
        self.color = color or random_color()
        return self

    def copy_data_from(self, other: "Item") -> "Item":
        self.data = other.data
        self.color = other.color
        return self

    def move_data_from(self, other: "Item") -> "Item":
        self.copy_data_from(other)
        other.clear()
        return self

    def switch_data_with(self, other: "Item") -> "Item":
        self.data, other.data = other.data, self.data
        self.color, other.color = other.color, self.color
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "data": self.data, "color": self.color, "mark": self.mark}

    def __repr__(self) -> str:
        return f"Item({self.index}, {self.data!r}{', marked' if self.mark else ''})"
