from typing import Any, Dict, Optional, Union


class Marker:
    """
    Arrow drawn under a cell ("top", "front", "outer", …).

    Attributes:
        position : Cell index the marker points at, or a named slot such as "temp".
        size     : Arrow length tier (1–3) so overlapping markers stay readable.
        color    : Arrow color.
        text     : Label printed next to the arrow.
    """

    __slots__ = ("position", "size", "color", "text")

    def __init__(
        self,
        position: Union[int, str] = 0,
        size: int = 1,
        color: str = "red",
        text: Optional[str] = None,
    ):
        self.position = position
        self.size     = size
        self.color    = color
        self.text     = text

    def to_dict(self) -> Dict[str, Any]:
        return {"position": self.position, "size": self.size, "color": self.color, "text": self.text}

    def __repr__(self) -> str:
        return f"Marker({self.text!r} @ {self.position!r})"
