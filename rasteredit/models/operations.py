from __future__ import annotations
from enum import Enum


class MaskOperation(str, Enum):
    """Operations that can be applied selectively through a mask."""
    BLUR = "blur"
    SHARPEN = "sharpen"
    SEPIA = "sepia"
    GREYSCALE = "greyscale"
    RED_COMPONENT = "red-component"
    GREEN_COMPONENT = "green-component"
    BLUE_COMPONENT = "blue-component"
    VALUE_COMPONENT = "value-component"
    INTENSITY_COMPONENT = "intensity-component"
    LUMA_COMPONENT = "luma-component"

    @classmethod
    def parse(cls, value: "MaskOperation | str") -> "MaskOperation":
        if isinstance(value, cls):
            return value
        if not value:
            raise ValueError("Operation cannot be empty")
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unsupported operation: {value}") from None


class SplitSide(str, Enum):
    """Which side of a split view shows the processed image."""
    LEFT = "left"
    RIGHT = "right"
