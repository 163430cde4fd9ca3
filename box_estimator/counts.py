from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

# Wire names of the seven box types, in display order.
BOX_TYPE_KEYS = ("small", "medium", "large", "wardrobe", "dishPack", "mattressBag", "tvBox")
_ATTR_FOR_KEY = {
    "small": "small",
    "medium": "medium",
    "large": "large",
    "wardrobe": "wardrobe",
    "dishPack": "dish_pack",
    "mattressBag": "mattress_bag",
    "tvBox": "tv_box",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, like ``Math.round``."""

    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class BoxCounts:
    small: int = 0
    medium: int = 0
    large: int = 0
    wardrobe: int = 0
    dish_pack: int = 0
    mattress_bag: int = 0
    tv_box: int = 0

    def _values(self) -> tuple[int, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))

    def add(self, other: "BoxCounts") -> "BoxCounts":
        return BoxCounts(*(a + b for a, b in zip(self._values(), other._values())))

    def scale(self, multiplier: float) -> "BoxCounts":
        # each field is rounded on its own; the total is never rounded
        return BoxCounts(*(round_half_up(value * multiplier) for value in self._values()))

    def dot(self, weights: "BoxCounts") -> int:
        return sum(a * b for a, b in zip(self._values(), weights._values()))

    def clamped(self) -> "BoxCounts":
        return BoxCounts(*(max(0, value) for value in self._values()))

    @property
    def total(self) -> int:
        return sum(self._values())

    def as_dict(self) -> Dict[str, int]:
        return {key: getattr(self, attr) for key, attr in _ATTR_FOR_KEY.items()}

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "BoxCounts":
        """Build counts from camelCase or snake_case keys; missing or null fields are 0."""

        if not raw:
            return cls()
        values: Dict[str, int] = {}
        for key, attr in _ATTR_FOR_KEY.items():
            value = raw.get(key)
            if value is None:
                value = raw.get(attr)
            values[attr] = int(value) if value is not None else 0
        return cls(**values)
