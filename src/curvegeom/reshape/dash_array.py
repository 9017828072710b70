from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class DashItem:
    """One dash: `empty` gap length followed by `solid` drawn length."""

    empty: float
    solid: float


def validate_dash_array(dash_array: Sequence[float]) -> tuple[float, ...]:
    values = tuple(float(v) for v in dash_array)
    if not values:
        raise ValueError("dash_array must not be empty")
    if any(v < 0 or not math.isfinite(v) for v in values):
        raise ValueError("dash_array values must be finite and non-negative")
    # Solids sit at even indices once odd patterns are doubled.
    doubled = values * 2 if len(values) % 2 == 1 else values
    if sum(doubled[0::2]) == 0:
        raise ValueError("dash_array must contain a positive solid length")
    return values


class DashArrayGenerator:
    """Endless sequence of dash items for an SVG-style dash pattern.

    Odd-length patterns repeat twice so solids and gaps alternate, as
    `[1, 2, 1]` behaves like `[1, 2, 1, 1, 2, 1]`. The offset shifts where the
    pattern starts; the first item may be a partial solid or a partial gap.
    """

    def __init__(self, dash_array: Sequence[float], dash_offset: float = 0.0) -> None:
        values = validate_dash_array(dash_array)
        if len(values) % 2 == 1:
            values = values * 2
        self.pattern = values
        self.dash_offset = float(dash_offset)

    def _first_item(self) -> tuple[DashItem, int]:
        """First item after the offset, and the pattern index of its solid."""
        period = sum(self.pattern)
        offset = self.dash_offset - math.floor(self.dash_offset / period) * period

        current = 0.0
        for index, value in enumerate(self.pattern):
            current += value
            if current < offset:
                continue

            rest = current - offset
            if index % 2 == 0:
                return DashItem(0.0, rest), index

            next_index = (index + 1) % len(self.pattern)
            return DashItem(rest, self.pattern[next_index]), next_index

        # Rounding left `offset` a hair above the period.
        return DashItem(0.0, self.pattern[0]), 0

    def __iter__(self) -> Iterator[DashItem]:
        item, index = self._first_item()
        yield item

        size = len(self.pattern)
        while True:
            yield DashItem(self.pattern[(index + 1) % size], self.pattern[(index + 2) % size])
            index = (index + 2) % size
