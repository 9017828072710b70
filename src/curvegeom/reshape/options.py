from __future__ import annotations

from dataclasses import dataclass

from ..types import LineCap, LineJoin
from .dash_array import validate_dash_array

LINE_CAPS: tuple[LineCap, ...] = ("butt", "round", "square")
LINE_JOINS: tuple[LineJoin, ...] = ("miter", "round", "bevel")


@dataclass(frozen=True)
class StrokeStyle:
    line_cap: LineCap = "butt"
    line_join: LineJoin = "miter"
    miter_limit: float = 10.0
    dash_array: tuple[float, ...] | None = None
    dash_offset: float = 0.0

    def __post_init__(self) -> None:
        if self.line_cap not in LINE_CAPS:
            raise ValueError(f"line_cap must be one of {LINE_CAPS}, got {self.line_cap!r}")
        if self.line_join not in LINE_JOINS:
            raise ValueError(f"line_join must be one of {LINE_JOINS}, got {self.line_join!r}")
        if self.miter_limit < 1:
            raise ValueError("miter_limit must be >= 1")
        if self.dash_array is not None:
            object.__setattr__(self, "dash_array", validate_dash_array(self.dash_array))


@dataclass(frozen=True)
class GradientStroke:
    """Stroke width running from `start_width` to `end_width`.

    Width at length rate `r` is `mix(start_width, end_width, r ** power)`. With
    `index_range=(a, b)` the rate is 0 before curve `a` and ramps across curves
    `a` to `b - 1`; otherwise it ramps across the whole path.
    """

    start_width: float
    end_width: float
    power: float = 1.0
    index_range: tuple[int, int] | None = None

    def __post_init__(self) -> None:
        if self.start_width < 0 or self.end_width < 0:
            raise ValueError("stroke widths must be non-negative")
        if self.power <= 0:
            raise ValueError("power must be positive")
        if self.index_range is not None:
            start, end = self.index_range
            if start < 0 or end < start:
                raise ValueError(f"invalid index_range {self.index_range!r}")


@dataclass(frozen=True)
class SmoothOptions:
    radius: float
    # Corner `i` joins curve `i - 1` to curve `i`; None smooths every corner.
    corner_indices: tuple[int, ...] | None = None

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError("smooth radius must be positive")


@dataclass(frozen=True)
class WaveOptions:
    wave_length: float
    amplitude_rate: float
    smooth_rate: float = 0.0

    def __post_init__(self) -> None:
        if self.wave_length <= 0:
            raise ValueError("wave_length must be positive")
        if self.smooth_rate < 0:
            raise ValueError("smooth_rate must be non-negative")


@dataclass(frozen=True)
class ReshapeOptions:
    partial: tuple[float, float] | None = None
    smooth: SmoothOptions | None = None
    wave: WaveOptions | None = None
    gradient_stroking: GradientStroke | None = None

    def __post_init__(self) -> None:
        if self.partial is not None:
            start, end = self.partial
            if start > end:
                raise ValueError(f"partial start must not exceed end, got {self.partial!r}")
