from __future__ import annotations

import math

import numpy as np
from jaxtyping import Float, jaxtyped

from .types import typechecker


@jaxtyped(typechecker=typechecker)
def solve_quadratic(a: float, b: float, c: float) -> tuple[float, float] | None:
    """Real roots of `a*x^2 + b*x + c = 0`, ascending.

    Returns None when `a == 0` or when the discriminant is negative.
    """
    if a == 0:
        return None

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0:
        return None

    # Multiplying by sign(a) keeps the pair sorted.
    delta = math.sqrt(discriminant) * (1.0 if a > 0 else -1.0)
    return (-b - delta) / (2.0 * a), (-b + delta) / (2.0 * a)


@jaxtyped(typechecker=typechecker)
def pick_periodic_values_in_range(
    value: float,
    period: float,
    start: float,
    end: float,
) -> list[float]:
    """All `value + k * period` inside the half-open range `[start, end)`."""
    if period <= 0:
        raise ValueError("period must be positive")

    v = math.ceil((start - value) / period) * period + value
    values: list[float] = []
    while v < end:
        values.append(v)
        v += period
    return values


@jaxtyped(typechecker=typechecker)
def pick_closest_periodic_value_in_range(
    value: float,
    period: float,
    start: float,
    end: float,
) -> float:
    """First `value + k * period` inside `[start, end)`.

    When no periodic value lands in the range, returns whichever range boundary
    lies closer to its nearest periodic value.
    """
    if period <= 0:
        raise ValueError("period must be positive")

    v = math.ceil((start - value) / period) * period + value
    if v < end:
        return v

    # `v` overshoots `end`, `v - period` undershoots `start`.
    if v - end < start - (v - period):
        return end
    return start


def mix(a: float, b: float, rate: float) -> float:
    return a + (b - a) * rate


def linear_step(x: float, start: float, end: float) -> float:
    if end == start:
        return 0.0 if x < start else 1.0
    return min(max((x - start) / (end - start), 0.0), 1.0)


def _lookup_axes(
    table: Float[np.ndarray, "N"],
) -> tuple[np.ndarray, np.ndarray]:
    n = table.shape[0]
    xs = np.linspace(0.0, 1.0, n + 1)
    ys = np.concatenate([[0.0], np.asarray(table, dtype=np.float64)])
    return xs, ys


@jaxtyped(typechecker=typechecker)
def lookup_x_rate_by_y_rate(y_rate: float, table: Float[np.ndarray, "N"]) -> float:
    """Invert a non-decreasing cumulative table.

    `table[i]` is the accumulated value at `x = (i + 1) / N`, and the value at
    `x = 0` is implicitly 0. Returns the x rate in [0, 1] where the accumulated
    value reaches `y_rate * table[-1]`.
    """
    xs, ys = _lookup_axes(table)
    total = float(ys[-1])
    if total <= 0:
        return float(y_rate)
    return float(np.interp(y_rate * total, ys, xs))


@jaxtyped(typechecker=typechecker)
def lookup_y_rate_by_x_rate(x_rate: float, table: Float[np.ndarray, "N"]) -> float:
    """Forward counterpart of `lookup_x_rate_by_y_rate`."""
    xs, ys = _lookup_axes(table)
    total = float(ys[-1])
    if total <= 0:
        return float(x_rate)
    return float(np.interp(x_rate, xs, ys)) / total
