from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from . import debug

_seen: set[str] = set()


def log_once(key: str, message: str) -> None:
    if debug.is_verbose() and key not in _seen:
        _seen.add(key)
        debug.log(message)


def log_points(name: str, points: np.ndarray | Sequence[np.ndarray]) -> None:
    """Shape, finiteness and coordinate range of a point array."""
    if not debug.is_verbose():
        return
    arr = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if arr.shape[0] == 0:
        debug.log(f"{name}: no points")
        return

    finite_mask = np.isfinite(arr).all(axis=1)
    finite = arr[finite_mask]
    if finite.shape[0] == 0:
        debug.log(f"{name}: n={arr.shape[0]} finite=0")
        return

    minx, miny = finite.min(axis=0)
    maxx, maxy = finite.max(axis=0)
    debug.log(
        f"{name}: n={arr.shape[0]} finite={int(finite_mask.sum())} "
        f"x=[{minx:.6g}, {maxx:.6g}] y=[{miny:.6g}, {maxy:.6g}]"
    )


def log_points_once(key: str, name: str, points: np.ndarray | Sequence[np.ndarray]) -> None:
    if debug.is_verbose() and key not in _seen:
        _seen.add(key)
        log_points(name, points)
