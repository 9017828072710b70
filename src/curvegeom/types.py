from __future__ import annotations

from enum import IntEnum
from typing import Literal, TypeAlias, TypedDict, Union

import numpy as np
from beartype import BeartypeConf, beartype
from jaxtyping import Float

Point2: TypeAlias = Float[np.ndarray, "2"]
Vector2: TypeAlias = Float[np.ndarray, "2"]
Points: TypeAlias = Float[np.ndarray, "N 2"]
AffineMatrix: TypeAlias = Float[np.ndarray, "3 3"]

Flag: TypeAlias = Literal[0, 1]
FillRule: TypeAlias = Literal["nonzero", "evenodd"]
LineCap: TypeAlias = Literal["butt", "round", "square"]
LineJoin: TypeAlias = Literal["miter", "round", "bevel"]

# Ints are accepted where floats are annotated, so `t=0` and `t=0.0` both pass.
typechecker = beartype(conf=BeartypeConf(is_pep484_tower=True))


class CurveType(IntEnum):
    MOVE_TO = 0
    LINE_TO = 1
    ARC_TO = 2
    ELLIPSE_TO = 3
    QUADRATIC_BEZIER_TO = 4
    CUBIC_BEZIER_TO = 5
    CLOSE = 6


class MoveData(TypedDict):
    type: Literal[CurveType.MOVE_TO]
    x: float
    y: float


class LineData(TypedDict):
    type: Literal[CurveType.LINE_TO]
    x: float
    y: float


class _ArcDataBase(TypedDict):
    type: Literal[CurveType.ARC_TO]
    x: float
    y: float
    r: float
    largeArcFlag: Flag
    clockwiseFlag: Flag


class ArcData(_ArcDataBase, total=False):
    # Derived values, present in `to_json()` output only.
    cx: float
    cy: float
    startAngle: float
    endAngle: float


class _EllipseDataBase(TypedDict):
    type: Literal[CurveType.ELLIPSE_TO]
    x: float
    y: float
    rx: float
    ry: float
    xAxisAngle: float
    largeArcFlag: Flag
    clockwiseFlag: Flag


class EllipseData(_EllipseDataBase, total=False):
    cx: float
    cy: float
    startAngle: float
    endAngle: float


class QuadraticBezierData(TypedDict):
    type: Literal[CurveType.QUADRATIC_BEZIER_TO]
    x: float
    y: float
    cx: float
    cy: float


class CubicBezierData(TypedDict):
    type: Literal[CurveType.CUBIC_BEZIER_TO]
    x: float
    y: float
    cx1: float
    cy1: float
    cx2: float
    cy2: float


class CloseData(TypedDict):
    type: Literal[CurveType.CLOSE]


CurveData: TypeAlias = Union[
    MoveData,
    LineData,
    ArcData,
    EllipseData,
    QuadraticBezierData,
    CubicBezierData,
    CloseData,
]
