# Tone curve control points and interpolation
"""
Per-channel tone curves.

A curve is a list of integer control points ``(x, y)`` in curve space
(0-255 on both axes). The first point always sits at ``x == 0`` and the last at
``x == 255``. Curves are evaluated with monotone cubic Hermite interpolation by
default; Catmull-Rom is available as a secondary mode.
"""

import math
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..config import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

Point = Tuple[int, int]

CHANNELS = ('rgb', 'r', 'g', 'b')
IDENTITY_POINTS: Tuple[Point, ...] = ((0, 0), (255, 255))
LEVEL_MIN = 0
LEVEL_MAX = 255


class InterpolationMode(Enum):
    MONOTONE = "monotone"
    CATMULL_ROM = "catmull_rom"

    @classmethod
    def from_setting(cls, value) -> "InterpolationMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.warning("Unknown interpolation mode '%s', using monotone.", value)
            return cls.MONOTONE


DEFAULT_MODE = InterpolationMode.from_setting(settings.DEFAULT_INTERPOLATION)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (matches what the sliders report).

    Exact halves go up rather than to the even neighbour: 154.5 -> 155.
    Only finite values can be rounded; use clamp_round for untrusted input.
    """
    return int(math.floor(value + 0.5))


def clamp_round(value, low: int, high: int) -> int:
    """Clamp into [low, high] and round half up.

    Infinities land on the nearest bound and NaN is treated as 0 (then clamped).
    """
    value = float(value)
    if math.isnan(value):
        value = 0.0
    return round_half_up(max(float(low), min(float(high), value)))


def clamp_level(value: float) -> int:
    """Round and clamp a value into the 0-255 level range."""
    return clamp_round(value, LEVEL_MIN, LEVEL_MAX)


# --- Interpolation ---

def _secant_slopes(points: Sequence[Point]) -> List[float]:
    slopes = []
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        dx = x1 - x0
        slopes.append((y1 - y0) / dx if dx != 0 else 0.0)
    return slopes


def monotone_tangents(points: Sequence[Point]) -> List[float]:
    """Tangents for monotone cubic Hermite interpolation over sorted points.

    Interior tangents are the mean of the neighbouring secants, or zero at a
    local extremum or flat segment. Tangents are then limited per segment
    (Fritsch-Carlson) so no segment can overshoot its end values.
    """
    n = len(points)
    if n < 2:
        return [0.0] * n
    s = _secant_slopes(points)
    m = [0.0] * n
    m[0] = s[0]
    m[-1] = s[-1]
    for j in range(1, n - 1):
        if s[j - 1] * s[j] <= 0:
            m[j] = 0.0
        else:
            m[j] = (s[j - 1] + s[j]) / 2.0

    for k, slope in enumerate(s):
        if slope == 0:
            m[k] = 0.0
            m[k + 1] = 0.0
            continue
        alpha = m[k] / slope
        beta = m[k + 1] / slope
        if alpha < 0:
            m[k] = 0.0
            alpha = 0.0
        if beta < 0:
            m[k + 1] = 0.0
            beta = 0.0
        norm = alpha * alpha + beta * beta
        if norm > 9.0:
            tau = 3.0 / math.sqrt(norm)
            m[k] = tau * alpha * slope
            m[k + 1] = tau * beta * slope
    return m


def catmull_rom_tangents(points: Sequence[Point]) -> List[float]:
    """Finite-difference tangents; smooth but may overshoot between points."""
    n = len(points)
    if n < 2:
        return [0.0] * n
    s = _secant_slopes(points)
    m = [0.0] * n
    m[0] = s[0]
    m[-1] = s[-1]
    for j in range(1, n - 1):
        dx = points[j + 1][0] - points[j - 1][0]
        m[j] = (points[j + 1][1] - points[j - 1][1]) / dx if dx != 0 else 0.0
    return m


def _hermite(points: Sequence[Point], tangents: Sequence[float], x: float) -> float:
    if x <= points[0][0]:
        return float(points[0][1])
    if x >= points[-1][0]:
        return float(points[-1][1])

    i = 0
    while i < len(points) - 2 and x > points[i + 1][0]:
        i += 1

    x0, y0 = points[i]
    x1, y1 = points[i + 1]
    dx = x1 - x0
    if dx == 0:
        return float(y1)

    t = (x - x0) / dx
    t2 = t * t
    t3 = t2 * t
    h00 = 2 * t3 - 3 * t2 + 1
    h10 = t3 - 2 * t2 + t
    h01 = -2 * t3 + 3 * t2
    h11 = t3 - t2
    return h00 * y0 + h10 * tangents[i] * dx + h01 * y1 + h11 * tangents[i + 1] * dx


def _prepare(points: Iterable[Point], mode: InterpolationMode):
    # Sorting a private copy lets a curve be evaluated mid-drag while its
    # point list is temporarily out of order.
    ordered = sorted(points, key=lambda p: p[0])
    if mode is InterpolationMode.CATMULL_ROM:
        tangents = catmull_rom_tangents(ordered)
    else:
        tangents = monotone_tangents(ordered)
    return ordered, tangents


def interpolate_monotone(points: Iterable[Point], x: float) -> float:
    ordered, tangents = _prepare(points, InterpolationMode.MONOTONE)
    return _hermite(ordered, tangents, x)


def interpolate_catmull_rom(points: Iterable[Point], x: float) -> float:
    ordered, tangents = _prepare(points, InterpolationMode.CATMULL_ROM)
    return _hermite(ordered, tangents, x)


def sample_curve(points: Iterable[Point], xs: Iterable[float],
                 mode: InterpolationMode = DEFAULT_MODE) -> List[float]:
    """Evaluate a curve at many inputs, computing the tangents only once."""
    ordered, tangents = _prepare(points, mode)
    return [_hermite(ordered, tangents, x) for x in xs]


# --- Curve model ---

def _sanitize_points(points: Iterable[Sequence[float]], max_points: int) -> List[Point]:
    """Coerce arbitrary input into a valid curve: clamped, sorted, unique x, pinned endpoints."""
    cleaned: Dict[int, int] = {}
    for p in points:
        x, y = clamp_level(p[0]), clamp_level(p[1])
        cleaned.setdefault(x, y)
    if len(cleaned) < 2:
        return list(IDENTITY_POINTS)

    pts = sorted(cleaned.items())
    if pts[0][0] != LEVEL_MIN:
        pts.insert(0, (LEVEL_MIN, pts[0][1]))
    if pts[-1][0] != LEVEL_MAX:
        pts.append((LEVEL_MAX, pts[-1][1]))

    if len(pts) > max_points:
        logger.warning("Curve has %d points, keeping the first %d.", len(pts), max_points)
        pts = pts[:max_points - 1] + [pts[-1]]
    return pts


class CurveModel:
    """Control points for the ``rgb``, ``r``, ``g`` and ``b`` curves of one adjustment."""

    def __init__(self, curves: Optional[Mapping[str, Iterable[Sequence[float]]]] = None,
                 max_points: int = settings.CURVE_MAX_POINTS):
        self.max_points = max_points
        self._curves: Dict[str, List[Point]] = {ch: list(IDENTITY_POINTS) for ch in CHANNELS}
        if curves:
            for channel, points in curves.items():
                self.set_points(channel, points)

    @staticmethod
    def _check_channel(channel: str) -> str:
        if channel not in CHANNELS:
            raise ValueError(f"Unknown curve channel '{channel}', expected one of {CHANNELS}")
        return channel

    def points(self, channel: str) -> List[Point]:
        return list(self._curves[self._check_channel(channel)])

    def set_points(self, channel: str, points: Iterable[Sequence[float]]) -> None:
        self._check_channel(channel)
        self._curves[channel] = _sanitize_points(points, self.max_points)

    def point_count(self, channel: str) -> int:
        return len(self._curves[self._check_channel(channel)])

    def is_full(self, channel: str) -> bool:
        return self.point_count(channel) >= self.max_points

    def add_point(self, channel: str, x: float, y: float) -> Optional[int]:
        """Insert a point in empty space and return its index.

        Returns None when the curve is full or a point already occupies the
        rounded x position.
        """
        pts = self._curves[self._check_channel(channel)]
        if len(pts) >= self.max_points:
            logger.debug("Curve '%s' is full (%d points).", channel, len(pts))
            return None
        new_point = (clamp_level(x), clamp_level(y))
        if any(px == new_point[0] for px, _ in pts):
            logger.debug("Curve '%s' already has a point at x=%d.", channel, new_point[0])
            return None
        pts.append(new_point)
        pts.sort(key=lambda p: p[0])
        return pts.index(new_point)

    def move_point(self, channel: str, index: int, x: float, y: float) -> Point:
        """Move a point in place. Endpoints keep their x pinned to 0 and 255.

        Interior points may cross their neighbours; the list is not re-sorted
        until ``normalize`` runs.
        """
        pts = self._curves[self._check_channel(channel)]
        last = len(pts) - 1
        if not 0 <= index <= last:
            raise IndexError(f"Point index {index} out of range for curve '{channel}'")
        if index == 0:
            new_x = LEVEL_MIN
        elif index == last:
            new_x = LEVEL_MAX
        else:
            new_x = clamp_level(x)
        pts[index] = (new_x, clamp_level(y))
        return pts[index]

    def delete_point(self, channel: str, index: int) -> bool:
        pts = self._curves[self._check_channel(channel)]
        if index <= 0 or index >= len(pts) - 1:
            logger.debug("Refusing to delete endpoint %d of curve '%s'.", index, channel)
            return False
        del pts[index]
        return True

    def reset_channel(self, channel: str) -> None:
        self._curves[self._check_channel(channel)] = list(IDENTITY_POINTS)

    def reset(self) -> None:
        for channel in CHANNELS:
            self.reset_channel(channel)

    def normalize(self, channel: str) -> List[Point]:
        """Restore ordering after a drag: sort interior points, drop x collisions.

        Endpoints always win a collision with an interior point.
        """
        pts = self._curves[self._check_channel(channel)]
        first, last = pts[0], pts[-1]
        seen = {first[0], last[0]}
        interior = []
        for p in sorted(pts[1:-1], key=lambda p: p[0]):
            if p[0] in seen:
                logger.debug("Dropping point %s of curve '%s': x already taken.", p, channel)
                continue
            seen.add(p[0])
            interior.append(p)
        self._curves[channel] = [first] + interior + [last]
        return list(self._curves[channel])

    def is_sorted(self, channel: str) -> bool:
        pts = self._curves[self._check_channel(channel)]
        return all(a[0] < b[0] for a, b in zip(pts, pts[1:]))

    def is_identity(self, channel: Optional[str] = None) -> bool:
        channels = CHANNELS if channel is None else (self._check_channel(channel),)
        return all(self._curves[ch] == list(IDENTITY_POINTS) for ch in channels)

    def interpolate(self, channel: str, x: float,
                    mode: InterpolationMode = DEFAULT_MODE) -> float:
        ordered, tangents = _prepare(self._curves[self._check_channel(channel)], mode)
        return _hermite(ordered, tangents, x)

    def sample(self, channel: str, xs: Iterable[float],
               mode: InterpolationMode = DEFAULT_MODE) -> List[float]:
        return sample_curve(self._curves[self._check_channel(channel)], xs, mode)

    def copy(self) -> "CurveModel":
        clone = CurveModel(max_points=self.max_points)
        clone._curves = {ch: list(pts) for ch, pts in self._curves.items()}
        return clone

    def __deepcopy__(self, memo):
        return self.copy()

    def to_dict(self) -> Dict[str, List[List[int]]]:
        return {ch: [[x, y] for x, y in self._curves[ch]] for ch in CHANNELS}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Iterable[Sequence[float]]]]) -> "CurveModel":
        """Build from stored data. Missing or unknown channels fall back to identity."""
        model = cls()
        if not data:
            return model
        for channel in CHANNELS:
            if channel in data:
                model.set_points(channel, data[channel])
        return model

    def __eq__(self, other) -> bool:
        if not isinstance(other, CurveModel):
            return NotImplemented
        return self._curves == other._curves

    def __repr__(self) -> str:
        return f"CurveModel({self._curves!r})"
