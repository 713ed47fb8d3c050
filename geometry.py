from typing import Optional, Tuple

from pose_types import Keypoint


DEGENERATE_EPSILON = 1e-6


def horizontal_distance(a: Keypoint, b: Keypoint) -> float:
    return abs(a.x - b.x)


def vertical_distance(a: Keypoint, b: Keypoint) -> float:
    return abs(a.y - b.y)


def midpoint(a: Keypoint, b: Keypoint) -> Tuple[float, float]:
    return (a.x + b.x) / 2.0, (a.y + b.y) / 2.0


def safe_ratio(numerator: float, denominator: float) -> Optional[float]:
    # None when the denominator is too small to give a finite, meaningful ratio.
    if abs(denominator) < DEGENERATE_EPSILON:
        return None
    return abs(numerator) / abs(denominator)


def tilt_ratio(a: Keypoint, b: Keypoint) -> Optional[float]:
    # Rise over run of the segment a-b; 0 for a perfectly level pair.
    return safe_ratio(vertical_distance(a, b), horizontal_distance(a, b))
