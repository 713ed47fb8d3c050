import math


MAX_SCORE = 100


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> float:
    return max(0.0, min(float(MAX_SCORE), float(value)))
