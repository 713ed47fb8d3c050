from score_math import MAX_SCORE, clamp_score, round_half_up


class ScoreSmoother:
    """
    Exponential moving average over per-frame posture scores.

    alpha weights the new sample; the displayed value stays an integer in
    [0, 100] because each step is rounded.
    """

    def __init__(self, initial: int = MAX_SCORE, alpha: float = 0.2):
        self.initial = initial
        self.alpha = alpha
        self.value = initial

    def reset(self) -> None:
        self.value = self.initial

    def update(self, raw_score: float) -> int:
        blended = self.value * (1.0 - self.alpha) + clamp_score(raw_score) * self.alpha
        self.value = round_half_up(clamp_score(blended))
        return self.value
