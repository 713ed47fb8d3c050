from dataclasses import dataclass
from typing import Optional

from geometry import horizontal_distance, midpoint, safe_ratio, tilt_ratio
from keypoints import get_keypoint
from pose_types import Pose
from score_math import MAX_SCORE, round_half_up


REQUIRED_LANDMARKS = (
    "left_shoulder",
    "right_shoulder",
    "left_eye",
    "right_eye",
    "nose",
)

SHOULDER_PENALTY_SCALE = 500.0
SHOULDER_PENALTY_CAP = 50.0
HEAD_TILT_PENALTY_SCALE = 300.0
HEAD_TILT_PENALTY_CAP = 30.0
HEAD_OFFSET_PENALTY_SCALE = 200.0
HEAD_OFFSET_PENALTY_CAP = 20.0


@dataclass
class PostureBreakdown:
    shoulder_penalty: float
    head_tilt_penalty: float
    head_offset_penalty: float
    score: int

    @property
    def total_penalty(self) -> float:
        return self.shoulder_penalty + self.head_tilt_penalty + self.head_offset_penalty


def _penalty(ratio: Optional[float], scale: float, cap: float) -> float:
    # A degenerate ratio (vertically stacked landmarks) saturates the cap.
    if ratio is None:
        return cap
    return min(ratio * scale, cap)


def score_breakdown(pose: Pose) -> Optional[PostureBreakdown]:
    """Per-criterion penalties for one pose, or None without the required landmarks."""
    found = {name: get_keypoint(pose, name) for name in REQUIRED_LANDMARKS}
    if any(kp is None for kp in found.values()):
        return None

    left_shoulder = found["left_shoulder"]
    right_shoulder = found["right_shoulder"]
    left_eye = found["left_eye"]
    right_eye = found["right_eye"]
    nose = found["nose"]

    shoulder_penalty = _penalty(
        tilt_ratio(left_shoulder, right_shoulder),
        SHOULDER_PENALTY_SCALE,
        SHOULDER_PENALTY_CAP,
    )
    head_tilt_penalty = _penalty(
        tilt_ratio(left_eye, right_eye),
        HEAD_TILT_PENALTY_SCALE,
        HEAD_TILT_PENALTY_CAP,
    )

    mid_x, _ = midpoint(left_shoulder, right_shoulder)
    offset_ratio = safe_ratio(nose.x - mid_x, horizontal_distance(left_shoulder, right_shoulder))
    head_offset_penalty = _penalty(offset_ratio, HEAD_OFFSET_PENALTY_SCALE, HEAD_OFFSET_PENALTY_CAP)

    raw = MAX_SCORE - shoulder_penalty - head_tilt_penalty - head_offset_penalty
    return PostureBreakdown(
        shoulder_penalty=shoulder_penalty,
        head_tilt_penalty=head_tilt_penalty,
        head_offset_penalty=head_offset_penalty,
        score=max(0, round_half_up(raw)),
    )


def calculate_posture_score(pose: Pose) -> int:
    """
    Score a single pose from 0 to 100.

    Missing required landmarks yield 0, meaning "no reliable reading" rather
    than bad posture.
    """
    breakdown = score_breakdown(pose)
    if breakdown is None:
        return 0
    return breakdown.score
