from typing import Tuple

import cv2

from geometry import midpoint
from keypoints import accepted_keypoints, get_keypoint
from pose_types import Keypoint, Pose


# BGR
KEYPOINT_COLOR = (0, 215, 255)  # gold
SHOULDER_LINE_COLOR = (166, 184, 20)  # teal
ALIGNMENT_LINE_COLOR = (153, 72, 236)  # pink

KEYPOINT_RADIUS = 5
SHOULDER_LINE_THICKNESS = 3
ALIGNMENT_LINE_THICKNESS = 2


def _to_pixel(kp: Keypoint) -> Tuple[int, int]:
    return int(round(kp.x)), int(round(kp.y))


def draw_pose(frame, pose: Pose) -> None:
    """
    Draw accepted keypoints plus the shoulder and head-alignment guide lines.

    Drawing is additive: the caller is expected to have already placed the
    (mirrored) video frame on `frame`.
    """
    for kp in accepted_keypoints(pose):
        cv2.circle(frame, _to_pixel(kp), KEYPOINT_RADIUS, KEYPOINT_COLOR, -1, cv2.LINE_AA)

    left_shoulder = get_keypoint(pose, "left_shoulder")
    right_shoulder = get_keypoint(pose, "right_shoulder")
    nose = get_keypoint(pose, "nose")

    if left_shoulder is not None and right_shoulder is not None:
        cv2.line(
            frame,
            _to_pixel(left_shoulder),
            _to_pixel(right_shoulder),
            SHOULDER_LINE_COLOR,
            SHOULDER_LINE_THICKNESS,
            cv2.LINE_AA,
        )

    if nose is not None and left_shoulder is not None and right_shoulder is not None:
        mid_x, mid_y = midpoint(left_shoulder, right_shoulder)
        cv2.line(
            frame,
            _to_pixel(nose),
            (int(round(mid_x)), int(round(mid_y))),
            ALIGNMENT_LINE_COLOR,
            ALIGNMENT_LINE_THICKNESS,
            cv2.LINE_AA,
        )


def mirror_frame(frame):
    return cv2.flip(frame, 1)
