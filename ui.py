from typing import Optional, Tuple

import cv2


# BGR
GREEN = (128, 222, 74)
YELLOW = (21, 204, 250)
RED = (68, 68, 239)
RING_BG = (81, 65, 51)
TEXT_COLOR = (255, 255, 255)


def describe_score(score: int) -> str:
    if score > 90:
        return "Excellent! Keep it up."
    if score > 70:
        return "Good, but a little adjustment could help."
    return "Try to sit up straighter."


def score_color(score: int) -> Tuple[int, int, int]:
    if score > 85:
        return GREEN
    if score > 60:
        return YELLOW
    return RED


def draw_score_gauge(
    frame,
    score: int,
    center: Optional[Tuple[int, int]] = None,
    radius: int = 54,
    thickness: int = 12,
) -> None:
    height, width = frame.shape[:2]
    if center is None:
        center = (width - radius - thickness - 10, radius + thickness + 10)
    color = score_color(score)

    cv2.circle(frame, center, radius, RING_BG, thickness, cv2.LINE_AA)
    # Progress arc starts at 12 o'clock and runs clockwise.
    sweep = 360.0 * max(0, min(100, score)) / 100.0
    if sweep > 0:
        cv2.ellipse(frame, center, (radius, radius), -90.0, 0.0, sweep, color, thickness, cv2.LINE_AA)

    label = str(score)
    font = cv2.FONT_HERSHEY_SIMPLEX
    (tw, th), _ = cv2.getTextSize(label, font, 1.2, 3)
    cv2.putText(frame, label, (center[0] - tw // 2, center[1] + th // 2), font, 1.2, color, 3, cv2.LINE_AA)


def draw_status_panel(frame, lines, origin=(10, 30)) -> None:
    x, y = origin
    for line in lines:
        cv2.putText(frame, line, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.6, TEXT_COLOR, 2)
        y += 26
