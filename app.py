import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from typing import List, Optional

import cv2
import numpy as np

from camera import CameraStream
from config import AppConfig, load_config
from pose_detection import PoseDetector
from session import PostureSession
from ui import draw_score_gauge, draw_status_panel


logger = logging.getLogger(__name__)


def _build_session(config: AppConfig) -> PostureSession:
    camera = CameraStream(
        camera_index=config.camera.index,
        width=config.camera.width,
        height=config.camera.height,
        backend=config.camera.backend,
    )
    det = config.detector

    def detector_factory():
        return PoseDetector(
            model_complexity=det.model_complexity,
            min_detection_confidence=det.min_detection_confidence,
            min_tracking_confidence=det.min_tracking_confidence,
        )

    return PostureSession(
        camera,
        detector_factory,
        mirror=config.display.mirror,
        target_fps=config.camera.target_fps,
    )


def _compose(session: PostureSession, config: AppConfig):
    if session.running and session.latest_view is not None:
        view = session.latest_view.copy()
    else:
        view = np.zeros((config.camera.height, config.camera.width, 3), dtype=np.uint8)
        draw_status_panel(view, ["Camera is off"], origin=(10, config.camera.height // 2))

    draw_score_gauge(view, session.score)
    lines = [
        session.status_text,
        session.feedback_text,
        "Keys: Space start/stop, Q quit",
    ]
    draw_status_panel(view, lines, origin=(10, 30))
    return view


async def run(config: AppConfig) -> None:
    window_name = config.display.window_name
    session = _build_session(config)
    cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
    refresh = 1.0 / config.camera.target_fps if config.camera.target_fps > 0 else 0.0

    await session.load_model()
    await session.start()
    try:
        while True:
            cv2.imshow(window_name, _compose(session, config))
            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                break
            if key == ord(" "):
                await session.toggle()
            if cv2.getWindowProperty(window_name, cv2.WND_PROP_VISIBLE) < 1:
                break
            await asyncio.sleep(refresh)
    finally:
        await session.stop()
        session.close()
        cv2.destroyAllWindows()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Live webcam posture score.")
    parser.add_argument("--config", default=None, help="Path to a config.json file.")
    parser.add_argument("--camera", type=int, default=None, help="Camera index override.")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    logging.basicConfig(
        level=getattr(logging, config.logging.level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.camera is not None:
        config = replace(config, camera=replace(config.camera, index=args.camera))

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
