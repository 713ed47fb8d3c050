import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CameraConfig:
    index: int = 0
    width: int = 640
    height: int = 480
    target_fps: int = 30
    # OpenCV capture API name, e.g. "any", "dshow", "v4l2", "avfoundation".
    backend: str = "any"


@dataclass(frozen=True)
class DetectorConfig:
    model_complexity: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass(frozen=True)
class DisplayConfig:
    window_name: str = "Posture Score"
    mirror: bool = True


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    camera: CameraConfig = field(default_factory=CameraConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _deep_get(d: Dict[str, Any], keys: List[str], default: Any = None) -> Any:
    cur: Any = d
    for k in keys:
        if not isinstance(cur, dict):
            return default
        cur = cur.get(k)
    return cur if cur is not None else default


def _as_int(v: Any, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return int(default)


def _as_float(v: Any, default: float) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return float(default)


def _as_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "on")
    return bool(default)


def _as_str(v: Any, default: str = "") -> str:
    return str(v) if v is not None else str(default)


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """
    Read config.json; anything missing or malformed falls back to defaults.
    """
    if path is None:
        return AppConfig()
    p = Path(path).expanduser()
    if not p.exists():
        logger.info("[Config] %s not found; using defaults.", p)
        return AppConfig()
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("[Config] could not read %s: %s; using defaults.", p, e)
        return AppConfig()
    if not isinstance(raw, dict):
        logger.warning("[Config] %s is not a JSON object; using defaults.", p)
        return AppConfig()

    cam = CameraConfig()
    det = DetectorConfig()
    disp = DisplayConfig()
    log = LoggingConfig()
    return AppConfig(
        camera=CameraConfig(
            index=_as_int(_deep_get(raw, ["camera", "index"]), cam.index),
            width=_as_int(_deep_get(raw, ["camera", "width"]), cam.width),
            height=_as_int(_deep_get(raw, ["camera", "height"]), cam.height),
            target_fps=_as_int(_deep_get(raw, ["camera", "target_fps"]), cam.target_fps),
            backend=_as_str(_deep_get(raw, ["camera", "backend"]), cam.backend).lower(),
        ),
        detector=DetectorConfig(
            model_complexity=_as_int(_deep_get(raw, ["detector", "model_complexity"]), det.model_complexity),
            min_detection_confidence=_as_float(
                _deep_get(raw, ["detector", "min_detection_confidence"]), det.min_detection_confidence
            ),
            min_tracking_confidence=_as_float(
                _deep_get(raw, ["detector", "min_tracking_confidence"]), det.min_tracking_confidence
            ),
        ),
        display=DisplayConfig(
            window_name=_as_str(_deep_get(raw, ["display", "window_name"]), disp.window_name),
            mirror=_as_bool(_deep_get(raw, ["display", "mirror"]), disp.mirror),
        ),
        logging=LoggingConfig(
            level=_as_str(_deep_get(raw, ["logging", "level"]), log.level).upper(),
        ),
    )
