"""
Eye localisation inside a detected face.

The borders of the face crop are mostly hair, ears and chin, where eye cascades
give false positives, so each eye is searched in a fixed window of the crop:
the left eye in the top-left region, the right eye in the mirrored top-right
region. A second cascade (e.g. eyeglasses) is tried on the same window when the
first one finds nothing.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple
import numpy as np

from .config import DetectConfig, PreprocessConfig
from .detect import detect_largest_object
from .imgutils import Point, Rect, crop, is_empty

logger = logging.getLogger(__name__)


@dataclass
class EyeSearch:
    left_eye: Optional[Point] = None
    right_eye: Optional[Point] = None
    left_rect: Optional[Rect] = None  # face-crop coordinates
    right_rect: Optional[Rect] = None
    searched_left: Optional[Rect] = None
    searched_right: Optional[Rect] = None

    @property
    def both_found(self) -> bool:
        return self.left_eye is not None and self.right_eye is not None


def eye_search_windows(
    face_w: int,
    face_h: int,
    config: Optional[PreprocessConfig] = None,
) -> Tuple[Rect, Rect]:
    """
    (left window, right window) in face-crop coordinates.
    """
    cfg = config or PreprocessConfig()
    left_x = int(round(face_w * cfg.eye_sx))
    top_y = int(round(face_h * cfg.eye_sy))
    width_x = int(round(face_w * cfg.eye_sw))
    height_y = int(round(face_h * cfg.eye_sh))
    right_x = int(round(face_w * (1.0 - cfg.eye_sx - cfg.eye_sw)))
    return (
        Rect(left_x, top_y, width_x, height_y),
        Rect(right_x, top_y, width_x, height_y),
    )


def _detect_eye(
    region: np.ndarray,
    window: Rect,
    eye_cascade1: Any,
    eye_cascade2: Any,
    side: str,
    detect_config: Optional[DetectConfig],
) -> Optional[Rect]:
    # Eye detection needs full resolution, so never shrink the window.
    scaled_width = region.shape[1]
    r = detect_largest_object(region, eye_cascade1, scaled_width, config=detect_config)
    if r is None and eye_cascade2 is not None:
        r = detect_largest_object(region, eye_cascade2, scaled_width, config=detect_config)
        logger.debug("2nd eye detector %s %s", side, "SUCCESS" if r is not None else "failed")
    elif r is not None:
        logger.debug("1st eye detector %s SUCCESS", side)

    if r is None:
        return None
    return r.offset(window.x, window.y)


def detect_both_eyes(
    face_gray: np.ndarray,
    eye_cascade1: Any,
    eye_cascade2: Any = None,
    config: Optional[PreprocessConfig] = None,
    detect_config: Optional[DetectConfig] = None,
) -> EyeSearch:
    """
    Search both eyes in a gray face crop. Each side is independent: one eye may
    be found while the other is None.
    """
    if is_empty(face_gray):
        return EyeSearch()

    face_h, face_w = face_gray.shape[:2]
    win_l, win_r = eye_search_windows(face_w, face_h, config)
    res = EyeSearch(searched_left=win_l, searched_right=win_r)
    if not (win_l.is_valid and win_r.is_valid):
        return res

    res.left_rect = _detect_eye(crop(face_gray, win_l), win_l, eye_cascade1, eye_cascade2, "LEFT", detect_config)
    res.right_rect = _detect_eye(crop(face_gray, win_r), win_r, eye_cascade1, eye_cascade2, "RIGHT", detect_config)

    if res.left_rect is not None:
        res.left_eye = res.left_rect.center
    if res.right_rect is not None:
        res.right_eye = res.right_rect.center
    return res
