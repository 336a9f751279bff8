"""
Object detection adapter around OpenCV cascade classifiers (Haar or LBP).

Works for faces and for eyes inside a face crop. The input is converted to gray,
temporarily shrunk to `scaled_width` (200-320 px is enough to find faces) and
histogram-equalized, then the hits are mapped back to the input coordinates and
kept fully inside the image.

A "cascade" is anything with an OpenCV style `detectMultiScale` method.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional
import cv2
import numpy as np

from .config import DetectConfig
from .imgutils import Rect, clamp_rect, is_empty, to_gray

logger = logging.getLogger(__name__)

DEFAULT_FACE_CASCADE = "haarcascade_frontalface_default.xml"
DEFAULT_EYE_CASCADE = "haarcascade_eye.xml"
DEFAULT_EYEGLASSES_CASCADE = "haarcascade_eye_tree_eyeglasses.xml"


# -------------------------
# Cascades
# -------------------------

def load_cascade(name_or_path: str) -> cv2.CascadeClassifier:
    """
    Load a cascade by path, or by file name from the cascades bundled with OpenCV.
    """
    path = Path(name_or_path)
    if not path.exists():
        path = Path(cv2.data.haarcascades) / name_or_path

    cascade = cv2.CascadeClassifier(str(path))
    if cascade.empty():
        raise RuntimeError(f"Failed to load cascade: {path}")
    logger.debug("loaded cascade %s", path)
    return cascade


@dataclass
class Cascades:
    face: Any
    eye1: Any
    eye2: Optional[Any] = None  # fallback eye detector (e.g. eyeglasses)


def load_default_cascades() -> Cascades:
    return Cascades(
        face=load_cascade(DEFAULT_FACE_CASCADE),
        eye1=load_cascade(DEFAULT_EYE_CASCADE),
        eye2=load_cascade(DEFAULT_EYEGLASSES_CASCADE),
    )


# -------------------------
# Detection
# -------------------------

def detect_objects(
    img: np.ndarray,
    cascade: Any,
    scaled_width: Optional[int] = None,
    find_biggest: bool = False,
    config: Optional[DetectConfig] = None,
) -> List[Rect]:
    cfg = config or DetectConfig()
    if cascade is None or is_empty(img):
        return []
    if scaled_width is None:
        scaled_width = cfg.scaled_width

    gray = to_gray(img)
    img_h, img_w = gray.shape[:2]

    # Possibly shrink the image, to run much faster.
    scale = img_w / float(scaled_width) if scaled_width > 0 else 1.0
    if scaled_width > 0 and img_w > scaled_width:
        scaled_height = max(1, int(round(img_h / scale)))
        small = cv2.resize(gray, (scaled_width, scaled_height))
    else:
        scale = 1.0
        small = gray

    # Standardize brightness and contrast to improve dark images.
    equalized = cv2.equalizeHist(small)

    flags = cv2.CASCADE_FIND_BIGGEST_OBJECT if find_biggest else cv2.CASCADE_SCALE_IMAGE
    hits = cascade.detectMultiScale(
        equalized,
        scaleFactor=cfg.scale_factor,
        minNeighbors=cfg.min_neighbors,
        flags=flags,
        minSize=tuple(cfg.min_feature_size),
    )
    if hits is None or len(hits) == 0:
        return []

    out: List[Rect] = []
    for (x, y, w, h) in np.asarray(hits).reshape(-1, 4).tolist():
        r = Rect(
            int(round(x * scale)),
            int(round(y * scale)),
            int(round(w * scale)),
            int(round(h * scale)),
        )
        if r.is_valid:
            out.append(clamp_rect(r, img_w, img_h))
    return out


def detect_largest_object(
    img: np.ndarray,
    cascade: Any,
    scaled_width: Optional[int] = None,
    config: Optional[DetectConfig] = None,
) -> Optional[Rect]:
    """
    The single biggest object (by area), or None.
    """
    rects = detect_objects(img, cascade, scaled_width, find_biggest=True, config=config)
    if not rects:
        return None
    return max(rects, key=lambda r: r.area)


def detect_many_objects(
    img: np.ndarray,
    cascade: Any,
    scaled_width: Optional[int] = None,
    config: Optional[DetectConfig] = None,
) -> List[Rect]:
    return detect_objects(img, cascade, scaled_width, find_biggest=False, config=config)
